#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for the vimwiki-ast CLI.

Configuration may live in ``.vimwiki-ast.toml``, ``.vimwiki-ast.yaml``,
``.vimwiki-ast.yml`` or ``.vimwiki-ast.json``, or in the
``[tool.vimwiki-ast]`` table of a ``pyproject.toml``. Recognized top-level
tables are ``[parser]`` (:class:`VimwikiParserOptions` fields), ``[html]``
(:class:`HtmlRendererOptions` fields), ``[format]``
(:class:`VimwikiRendererOptions` fields) and ``[cache]`` (``dir`` and
``enabled``).

Example ``.vimwiki-ast.toml``::

    [parser]
    track_positions = false

    [html]
    link_canonicalize = true
    link_base_url = "https://wiki.example.com/"

    [[html.wikis]]
    path = "~/vimwiki"

    [format]
    pad_table_cells = false

    [cache]
    dir = "~/.cache/vimwiki-ast"
"""

import argparse
import json
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional

import yaml

from vimwiki_ast.constants import CONFIG_FILE_NAMES, PYPROJECT_TOOL_SECTION

CONFIG_FILENAMES = [*CONFIG_FILE_NAMES, "pyproject.toml"]
KNOWN_SECTIONS = ("parser", "html", "format", "cache")


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.vimwiki-ast]`` table from a pyproject.toml file.

    Returns an empty dict when the table is absent.

    Raises
    ------
    argparse.ArgumentTypeError
        If pyproject.toml cannot be parsed or the table is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid TOML in {pyproject_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading {pyproject_path}: {e}") from e

    config = data.get("tool", {}).get(PYPROJECT_TOOL_SECTION)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"[tool.{PYPROJECT_TOOL_SECTION}] section in {pyproject_path} must be a table, "
            f"got {type(config).__name__}"
        )
    return config


def _has_pyproject_section(pyproject_path: Path) -> bool:
    try:
        return bool(_load_pyproject_section(pyproject_path))
    except argparse.ArgumentTypeError:
        return False


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Search ``start_dir`` and its parents for a configuration file.

    In each directory the dedicated config files are checked in
    :data:`CONFIG_FILENAMES` order; a ``pyproject.toml`` only counts when it
    has a ``[tool.vimwiki-ast]`` table.

    Parameters
    ----------
    start_dir : Path, optional
        Directory to start from (the current working directory by default)

    Returns
    -------
    Path or None
        First configuration file found walking upward

    """
    current = (start_dir or Path.cwd()).resolve()
    for directory in [current, *current.parents]:
        for filename in CONFIG_FILENAMES:
            candidate = directory / filename
            if not candidate.is_file():
                continue
            if filename == "pyproject.toml" and not _has_pyproject_section(candidate):
                continue
            return candidate
    return None


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file in the working tree, else in the home directory.

    Returns
    -------
    Path or None
        Path to discovered config file, or None if not found

    """
    config_in_parents = find_config_in_parents(start_dir)
    if config_in_parents:
        return config_in_parents

    home = Path.home()
    for filename in CONFIG_FILE_NAMES:
        config_path = home / filename
        if config_path.is_file():
            return config_path
    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a JSON, TOML, YAML or pyproject.toml file.

    The format is chosen from the file name: ``pyproject.toml`` yields its
    ``[tool.vimwiki-ast]`` table, other files are read by extension.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary loaded from file

    Raises
    ------
    argparse.ArgumentTypeError
        If the file cannot be read, parsed, or has an unsupported format

    Examples
    --------
    >>> config = load_config_file(".vimwiki-ast.toml")
    >>> config.get("parser", {}).get("track_positions")
    False

    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise argparse.ArgumentTypeError(f"Configuration file does not exist: {config_path}")
    if not config_path.is_file():
        raise argparse.ArgumentTypeError(f"Configuration path is not a file: {config_path}")

    filename = config_path.name.lower()
    ext = config_path.suffix.lower()

    if filename == "pyproject.toml":
        config = _load_pyproject_section(config_path)
    elif ext == ".toml":
        config = _load_toml_config(config_path)
    elif ext in (".yaml", ".yml"):
        config = _load_yaml_config(config_path)
    elif ext == ".json":
        config = _load_json_config(config_path)
    else:
        raise argparse.ArgumentTypeError(f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml")

    validate_config(config, config_path)
    return config


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid TOML in config file {config_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading TOML config {config_path}: {e}") from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid JSON in config file {config_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading JSON config {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(f"JSON config file must contain an object, got {type(config).__name__}")
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise argparse.ArgumentTypeError(f"Invalid YAML in config file {config_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading YAML config {config_path}: {e}") from e

    # An empty YAML document is an empty configuration
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(f"YAML config file must contain a mapping, got {type(config).__name__}")
    return config


def validate_config(config: Dict[str, Any], source: Path | str = "<config>") -> None:
    """Check that every known section of ``config`` is a table.

    Unknown top-level keys are allowed so one file can serve several tools.

    Raises
    ------
    argparse.ArgumentTypeError
        If a known section is not a mapping

    """
    for section in KNOWN_SECTIONS:
        value = config.get(section)
        if value is not None and not isinstance(value, dict):
            raise argparse.ArgumentTypeError(
                f"Section [{section}] in {source} must be a table, got {type(value).__name__}"
            )


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge two configuration dictionaries; ``override`` wins.

    Examples
    --------
    >>> merge_configs({"html": {"a": 1}, "x": 1}, {"html": {"b": 2}, "x": 2})
    {'html': {'a': 1, 'b': 2}, 'x': 2}

    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def load_config_with_priority(
    explicit_path: Optional[str] = None,
    env_var_path: Optional[str] = None,
    start_dir: Optional[Path] = None,
) -> Dict[str, Any]:
    """Load configuration with proper priority handling.

    Priority order (highest to lowest):

    1. Explicit config file path (``--config``)
    2. ``VIMWIKI_AST_CONFIG`` environment variable
    3. Auto-discovered config file

    Returns
    -------
    dict
        Loaded configuration dictionary (empty dict if no config found)

    Raises
    ------
    argparse.ArgumentTypeError
        If a config file is named but cannot be loaded

    """
    if explicit_path:
        return load_config_file(explicit_path)
    if env_var_path:
        return load_config_file(env_var_path)

    discovered_path = discover_config_file(start_dir)
    if discovered_path:
        return load_config_file(discovered_path)
    return {}


def config_section(config: Dict[str, Any], section: str) -> Dict[str, Any]:
    """The ``section`` table of ``config``, or an empty dict."""
    return dict(config.get(section) or {})
