#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/ast/serialization.py
"""JSON serialization and deserialization for the element model.

Every located element becomes a dictionary tagged with its ``node_type`` and
carrying its ``region``, so a page read back from JSON keeps the offsets
(and line/column positions, when they were tracked) of the original parse.
The loader's cache stores pages in this format.

Examples
--------
Serialize a page to JSON:

    >>> from vimwiki_ast.parsers.page import parse_page
    >>> from vimwiki_ast.ast.serialization import page_to_json, page_from_json
    >>> page = parse_page("= Title =\\n")
    >>> json_str = page_to_json(page, indent=2)

Read it back:

    >>> restored = page_from_json(json_str)
    >>> restored.elements[0].element.level
    1

"""

from __future__ import annotations

import datetime
import json
from typing import Any, Callable, Optional, Union

from vimwiki_ast.ast.links import LinkData, LinkKind
from vimwiki_ast.ast.lists import (
    List,
    ListItem,
    ListItemAttributes,
    ListItemSuffix,
    ListItemTodoStatus,
    ListItemType,
    OrderedListItemType,
    UnorderedListItemType,
)
from vimwiki_ast.ast.location import Located, Region
from vimwiki_ast.ast.nodes import (
    Blockquote,
    CodeBlock,
    CodeInline,
    Comment,
    CommentInline,
    CommentKind,
    DecoratedText,
    Decoration,
    Definition,
    DefinitionList,
    DefinitionListItem,
    Divider,
    Header,
    InlineElementContainer,
    Keyword,
    KeywordKind,
    Link,
    MathBlock,
    MathInline,
    Page,
    Paragraph,
    Placeholder,
    PlaceholderKind,
    Tags,
    Term,
    Text,
)
from vimwiki_ast.ast.tables import Cell, CellKind, CellPos, ColumnAlign, Table
from vimwiki_ast.exceptions import ValidationError

SCHEMA_VERSION = 1


# ============================================================================
# Serialization
# ============================================================================


def _date_to_str(value: Optional[datetime.date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _serialize_link_data(data: LinkData) -> dict[str, Any]:
    description: Any = data.description
    if isinstance(description, LinkData):
        description = _serialize_link_data(description)
    return {"uri": data.uri, "description": description, "properties": data.properties}


def _serialize_container(container: InlineElementContainer) -> list[dict[str, Any]]:
    return [element_to_dict(element) for element in container.elements]


def _serialize_list_item(item: ListItem) -> dict[str, Any]:
    contents = []
    for content in item.contents:
        if isinstance(content.element, InlineElementContainer):
            contents.append(
                {
                    "node_type": "InlineElementContainer",
                    "region": content.region.to_dict(),
                    "elements": _serialize_container(content.element),
                }
            )
        else:
            contents.append(element_to_dict(content))

    status = item.attributes.todo_status
    return {
        "item_type": item.item_type.name,
        "suffix": item.suffix.name,
        "pos": item.pos,
        "todo_status": status.name if status is not None else None,
        "contents": contents,
    }


def _serialize_table(table: Table) -> dict[str, Any]:
    cells = []
    for pos, located in sorted(table.cells.items()):
        cell = located.element
        cells.append(
            {
                "row": pos.row,
                "col": pos.col,
                "region": located.region.to_dict(),
                "kind": cell.kind.value,
                "content": _serialize_container(cell.content) if cell.content is not None else None,
                "align": cell.align.value if cell.align is not None else None,
            }
        )
    return {"centered": table.centered, "cells": cells}


# Dispatch table mapping element types to the fields they contribute
_SERIALIZATION_DISPATCH: dict[type, Callable[[Any], dict[str, Any]]] = {
    Text: lambda n: {"content": n.content},
    DecoratedText: lambda n: {"kind": n.kind.value, "contents": [element_to_dict(c) for c in n.contents]},
    Link: lambda n: {
        "kind": n.kind.value,
        "data": _serialize_link_data(n.data),
        "index": n.index,
        "name": n.name,
        "date": _date_to_str(n.date),
    },
    CodeInline: lambda n: {"code": n.code},
    MathInline: lambda n: {"formula": n.formula},
    Tags: lambda n: {"names": list(n.names)},
    Keyword: lambda n: {"kind": n.kind.value},
    CommentInline: lambda n: {"kind": n.kind.value, "lines": list(n.lines)},
    Header: lambda n: {"level": n.level, "centered": n.centered, "content": _serialize_container(n.content)},
    Paragraph: lambda n: {"lines": [_serialize_container(line) for line in n.lines]},
    Term: lambda n: {"content": _serialize_container(n.content)},
    Definition: lambda n: {"content": _serialize_container(n.content)},
    DefinitionList: lambda n: {
        "items": [
            {"term": element_to_dict(item.term), "definitions": [element_to_dict(d) for d in item.definitions]}
            for item in n.items
        ]
    },
    CodeBlock: lambda n: {"language": n.language, "properties": dict(n.properties), "lines": list(n.lines)},
    MathBlock: lambda n: {"environment": n.environment, "lines": list(n.lines)},
    Blockquote: lambda n: {"lines": list(n.lines)},
    Divider: lambda n: {},
    Placeholder: lambda n: {"kind": n.kind.value, "value": n.value, "name": n.name, "date": _date_to_str(n.date)},
    Comment: lambda n: {"kind": n.kind.value, "lines": list(n.lines)},
    List: lambda n: {"items": [element_to_dict(item) for item in n.items]},
    ListItem: _serialize_list_item,
    Table: _serialize_table,
}


def element_to_dict(located: Located[Any]) -> dict[str, Any]:
    """Convert a located element to a dictionary.

    Parameters
    ----------
    located : Located
        Any located block or inline element, list item included

    Returns
    -------
    dict
        ``{"node_type": ..., "region": ..., <fields>}``

    Raises
    ------
    ValidationError
        If the wrapped value is not a known element type

    Examples
    --------
    >>> from vimwiki_ast.ast.location import Located, Region
    >>> element_to_dict(Located(Text("hi"), Region(0, 2)))
    {'node_type': 'Text', 'region': {'offset': 0, 'length': 2}, 'content': 'hi'}

    """
    element = located.element
    serializer = _SERIALIZATION_DISPATCH.get(type(element))
    if serializer is None:
        raise ValidationError(
            f"Unknown element type for serialization: {type(element).__name__}",
            parameter_name="located",
            parameter_value=type(element).__name__,
        )
    return {"node_type": type(element).__name__, "region": located.region.to_dict(), **serializer(element)}


def page_to_dict(page: Page) -> dict[str, Any]:
    """Convert a page to a dictionary."""
    return {"node_type": "Page", "elements": [element_to_dict(block) for block in page.elements]}


def page_to_json(page: Page, indent: Optional[int] = None) -> str:
    """Serialize a page to a JSON string with a schema version.

    Parameters
    ----------
    page : Page
        The page to serialize
    indent : int or None, default = None
        Number of spaces for indentation (None for compact format)

    Returns
    -------
    str
        ``{"schema_version": 1, "node_type": "Page", "elements": [...]}``

    """
    versioned = {"schema_version": SCHEMA_VERSION, **page_to_dict(page)}
    return json.dumps(versioned, indent=indent, ensure_ascii=False)


# ============================================================================
# Deserialization
# ============================================================================


def _region(data: dict[str, Any]) -> Region:
    region = data.get("region")
    return Region.from_dict(region) if region else Region()


def _str_to_date(value: Optional[str]) -> Optional[datetime.date]:
    return datetime.date.fromisoformat(value) if value else None


def _deserialize_link_data(data: dict[str, Any]) -> LinkData:
    description = data.get("description")
    if isinstance(description, dict):
        description = _deserialize_link_data(description)
    return LinkData(uri=data["uri"], description=description, properties=data.get("properties"))


def _deserialize_container(data: list[dict[str, Any]]) -> InlineElementContainer:
    return InlineElementContainer([element_from_dict(element) for element in data])


def _deserialize_definition_list(data: dict[str, Any]) -> DefinitionList:
    items = [
        DefinitionListItem(
            term=element_from_dict(item["term"]),
            definitions=[element_from_dict(d) for d in item.get("definitions", [])],
        )
        for item in data.get("items", [])
    ]
    return DefinitionList(items)


def _deserialize_item_type(data: dict[str, Any]) -> ListItemType:
    name = data["item_type"]
    if name in OrderedListItemType.__members__:
        return OrderedListItemType[name]
    return UnorderedListItemType[name]


def _deserialize_list_item(data: dict[str, Any]) -> ListItem:
    contents: list[Located[Any]] = []
    for content in data.get("contents", []):
        if content.get("node_type") == "InlineElementContainer":
            contents.append(Located(_deserialize_container(content.get("elements", [])), _region(content)))
        else:
            contents.append(element_from_dict(content))

    status = data.get("todo_status")
    return ListItem(
        item_type=_deserialize_item_type(data),
        suffix=ListItemSuffix[data.get("suffix", "NONE")],
        pos=int(data.get("pos", 0)),
        contents=contents,
        attributes=ListItemAttributes(todo_status=ListItemTodoStatus[status] if status else None),
    )


def _deserialize_table(data: dict[str, Any]) -> Table:
    cells: dict[CellPos, Located[Cell]] = {}
    for cell_data in data.get("cells", []):
        content = cell_data.get("content")
        align = cell_data.get("align")
        cell = Cell(
            kind=CellKind(cell_data["kind"]),
            content=_deserialize_container(content) if content is not None else None,
            align=ColumnAlign(align) if align is not None else None,
        )
        cells[CellPos(int(cell_data["row"]), int(cell_data["col"]))] = Located(cell, _region(cell_data))
    return Table(cells=cells, centered=bool(data.get("centered", False)))


# Dispatch table mapping node type strings to deserializer functions
_DESERIALIZATION_DISPATCH: dict[str, Callable[[dict[str, Any]], Any]] = {
    "Text": lambda d: Text(d["content"]),
    "DecoratedText": lambda d: DecoratedText(
        kind=Decoration(d["kind"]), contents=[element_from_dict(c) for c in d.get("contents", [])]
    ),
    "Link": lambda d: Link(
        kind=LinkKind(d["kind"]),
        data=_deserialize_link_data(d["data"]),
        index=d.get("index"),
        name=d.get("name"),
        date=_str_to_date(d.get("date")),
    ),
    "CodeInline": lambda d: CodeInline(d["code"]),
    "MathInline": lambda d: MathInline(d["formula"]),
    "Tags": lambda d: Tags(list(d.get("names", []))),
    "Keyword": lambda d: Keyword(KeywordKind(d["kind"])),
    "CommentInline": lambda d: CommentInline(CommentKind(d["kind"]), list(d.get("lines", []))),
    "Header": lambda d: Header(
        level=int(d["level"]), content=_deserialize_container(d.get("content", [])), centered=d.get("centered", False)
    ),
    "Paragraph": lambda d: Paragraph([_deserialize_container(line) for line in d.get("lines", [])]),
    "Term": lambda d: Term(_deserialize_container(d.get("content", []))),
    "Definition": lambda d: Definition(_deserialize_container(d.get("content", []))),
    "DefinitionList": _deserialize_definition_list,
    "CodeBlock": lambda d: CodeBlock(
        language=d.get("language"), properties=dict(d.get("properties") or {}), lines=list(d.get("lines", []))
    ),
    "MathBlock": lambda d: MathBlock(lines=list(d.get("lines", [])), environment=d.get("environment")),
    "Blockquote": lambda d: Blockquote(list(d.get("lines", []))),
    "Divider": lambda d: Divider(),
    "Placeholder": lambda d: Placeholder(
        kind=PlaceholderKind(d["kind"]), value=d.get("value"), name=d.get("name"), date=_str_to_date(d.get("date"))
    ),
    "Comment": lambda d: Comment(CommentKind(d["kind"]), list(d.get("lines", []))),
    "List": lambda d: List([element_from_dict(item) for item in d.get("items", [])]),
    "ListItem": _deserialize_list_item,
    "Table": _deserialize_table,
}


def element_from_dict(data: dict[str, Any]) -> Located[Any]:
    """Convert a dictionary produced by :func:`element_to_dict` back to a located element.

    Raises
    ------
    ValidationError
        If ``node_type`` is missing or unknown, or a field holds a value the
        element does not accept

    """
    node_type = data.get("node_type")
    if not node_type:
        raise ValidationError("Dictionary must contain 'node_type' field", parameter_name="node_type")

    deserializer = _DESERIALIZATION_DISPATCH.get(node_type)
    if deserializer is None:
        raise ValidationError(
            f"Unknown node type: {node_type}", parameter_name="node_type", parameter_value=node_type
        )

    try:
        return Located(deserializer(data), _region(data))
    except (AttributeError, KeyError, ValueError, TypeError) as e:
        raise ValidationError(
            f"Invalid {node_type} data: {e}", parameter_name="node_type", parameter_value=node_type, original_error=e
        ) from e


def page_from_dict(data: dict[str, Any]) -> Page:
    """Convert a dictionary produced by :func:`page_to_dict` back to a page."""
    if data.get("node_type") != "Page":
        raise ValidationError(
            f"Expected a Page, got {data.get('node_type')!r}",
            parameter_name="node_type",
            parameter_value=data.get("node_type"),
        )
    return Page([element_from_dict(block) for block in data.get("elements", [])])


def page_from_json(json_str: Union[str, bytes], validate_schema: bool = True) -> Page:
    """Deserialize a JSON string to a page.

    JSON without a ``schema_version`` is read as version 1.

    Parameters
    ----------
    json_str : str or bytes
        JSON produced by :func:`page_to_json`
    validate_schema : bool, default True
        Reject schema versions other than the current one

    Raises
    ------
    ValidationError
        If the schema version is unsupported or the data does not describe
        a page
    json.JSONDecodeError
        If the JSON string is malformed

    """
    data = json.loads(json_str)
    if not isinstance(data, dict):
        raise ValidationError("Page JSON must be an object", parameter_name="json_str")

    schema_version = data.pop("schema_version", SCHEMA_VERSION)
    if validate_schema and schema_version != SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported schema version: {schema_version} (expected {SCHEMA_VERSION})",
            parameter_name="schema_version",
            parameter_value=schema_version,
        )
    return page_from_dict(data)


__all__ = [
    "SCHEMA_VERSION",
    "element_from_dict",
    "element_to_dict",
    "page_from_dict",
    "page_from_json",
    "page_to_dict",
    "page_to_json",
]
