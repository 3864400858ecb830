#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/utils/encoding.py
"""Character encoding detection for wiki files.

Wiki pages are expected to be UTF-8, so a strict UTF-8 decode is always
attempted first. Only bytes that are not valid UTF-8 go through chardet
detection and then the fallback encodings.
"""

from __future__ import annotations

import logging
from typing import IO

import chardet

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_ENCODINGS = ("utf-8-sig", "cp1252", "latin-1")


def detect_encoding(data: bytes, sample_size: int = 8192, confidence_threshold: float = 0.7) -> str | None:
    """Detect the encoding of ``data`` with chardet.

    Parameters
    ----------
    data : bytes
        Binary data to inspect
    sample_size : int, default 8192
        Number of leading bytes handed to chardet
    confidence_threshold : float, default 0.7
        Minimum confidence for a detection to be trusted

    Returns
    -------
    str or None
        Detected encoding, or None when chardet is unsure

    """
    result = chardet.detect(data[:sample_size])
    encoding = result.get("encoding") if result else None
    if not encoding:
        logger.debug("chardet: No encoding detected")
        return None

    confidence = result.get("confidence") or 0.0
    logger.debug(f"chardet detected encoding: {encoding} (confidence: {confidence:.2f})")
    if confidence < confidence_threshold:
        logger.debug(f"chardet confidence {confidence:.2f} below threshold {confidence_threshold}")
        return None
    return encoding


def read_text_with_encoding_detection(
    data: bytes,
    fallback_encodings: tuple[str, ...] | list[str] | None = None,
    use_chardet: bool = True,
) -> str:
    """Decode ``data`` as text.

    Tries, in order: strict UTF-8, the chardet-detected encoding (when
    enabled), each fallback encoding, and finally UTF-8 with replacement
    characters.

    Examples
    --------
    >>> read_text_with_encoding_detection("= Título =".encode("utf-8"))
    '= Título ='

    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.debug(f"Not valid utf-8: {e}")

    if use_chardet:
        detected = detect_encoding(data)
        if detected:
            try:
                text = data.decode(detected)
            except (UnicodeDecodeError, LookupError) as e:
                logger.debug(f"Failed to decode with chardet-detected encoding {detected}: {e}")
            else:
                logger.debug(f"Successfully decoded with chardet-detected encoding: {detected}")
                return text

    for encoding in fallback_encodings or DEFAULT_FALLBACK_ENCODINGS:
        try:
            text = data.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"Failed to decode with {encoding}: {e}")
            continue
        logger.debug(f"Successfully decoded with encoding: {encoding}")
        return text

    logger.warning("All encoding attempts failed, using utf-8 with error replacement")
    return data.decode("utf-8", errors="replace")


def normalize_stream_to_text(stream: IO[bytes] | IO[str]) -> str:
    """Read a binary or text stream and return its content as text.

    Raises
    ------
    TypeError
        If ``stream.read()`` returns something other than bytes or str

    """
    content = stream.read()
    if isinstance(content, bytes):
        return read_text_with_encoding_detection(content)
    if isinstance(content, str):
        return content
    raise TypeError(f"Stream read() returned unexpected type {type(content).__name__}. Expected bytes or str.")
