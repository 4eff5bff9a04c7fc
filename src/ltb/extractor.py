# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Locate the JSON object embedded in a free-form model reply."""

import logging
import re

logger = logging.getLogger(__name__)

_JSON_FENCE_OPEN = re.compile(r"```[ \t]*json[ \t]*\r?\n?", re.IGNORECASE)
_FENCE_CLOSE = "```"


def extract_json(reply_text: str) -> str | None:
    """Return the JSON object text embedded in a model reply.

    A fenced block labeled ``json`` wins; otherwise the first balanced
    top-level ``{...}`` region is returned. Braces inside JSON string
    literals do not count towards nesting.

    Args:
        reply_text: Raw model reply.

    Returns:
        JSON substring, or ``None`` if the reply holds no JSON pattern.
    """
    if not reply_text:
        return None

    fenced = _extract_fenced_json(reply_text)
    if fenced:
        return fenced

    region = find_balanced_object(reply_text)
    if region is None:
        logger.debug(f"No JSON object found in reply (length={len(reply_text)})")
    return region


def _extract_fenced_json(text: str) -> str | None:
    """Return the content of the first ```json fence.

    An object inside the fence is delimited with the string-aware scanner, so
    backticks inside its string values do not end it early. Other content
    runs up to the closing fence.
    """
    for match in _JSON_FENCE_OPEN.finditer(text):
        if text[match.end() :].lstrip().startswith("{"):
            region = find_balanced_object(text, match.end())
            if region is not None:
                return region
        end = text.find(_FENCE_CLOSE, match.end())
        if end == -1:
            return None
        inner = text[match.end() : end].strip()
        if inner:
            return inner
    return None


def find_balanced_object(text: str, start: int = 0) -> str | None:
    """Scan for the first top-level balanced ``{...}`` region.

    The scanner tracks nesting depth and whether it is inside a double
    quoted string literal, honoring backslash escapes there.

    Args:
        text: Text to scan.
        start: Offset to start scanning from.

    Returns:
        The balanced region including its braces, or ``None`` when no ``{``
        exists or the first one never closes.
    """
    begin = text.find("{", start)
    if begin == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(begin, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[begin : index + 1]
    return None
