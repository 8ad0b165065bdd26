"""
Markup normalization for feed text: tag stripping and entity decoding.
"""
from __future__ import annotations

import re
from typing import Optional

TAG_PATTERN = re.compile(r"<[^>]+>")
ENTITY_PATTERN = re.compile(r"&(#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);")

NAMED_ENTITIES = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "nbsp": " ",
    "lsquo": "‘",
    "rsquo": "’",
    "ldquo": "“",
    "rdquo": "”",
    "ndash": "–",
    "mdash": "—",
    "hellip": "…",
}


def _decode_entity(match: re.Match) -> str:
    body = match.group(1)
    if body[0] != "#":
        return NAMED_ENTITIES.get(body, match.group(0))

    try:
        codepoint = int(body[2:], 16) if body[1] in "xX" else int(body[1:])
        return chr(codepoint)
    except (ValueError, OverflowError):
        # Out of the Unicode range; keep the reference untouched
        return match.group(0)


def clean(raw: Optional[str]) -> str:
    """
    Strip HTML tags and decode entities.

    Entities are decoded in a single pass, so ``&amp;lt;`` becomes ``&lt;``
    rather than ``<``. Unknown or malformed references are left as-is.

    Args:
        raw: Text that may contain markup, or None

    Returns:
        Plain text, trimmed
    """
    if not raw:
        return ""
    text = TAG_PATTERN.sub("", raw)
    text = ENTITY_PATTERN.sub(_decode_entity, text)
    return text.strip()
