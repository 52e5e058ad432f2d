from __future__ import annotations

import re


def normalize_whitespace(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def clip_around(text: str, start: int, width: int, ellipsis: str = "…") -> str:
    """Taglia `text` a `width` caratteri centrati su `start`."""
    if width <= 0 or len(text) <= width:
        return text
    begin = max(0, min(start - width // 2, len(text) - width))
    end = begin + width
    clipped = text[begin:end]
    if begin > 0:
        clipped = ellipsis + clipped
    if end < len(text):
        clipped = clipped + ellipsis
    return clipped
