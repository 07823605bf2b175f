from __future__ import annotations
import re
import unicodedata

_COMBINING_RX = re.compile("[\u0300-\u036f]")
_SPACE_RX = re.compile(r"\s+")


def normalize_answer(text) -> str:
    """Lower-case, strip accents and squeeze whitespace; non-strings become ""."""
    if not isinstance(text, str):
        return ""
    out = unicodedata.normalize("NFD", text.lower())
    out = _COMBINING_RX.sub("", out).strip()
    return _SPACE_RX.sub(" ", out)
