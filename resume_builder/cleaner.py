"""
Shared clean-ups for free-text form fields.
"""
from __future__ import annotations
import re
from typing import List

SYMBOLS = "*-•●‣▪"

_LEAD  = re.compile(rf"^[{re.escape(SYMBOLS)}\s]+")
_TRAIL = re.compile(rf"[{re.escape(SYMBOLS)}\s]+$")
_ITEM_SPLIT = re.compile(r",|\r\n|\n|\r")
_LINE_SPLIT = re.compile(r"\r\n|\n|\r")

# ───────────────────────────────────────── helpers ──
def strip_symbols(s: str) -> str:
    """Drop bullet/dash symbols and whitespace from both ends."""
    return _TRAIL.sub("", _LEAD.sub("", s or ""))

def split_items(raw: str) -> List[str]:
    """Comma/newline separated items, trimmed, case kept, empties dropped."""
    return [x.strip() for x in _ITEM_SPLIT.split(raw or "") if x.strip()]

def split_lines(raw: str) -> List[str]:
    """One item per line with list markers removed."""
    return [x for x in (strip_symbols(ln) for ln in _LINE_SPLIT.split(raw or "")) if x]

# ───────────────────────────────────────── normaliser ──
def normalize_list(raw: str) -> List[str]:
    """
    Turn a skills-style block into a deduplicated list.

    "Python, python, SQL" -> ["python", "sql"]; first occurrence wins.
    """
    seen, out = set(), []
    for piece in _ITEM_SPLIT.split(raw or ""):
        item = strip_symbols(piece).lower()
        if item and item not in seen:
            seen.add(item)
            out.append(item)
    return out
