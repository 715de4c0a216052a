"""
Sanitized HTML ➜ named resume sections
– finds a section by its heading text (case-insensitive)
– a section runs until the next heading of the same or a higher level
– falls back to the raw form field when the AI left the section out
"""
from __future__ import annotations
import re
from typing import Iterable, List, Optional

from resume_builder.cleaner import split_lines

EXPERIENCE_HEADERS  = ("Experience", "Work Experience", "Professional Experience")
EDUCATION_HEADERS   = ("Education",)
ACHIEVEMENT_HEADERS = ("Achievements", "Projects", "Key Projects",
                       "Achievements and Key Projects")
SKILL_HEADERS       = ("Skills", "Technical Skills", "Core Skills", "Key Skills")

_HEADING = re.compile(r"<h([1-6])\b[^>]*>(.*?)</h\1\s*>", re.I | re.S)
_TAGS    = re.compile(r"<[^>]+>")


def _heading_text(inner: str) -> str:
    # "Skills:" names the same section as "Skills"
    return " ".join(_TAGS.sub("", inner).split()).rstrip(":").rstrip().lower()


def _find(html: str, names: Iterable[str], start: int = 0) -> Optional[tuple[int, int, int]]:
    """(heading start, body start, body end) of the first matching section."""
    wanted = {" ".join(n.split()).lower() for n in names}
    for m in _HEADING.finditer(html, start):
        if _heading_text(m.group(2)) not in wanted:
            continue
        level = int(m.group(1))
        end = re.compile(rf"<h[1-{level}]\b", re.I).search(html, m.end())
        return m.start(), m.end(), end.start() if end else len(html)
    return None


def extract_section(sanitized: str, header_names: Iterable[str]) -> Optional[str]:
    """Body of the first section titled with one of ``header_names``, or None."""
    found = _find(sanitized or "", header_names)
    if found is None:
        return None
    _, body_start, body_end = found
    return sanitized[body_start:body_end].strip()


def strip_section(sanitized: str, header_names: Iterable[str]) -> str:
    """Remove every matching section, heading included."""
    html = sanitized or ""
    names = tuple(header_names)
    pos = 0
    while (found := _find(html, names, pos)) is not None:
        head_start, _, body_end = found
        html = html[:head_start] + html[body_end:]
        pos = head_start
    return html


def fallback_items(raw: str) -> List[str]:
    """Raw field lines with list markers removed; used when extraction fails."""
    return split_lines(raw)
