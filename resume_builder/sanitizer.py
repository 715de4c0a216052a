"""
Best-effort cleanup of AI-generated resume HTML.

Generated text repeats itself and leaks metadata (code fences, document
wrappers, "Keywords:" lines). The cleanup is a fixed sequence of small
regex passes rather than a parser: the input is unstructured and must
degrade gracefully. Each pass is a pure ``str -> str`` function and can be
used on its own; ``sanitize`` runs them in ``PIPELINE`` order.

Marker collapse is narrower than a blanket "replace every dash": a dash only
counts as a bullet when it stands alone (hyphenated words and date ranges
survive), and the line break before a marker is kept for the line pass.
"""

from __future__ import annotations
import re
from typing import Callable, Tuple

_FENCE       = re.compile(r"```(?:html)?", re.I)
_DOC_TAG     = re.compile(r"</?(?:html|body|head)\b[^>]*>", re.I)
# non-dash symbols are always markers; a dash only when it stands alone
_MARKER      = re.compile(r"[ \t]*(?:[*•●‣▪]+|(?<![^\s>*•●‣▪])-+(?![^\s<*•●‣▪]))[ \t]?")
_ANY_TAG     = re.compile(r"<[^>]*>?")
_KEYWORD_TXT = re.compile(r"keywords\s*:[^\n\r]*?(?=(?:\s*</[a-z][a-z0-9]*\s*>)*[ \t]*(?:\r\n|\r|\n|\Z))", re.I)
_H3          = re.compile(r"<h3\b[^>]*>([^<]+)</h3\s*>", re.I)
_LINE_BREAK  = re.compile(r"<br\s*/?>|\r\n|\n|\r", re.I)
_MARKUP_ONLY = re.compile(r"^(?:\s*<[^>]*>)+\s*$")


def strip_code_fences(text: str) -> str:
    """Remove ``` and ```html markers."""
    return _FENCE.sub("", text)


def strip_document_tags(text: str) -> str:
    """Remove <html>, <head>, <body> open/close tags, keeping their contents."""
    return _DOC_TAG.sub("", text)


def collapse_markers(text: str) -> str:
    """Replace bullet symbols and stand-alone dashes with a single space."""
    return _MARKER.sub(" ", text)


def drop_keyword_tags(text: str) -> str:
    """Blank any tag whose markup mentions keywords, e.g. <div class="keywords">."""
    return _ANY_TAG.sub(lambda m: "" if "keywords" in m.group().lower() else m.group(), text)


def drop_keyword_lines(text: str) -> str:
    """Remove 'Keywords: ...' up to the end of its line (closing tags survive).

    Any of \\r\\n, \\r or \\n ends the line.
    """
    return _KEYWORD_TXT.sub("", text)


def dedupe_headers(text: str) -> str:
    """Keep the first <h3> of each title, case-insensitively."""
    seen = set()

    def _keep_first(m: re.Match) -> str:
        title = " ".join(m.group(1).split()).lower()
        if title in seen:
            return ""
        seen.add(title)
        return m.group()

    return _H3.sub(_keep_first, text)


def dedupe_lines(text: str) -> str:
    """
    Drop empty and repeated lines; lines split on <br> or line breaks.

    Comparison is on the trimmed, lowercased line. Pure-markup lines such as
    ``<ul>`` or ``</ul>`` are always kept so list structure is not broken.
    """
    seen, kept = set(), []
    for line in _LINE_BREAK.split(text):
        trimmed = line.strip()
        if not trimmed:
            continue
        if _MARKUP_ONLY.match(trimmed):
            kept.append(line)
            continue
        key = trimmed.lower()
        if key in seen:
            continue
        seen.add(key)
        kept.append(line)
    return "\n".join(kept)


PIPELINE: Tuple[Callable[[str], str], ...] = (
    strip_code_fences,
    strip_document_tags,
    collapse_markers,
    drop_keyword_tags,
    drop_keyword_lines,
    dedupe_headers,
    dedupe_lines,
)


def sanitize(raw: str | None) -> str:
    """Run every cleanup pass in order. Never raises for string input."""
    text = raw or ""
    for step in PIPELINE:
        text = step(text)
    return text
