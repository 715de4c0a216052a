"""
Rule-based résumé renderer.

Turns form fields plus sanitized AI HTML into the markup of one of the
layouts in ``templates/``. The layout is picked by explicit precedence:

1. FALLBACK when the AI content has no structure (no h2/h3/ul/ol),
   whatever template is selected;
2. otherwise by index: 0 EXHAUSTIVE, 1 AI_DRIVEN, anything else GENERIC.

Form values are escaped by Jinja; AI fragments are inserted as-is.
"""

from __future__ import annotations
import logging
import re
from pathlib import Path

from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader

from resume_builder.cleaner import normalize_list, split_items, split_lines
from resume_builder.extractor import (
    ACHIEVEMENT_HEADERS,
    EDUCATION_HEADERS,
    EXPERIENCE_HEADERS,
    SKILL_HEADERS,
    extract_section,
    fallback_items,
    strip_section,
)
from resume_builder.schema_resume import (
    ResumeFields,
    TemplateKind,
    clamp_template,
    template_class,
)

logger = logging.getLogger(__name__)

_CSS_PATH = Path(__file__).parent / "static" / "style.css"
env = Environment(loader=FileSystemLoader(Path(__file__).parent / "templates"),
                  autoescape=True, trim_blocks=True, lstrip_blocks=True)

_STRUCTURE_TAGS = ["h2", "h3", "ul", "ol"]

_KIND_TEMPLATES = {
    TemplateKind.EXHAUSTIVE: "exhaustive.html",
    TemplateKind.AI_DRIVEN: "ai_driven.html",
    TemplateKind.FALLBACK: "fallback.html",
    TemplateKind.GENERIC: "generic.html",
}

# generic reformat
_LABELS = r"(Professional\s+Summary|Summary|Experience|Education|Skills)"
_WRAPPED_SKILLS = re.compile(r"<(p|div|span)\b[^>]*>\s*Skills\s*:\s*([^<\n]+?)\s*</\1\s*>", re.I)
_BARE_SKILLS    = re.compile(r"^[ \t]*Skills[ \t]*:[ \t]*([^<\n]+?)[ \t]*$", re.I | re.M)
_WRAPPED_LABEL  = re.compile(rf"<(p|div|span|strong|b)\b[^>]*>\s*{_LABELS}\s*:?\s*</\1\s*>", re.I)
_BARE_LABEL     = re.compile(rf"^[ \t]*{_LABELS}[ \t]*:?[ \t]*$", re.I | re.M)


def has_structure(sanitized: str) -> bool:
    """True when the content has at least one h2, h3, ul or ol element."""
    soup = BeautifulSoup(sanitized or "", "html.parser")
    return soup.find(_STRUCTURE_TAGS) is not None


def select_kind(sanitized: str, template: int) -> TemplateKind:
    if not has_structure(sanitized):
        return TemplateKind.FALLBACK
    index = clamp_template(template)
    if index == 0:
        return TemplateKind.EXHAUSTIVE
    if index == 1:
        return TemplateKind.AI_DRIVEN
    return TemplateKind.GENERIC


# ───────────────────────────────────────── generic reformat ──
def _canonical(label: str) -> str:
    label = " ".join(label.split()).lower()
    if label.endswith("summary"):
        return "Professional Summary"
    return label.title()


def _skills_list(raw: str, original: str) -> str:
    items = normalize_list(raw)
    if not items:
        return original
    li = "".join(f"<li>{s}</li>" for s in items)
    return f"<h3>Skills</h3><ul>{li}</ul>"


def reformat_generic(sanitized: str) -> str:
    """
    Promote plain section labels to <h3> headers and turn an inline
    "Skills: a, b" into a deduplicated bullet list. Existing headings and
    labels inside running text are left alone.
    """
    html = _WRAPPED_SKILLS.sub(lambda m: _skills_list(m.group(2), m.group()), sanitized)
    html = _BARE_SKILLS.sub(lambda m: _skills_list(m.group(1), m.group()), html)
    html = _WRAPPED_LABEL.sub(lambda m: f"<h3>{_canonical(m.group(2))}</h3>", html)
    html = _BARE_LABEL.sub(lambda m: f"<h3>{_canonical(m.group(1))}</h3>", html)
    return html


# ───────────────────────────────────────── contexts ──
def _sidebar(fields: ResumeFields) -> dict:
    return {
        "name": fields.name or "Your Name",
        "contact": [v for v in (fields.email, fields.phone, fields.linkedin) if v],
        "location": fields.location,
    }


def _exhaustive_context(fields: ResumeFields, sanitized: str) -> dict:
    ctx = _sidebar(fields)
    ctx.update(
        languages=normalize_list(fields.languages),
        skills=normalize_list(fields.skills),
        summary=fields.summary,
        experience_html=extract_section(sanitized, EXPERIENCE_HEADERS),
        experience_items=fallback_items(fields.experience),
        education_html=extract_section(sanitized, EDUCATION_HEADERS),
        education_items=fallback_items(fields.education),
        achievements_html=extract_section(sanitized, ACHIEVEMENT_HEADERS),
        jobdesc=fields.jobdesc,
    )
    return ctx


def _ai_driven_context(fields: ResumeFields, sanitized: str) -> dict:
    ctx = _sidebar(fields)
    ctx.update(
        languages=", ".join(split_items(fields.languages)),
        skills=", ".join(normalize_list(fields.skills)),
        main_html=strip_section(sanitized, SKILL_HEADERS).strip(),
    )
    return ctx


def _fallback_context(fields: ResumeFields) -> dict:
    return {
        "name": fields.name or "Your Name",
        "email": fields.email,
        "phone": fields.phone,
        "linkedin": fields.linkedin,
        "summary": fields.summary,
        "experience": split_lines(fields.experience),
        "education": fields.education,
        "skills": normalize_list(fields.skills),
    }


def _render_kind(kind: TemplateKind, fields: ResumeFields, sanitized: str) -> str:
    if kind is TemplateKind.EXHAUSTIVE:
        ctx = _exhaustive_context(fields, sanitized)
    elif kind is TemplateKind.AI_DRIVEN:
        ctx = _ai_driven_context(fields, sanitized)
    elif kind is TemplateKind.GENERIC:
        ctx = {"body": reformat_generic(sanitized)}
    else:
        ctx = _fallback_context(fields)
    return env.get_template(_KIND_TEMPLATES[kind]).render(**ctx)


def _wrap(index: int, inner: str) -> str:
    return f'<div class="{template_class(index)}">{inner}</div>'


# ───────────────────────────────────────── public ──
def render(fields: ResumeFields | None, sanitized: str | None, template: int = 0) -> str:
    """
    Compose the final resume markup for one AI-assisted preview.

    Never raises: if anything goes wrong the fallback skeleton built from
    the raw fields is returned instead.
    """
    fields = fields or ResumeFields()
    sanitized = sanitized or ""
    index = clamp_template(template)
    try:
        kind = select_kind(sanitized, index)
        logger.debug("Rendering template %d as %s", index, kind.value)
        return _wrap(index, _render_kind(kind, fields, sanitized))
    except Exception:
        logger.exception("Rendering failed; using fallback skeleton")
        return _wrap(index, _render_kind(TemplateKind.FALLBACK, fields, ""))


def render_live(fields: ResumeFields | None) -> str:
    """Fixed-structure preview straight from the form, no AI involved."""
    return env.get_template("live.html").render(f=fields or ResumeFields())


def wrap_document(fragment: str, inline: bool = True, title: str = "Resume") -> str:
    """Standalone HTML page around ``fragment``. If inline=True, embed CSS in a <style> tag."""
    css_inline = _CSS_PATH.read_text(encoding="utf-8") if inline else ""
    return env.get_template("document.html").render(
        body=fragment, inline_css=css_inline, title=title
    )
