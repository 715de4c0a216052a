"""
Form record and template choices.
"""
from __future__ import annotations
from dataclasses import dataclass, fields, asdict
from enum import Enum
from typing import Any, Dict, Mapping

# order matches the form
FIELD_NAMES = (
    "name",
    "email",
    "phone",
    "linkedin",
    "location",
    "languages",
    "summary",
    "experience",
    "education",
    "skills",
    "jobdesc",
)

TEMPLATE_CHOICES = (0, 1, 2)
DEFAULT_TEMPLATE = 0


@dataclass
class ResumeFields:
    """Flat record of the form's free-text fields. Missing means empty."""

    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    location: str = ""
    languages: str = ""
    summary: str = ""
    experience: str = ""
    education: str = ""
    skills: str = ""
    jobdesc: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "ResumeFields":
        """Build from a loose mapping; unknown keys are dropped, None becomes ''."""
        data = data or {}
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                continue
            values[key] = "" if value is None else str(value)
        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class TemplateKind(Enum):
    """Layout actually used for one AI-assisted render."""

    EXHAUSTIVE = "exhaustive"
    AI_DRIVEN = "ai_driven"
    FALLBACK = "fallback"
    GENERIC = "generic"


def clamp_template(value: Any) -> int:
    """Parse a stored template index; anything unusable becomes the default."""
    try:
        index = int(value)
    except (TypeError, ValueError):
        return DEFAULT_TEMPLATE
    return index if index in TEMPLATE_CHOICES else DEFAULT_TEMPLATE


def template_class(index: int) -> str:
    """CSS class of the wrapper div, e.g. 0 -> 'template1'."""
    return f"template{clamp_template(index) + 1}"
