"""
Preview controller: the glue between the form, the store and the renderers.

Two render paths:

* live preview, on every change: fixed structure straight from the form,
  no AI, so the user always sees the current input;
* AI-assisted preview, on submit: one call to the provider, then
  sanitize -> extract -> render for the selected template.

Nothing here raises on bad AI output or provider failures; the UI always
gets something to show.
"""

from __future__ import annotations
import html
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from resume_builder import config
from resume_builder.field_store import FieldRepository
from resume_builder.generator_llm import generate_resume_html
from resume_builder.generator_rule import render, render_live
from resume_builder.llm_client import LLMClient, LLMError, get_llm_client, provider_requires_key
from resume_builder.sanitizer import sanitize
from resume_builder.schema_resume import ResumeFields, clamp_template

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("pdf", "docx", "html")


class PreviewStatus(Enum):
    OK = "ok"
    NEEDS_API_KEY = "needs_api_key"
    ERROR = "error"


@dataclass
class PreviewResult:
    status: PreviewStatus
    html: str = ""
    message: str = ""


def error_html(message: str) -> str:
    return f'<span style="color:red">Error generating resume: {html.escape(message)}</span>'


def export_placeholder(fmt: str) -> str:
    """Notice shown by the export buttons; exporting is not implemented."""
    fmt = fmt.lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unknown export format: {fmt}")
    return f"{fmt.upper()} export coming soon!"


class PreviewController:
    def __init__(
        self,
        repository: FieldRepository,
        client_factory: Callable[[str, str], LLMClient] = get_llm_client,
        provider: str | None = None,
        model: str | None = None,
        cache_dir=None,
    ):
        self.repository = repository
        self.client_factory = client_factory
        self.provider = (provider or config.LLM_PROVIDER).lower()
        self.model = model or config.get_model_for_provider(self.provider)
        self.cache_dir = cache_dir

    # ───────────────────────────────────────── state ──
    def fields(self) -> ResumeFields:
        return self.repository.load_fields()

    def update_fields(self, fields: ResumeFields) -> str:
        """Persist the form and return the refreshed live preview."""
        self.repository.save_fields(fields)
        return render_live(fields)

    def template(self) -> int:
        return self.repository.load_template()

    def select_template(self, index: int) -> str:
        """Persist the template choice and return the refreshed live preview."""
        self.repository.save_template(clamp_template(index))
        return self.live_preview()

    def api_key(self) -> str:
        return self.repository.get_api_key() or config.env_api_key(self.provider)

    def set_api_key(self, api_key: str) -> None:
        self.repository.set_api_key(api_key)

    def clear_api_key(self) -> None:
        self.repository.clear_api_key()

    # ───────────────────────────────────────── render paths ──
    def live_preview(self) -> str:
        return render_live(self.fields())

    def submit(self) -> PreviewResult:
        """
        Generate the AI-assisted preview for the stored form and template.

        Without an API key nothing is sent; the caller should ask for one
        and let the user submit again.
        """
        api_key = self.api_key()
        if provider_requires_key(self.provider) and not api_key:
            logger.info("No API key stored; asking the user for one")
            return PreviewResult(PreviewStatus.NEEDS_API_KEY,
                                 message="Enter your API key, then submit again.")

        fields = self.fields()
        template = self.template()
        try:
            client = self.client_factory(self.provider, api_key)
            raw = generate_resume_html(fields, client, self.model, self.cache_dir)
        except (LLMError, ValueError) as e:
            # ValueError: unsupported provider from the client factory
            logger.error("Resume generation failed: %s", e)
            return PreviewResult(PreviewStatus.ERROR, error_html(str(e)), str(e))

        cleaned = sanitize(raw)
        return PreviewResult(PreviewStatus.OK, render(fields, cleaned, template))
