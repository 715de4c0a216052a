"""
LLM-based résumé generation.

• Sends the form data to the configured provider with an ATS-oriented prompt
• Returns the raw text of the answer; cleanup happens in sanitizer.py
• Optionally caches answers in .cache/html/<sha256>.html so the model is
  queried only once per unique prompt (RESUME_BUILDER_CACHE=1)
• Reports HTML parse issues of the answer for logging, never raises on them
"""

from __future__ import annotations
import hashlib
import logging
import textwrap
from pathlib import Path

import html5lib

from resume_builder.llm_client import LLMClient
from resume_builder.schema_resume import ResumeFields

logger = logging.getLogger(__name__)

_PROMPT = textwrap.dedent(
    """\
Generate an ATS-friendly resume based on the following information. Use industry keywords, optimize for ATS, and match the job description. Do not repeat information or include a separate 'Keywords' section.

Personal Info: {name}, {email}, {phone}, {linkedin}
Summary: {summary}
Experience: {experience}
Education: {education}
Skills: {skills}
Job Description: {jobdesc}

Return the resume in clean HTML format."""
)


def _sha(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def build_prompt(fields: ResumeFields) -> str:
    """Fill the ATS prompt with the form values."""
    return _PROMPT.format(**fields.to_dict())


def html_issues(fragment: str) -> list[str]:
    """
    Strict HTML5 parse of a fragment. Returns the parse errors found;
    an empty list means the fragment parsed cleanly.
    """
    parser = html5lib.HTMLParser(strict=True)
    try:
        parser.parseFragment(fragment or "")
    except html5lib.html5parser.ParseError as e:
        return [f"HTML ParseError: {e}"]
    return []


def generate_resume_html(
    fields: ResumeFields,
    client: LLMClient,
    model: str,
    cache_dir: Path | None = None,
) -> str:
    """
    Ask the model for a resume and return its raw answer.

    Raises LLMError when the provider call fails.
    """
    prompt = build_prompt(fields)
    cache_path = None
    if cache_dir is not None:
        cache_path = Path(cache_dir) / f"{_sha(model + '||' + prompt)}.html"
        if cache_path.exists():
            logger.info("Using cached answer %s", cache_path.name)
            return cache_path.read_text(encoding="utf-8")

    messages = [{"role": "user", "content": prompt}]
    rsp = client.chat(model=model, messages=messages)
    answer = rsp.message.content

    for issue in html_issues(answer):
        logger.debug("AI answer is not well-formed: %s", issue)

    if cache_path is not None:
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        cache_path.write_text(answer, encoding="utf-8")
    return answer
