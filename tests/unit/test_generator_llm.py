"""Unit tests for prompt building and AI generation."""

import pytest

from resume_builder.generator_llm import build_prompt, generate_resume_html, html_issues
from resume_builder.llm_client import LLMError


@pytest.mark.unit
def test_build_prompt_includes_every_field(fields):
    """The prompt carries the form values in fixed slots."""
    prompt = build_prompt(fields)

    assert prompt.startswith("Generate an ATS-friendly resume")
    assert "Personal Info: Jane Doe, jane@example.com, 555-0100, linkedin.com/in/jane" in prompt
    assert "Skills: Python, python, SQL" in prompt
    assert "Job Description: Senior backend role" in prompt
    assert "separate 'Keywords' section" in prompt
    assert prompt.endswith("Return the resume in clean HTML format.")


@pytest.mark.unit
def test_generate_sends_one_user_message(fields, make_client):
    """A single user message goes to the configured model."""
    client = make_client(answer="<h3>Experience</h3>")

    assert generate_resume_html(fields, client, "test-model") == "<h3>Experience</h3>"
    assert len(client.calls) == 1
    model, messages = client.calls[0]
    assert model == "test-model"
    assert messages == [{"role": "user", "content": build_prompt(fields)}]


@pytest.mark.unit
def test_generate_propagates_llm_error(fields, make_client):
    """Provider failures are left to the caller."""
    client = make_client(error=LLMError("Gemini API error: 500"))
    with pytest.raises(LLMError):
        generate_resume_html(fields, client, "m")


@pytest.mark.unit
def test_generate_uses_cache(fields, make_client, tmp_path):
    """With a cache directory the model is asked only once per prompt."""
    client = make_client(answer="<p>cached</p>")

    first = generate_resume_html(fields, client, "m", cache_dir=tmp_path)
    second = generate_resume_html(fields, client, "m", cache_dir=tmp_path)

    assert first == second == "<p>cached</p>"
    assert len(client.calls) == 1
    assert len(list(tmp_path.glob("*.html"))) == 1


@pytest.mark.unit
def test_cache_is_keyed_by_model(fields, make_client, tmp_path):
    """Another model means another cache entry."""
    client = make_client(answer="<p>x</p>")
    generate_resume_html(fields, client, "a", cache_dir=tmp_path)
    generate_resume_html(fields, client, "b", cache_dir=tmp_path)

    assert len(client.calls) == 2


@pytest.mark.unit
def test_html_issues():
    """Clean fragments report nothing; a stray end tag is reported."""
    assert html_issues("<p>ok</p>") == []
    assert html_issues("<p>ok</p></span>") != []
