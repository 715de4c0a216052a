"""Shared fixtures for the resume builder tests."""

from __future__ import annotations

import pytest

from resume_builder import config
from resume_builder.field_store import MemoryRepository
from resume_builder.llm_client import LLMClient, LLMResponse
from resume_builder.schema_resume import ResumeFields


class FakeClient(LLMClient):
    """Records every chat call and answers with a canned text or error."""

    def __init__(self, answer: str = "", error: Exception | None = None):
        self.answer = answer
        self.error = error
        self.calls = []

    def chat(self, model, messages):
        self.calls.append((model, messages))
        if self.error is not None:
            raise self.error
        return LLMResponse(self.answer)


@pytest.fixture(autouse=True)
def _isolate_env_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keys from a developer's .env must not leak into tests."""
    monkeypatch.setattr(config, "GEMINI_API_KEY", "")
    monkeypatch.setattr(config, "OPENAI_API_KEY", "")


@pytest.fixture
def fields() -> ResumeFields:
    return ResumeFields(
        name="Jane Doe",
        email="jane@example.com",
        phone="555-0100",
        linkedin="linkedin.com/in/jane",
        summary="Backend engineer.",
        experience="- Built APIs\n- Led team",
        education="BSc Computer Science",
        skills="Python, python, SQL",
        jobdesc="Senior backend role",
    )


@pytest.fixture
def repository() -> MemoryRepository:
    return MemoryRepository()


@pytest.fixture
def make_client():
    """FakeClient class, so tests can pick the canned answer or error."""
    return FakeClient
