"""
LLM client abstraction layer to support multiple providers.

This module provides a unified interface for the generative-AI providers
the resume builder can talk to (Gemini over its REST API, OpenAI, Ollama),
so the rest of the application only ever sees ``chat(model, messages)``.
Provider and transport failures surface as ``LLMError``.
"""

from __future__ import annotations
import logging
from typing import List, Dict, Any
from abc import ABC, abstractmethod

import httpx
import ollama
from openai import OpenAI, OpenAIError

from resume_builder import config

logger = logging.getLogger(__name__)

NO_CONTENT = "<em>No content generated.</em>"


class LLMError(Exception):
    """A request to the AI provider failed (network, HTTP status, provider error)."""


class LLMResponse:
    """Unified response object for LLM responses."""

    def __init__(self, content: str):
        self.message = MessageContent(content)


class MessageContent:
    """Message content wrapper."""

    def __init__(self, content: str):
        self.content = content


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    def chat(self, model: str, messages: List[Dict[str, str]]) -> LLMResponse:
        """Send a chat request to the LLM provider."""
        pass


class GeminiClient(LLMClient):
    """
    Gemini ``generateContent`` over plain HTTP.

    One POST per call, API key in the query string, no retries. The text of
    the first part of the first candidate is the answer.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        if not api_key:
            raise ValueError("Gemini API key is required.")
        self.api_key = api_key
        self.base_url = (base_url or config.GEMINI_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self.transport = transport

    @staticmethod
    def build_payload(messages: List[Dict[str, str]]) -> Dict[str, Any]:
        system = [m["content"] for m in messages if m.get("role") == "system"]
        prompt = "\n\n".join(m["content"] for m in messages if m.get("role") != "system")
        payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if system:
            payload["systemInstruction"] = {"parts": [{"text": "\n\n".join(system)}]}
        return payload

    @staticmethod
    def extract_text(result: Dict[str, Any]) -> str:
        try:
            return result["candidates"][0]["content"]["parts"][0]["text"] or NO_CONTENT
        except (KeyError, IndexError, TypeError):
            return NO_CONTENT

    def chat(self, model: str, messages: List[Dict[str, str]]) -> LLMResponse:
        """Send a generateContent request to Gemini."""
        url = f"{self.base_url}/models/{model}:generateContent"
        logger.info("Calling Gemini API (model=%s)", model)
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    url,
                    params={"key": self.api_key},
                    headers={"Content-Type": "application/json"},
                    json=self.build_payload(messages),
                )
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Gemini API error: %s", e.response.status_code)
            raise LLMError(f"Gemini API error: {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error("Gemini request failed: %s", e)
            raise LLMError(f"Gemini request failed: {e.__class__.__name__}") from e
        except ValueError as e:
            raise LLMError("Gemini API returned invalid JSON") from e

        return LLMResponse(self.extract_text(result))


class OpenAIClient(LLMClient):
    """OpenAI client implementation."""

    def __init__(self, api_key: str | None = None):
        # Use provided API key or get from environment
        api_key = api_key or config.OPENAI_API_KEY
        if not api_key:
            raise ValueError("OpenAI API key is required. Set OPENAI_API_KEY environment variable or pass api_key parameter.")

        self.client = OpenAI(api_key=api_key, timeout=config.REQUEST_TIMEOUT, max_retries=0)

    def chat(self, model: str, messages: List[Dict[str, str]]) -> LLMResponse:
        """Send a chat request to OpenAI."""
        temperature = config.OPENAI_MODEL_PARAMS.get("temperature", 0.7)
        max_tokens = config.OPENAI_MODEL_PARAMS.get("max_tokens", 4096)

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except OpenAIError as e:
            raise LLMError(f"OpenAI API error: {e}") from e

        return LLMResponse(response.choices[0].message.content or NO_CONTENT)


class OllamaClient(LLMClient):
    """Ollama client implementation."""

    def __init__(self, host: str | None = None):
        self.client = ollama.Client(host=host or config.OLLAMA_BASE_URL)

    def chat(self, model: str, messages: List[Dict[str, str]]) -> LLMResponse:
        """Send a chat request to Ollama."""
        try:
            response = self.client.chat(model=model, messages=messages)
        except (ollama.ResponseError, ConnectionError, httpx.HTTPError) as e:
            raise LLMError(f"Ollama error: {e}") from e
        return LLMResponse(response.message.content or NO_CONTENT)


def provider_requires_key(provider: str | None = None) -> bool:
    return (provider or config.LLM_PROVIDER).lower() != "ollama"


def get_llm_client(provider: str | None = None, api_key: str | None = None) -> LLMClient:
    """Factory function to get the appropriate LLM client based on configuration."""
    provider = (provider or config.LLM_PROVIDER).lower()

    if provider == "gemini":
        return GeminiClient(api_key or config.GEMINI_API_KEY)
    elif provider == "openai":
        return OpenAIClient(api_key)
    elif provider == "ollama":
        return OllamaClient()
    else:
        raise ValueError(f"Unsupported LLM provider: {provider}")
