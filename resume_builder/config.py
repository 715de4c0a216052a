"""
Configuration settings for the resume builder.

This file contains configuration for the LLM providers, the local field
store and logging. Everything can be overridden from the environment or a
`.env` file; nothing is mandatory at import time.
"""

from dotenv import load_dotenv
load_dotenv()          # ← must be before os.getenv(...)
import os
from pathlib import Path

# LLM Provider Configuration
# Set to "gemini", "openai" or "ollama"
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "gemini").lower()

# Model Configuration
DEFAULT_MODEL = {
    "gemini": "gemini-2.5-flash",
    "openai": "gpt-4o-mini",
    "ollama": "deepseek-coder-v2",
}
LLM_MODEL = os.getenv("LLM_MODEL")

# Gemini Configuration
# The stored key from the settings panel wins over this one.
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_API_URL = os.getenv(
    "GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta"
)

# OpenAI Configuration
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL_PARAMS = {
    "temperature": 0.7,
    "max_tokens": 4096
}

# Ollama Configuration
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

# Request timeout in seconds for the AI call; unset means wait indefinitely
_timeout = os.getenv("RESUME_BUILDER_TIMEOUT", "").strip()
REQUEST_TIMEOUT = float(_timeout) if _timeout else None

# Local field store (form data, selected template, API key)
STORE_PATH = Path(os.getenv("RESUME_BUILDER_STORE", ".resume_builder/store.json"))

# Response cache, keyed by sha256 of model + prompt
CACHE_RESPONSES = os.getenv("RESUME_BUILDER_CACHE", "0") == "1"
CACHE_DIR = Path(os.getenv("RESUME_BUILDER_CACHE_DIR", ".cache/html"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def get_model_for_provider(provider: str = None) -> str:
    """Get the model for the specified provider, honouring LLM_MODEL."""
    provider = (provider or LLM_PROVIDER).lower()
    if LLM_MODEL:
        return LLM_MODEL
    return DEFAULT_MODEL.get(provider, DEFAULT_MODEL["gemini"])


def env_api_key(provider: str = None) -> str:
    """API key configured in the environment for the provider, if any."""
    provider = (provider or LLM_PROVIDER).lower()
    if provider == "gemini":
        return GEMINI_API_KEY
    if provider == "openai":
        return OPENAI_API_KEY
    return ""
