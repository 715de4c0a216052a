"""
Durable key-value storage for the form.

The app keeps three keys, mirroring what a browser tab would keep in local
storage:

    resumeFormData    JSON-serialised ResumeFields
    selectedTemplate  stringified template index
    geminiApiKey      the key entered in the settings panel

Every change is written straight through (last write wins). Repositories are
passed into the preview controller, so tests can use MemoryRepository.
"""

from __future__ import annotations
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict

from resume_builder.schema_resume import ResumeFields, clamp_template

logger = logging.getLogger(__name__)

FORM_DATA_KEY = "resumeFormData"
TEMPLATE_KEY = "selectedTemplate"
API_KEY_KEY = "geminiApiKey"


class FieldRepository(ABC):
    """String-keyed store plus the typed operations the app needs."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored string or None."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a string, replacing any previous value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Forget a key; missing keys are ignored."""
        pass

    # ───────────────────────────────────────── form data ──
    def load_fields(self) -> ResumeFields:
        raw = self.get(FORM_DATA_KEY)
        if not raw:
            return ResumeFields()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored form data is not valid JSON; starting empty")
            return ResumeFields()
        if not isinstance(data, dict):
            logger.warning("Stored form data is not an object; starting empty")
            return ResumeFields()
        return ResumeFields.from_dict(data)

    def save_fields(self, fields: ResumeFields) -> None:
        self.set(FORM_DATA_KEY, json.dumps(fields.to_dict(), ensure_ascii=False))

    # ───────────────────────────────────────── template ──
    def load_template(self) -> int:
        return clamp_template(self.get(TEMPLATE_KEY))

    def save_template(self, index: int) -> None:
        self.set(TEMPLATE_KEY, str(clamp_template(index)))

    # ───────────────────────────────────────── api key ──
    def get_api_key(self) -> str:
        return self.get(API_KEY_KEY) or ""

    def set_api_key(self, api_key: str) -> None:
        api_key = (api_key or "").strip()
        if api_key:
            self.set(API_KEY_KEY, api_key)
        else:
            self.remove(API_KEY_KEY)

    def clear_api_key(self) -> None:
        self.remove(API_KEY_KEY)


class MemoryRepository(FieldRepository):
    """Dict-backed repository; nothing survives the process."""

    def __init__(self, initial: Dict[str, str] | None = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileRepository(FieldRepository):
    """
    All keys in one JSON object on disk.

    The file is created on first write and replaced atomically on every
    change. A missing, unreadable or corrupt file reads as empty.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read store %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store %s does not hold an object; ignoring it", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._write()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._write()
