from __future__ import annotations

import json
import threading
import uuid
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from survey_intake.core.errors import SubmissionError
from survey_intake.core.logging import get_logger
from survey_intake.models.submission import SubmissionPayload

logger = get_logger(__name__)


@runtime_checkable
class ResponseTransport(Protocol):
    """Anything that can accept a completed submission."""

    def send(self, payload: SubmissionPayload) -> str:
        """Deliver ``payload`` and return the id assigned to the response."""


class JsonFileResponseSink(ResponseTransport):
    """File-backed stand-in for the remote response-intake service."""

    def __init__(self, storage_path: Path) -> None:
        self._path = Path(storage_path)
        self._lock = threading.Lock()

    def send(self, payload: SubmissionPayload) -> str:
        response_id = uuid.uuid4().hex
        with self._lock:
            stored = self._read_all_unlocked()
            stored[response_id] = payload.to_wire()
            self._write_all_unlocked(stored)
        logger.info(
            "Stored response %s with %d answer lines", response_id, len(payload.answers)
        )
        return response_id

    def load(self, response_id: str) -> Optional[SubmissionPayload]:
        with self._lock:
            raw = self._read_all_unlocked().get(response_id)
        if raw is None:
            return None
        return SubmissionPayload.model_validate(raw)

    def load_all(self) -> Dict[str, SubmissionPayload]:
        with self._lock:
            stored = self._read_all_unlocked()
        return {key: SubmissionPayload.model_validate(value) for key, value in stored.items()}

    def delete(self, response_id: str) -> bool:
        """Remove a stored response; return False when it does not exist."""

        with self._lock:
            stored = self._read_all_unlocked()
            if response_id not in stored:
                return False
            del stored[response_id]
            self._write_all_unlocked(stored)
        logger.info("Deleted response %s", response_id)
        return True

    def _read_all_unlocked(self) -> Dict[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            return json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.error("Response store at %s is not valid JSON", self._path)
            raise SubmissionError(f"Response store {self._path} is unreadable: {exc}") from exc

    def _write_all_unlocked(self, stored: Dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(stored, indent=2), encoding="utf-8")
        except OSError as exc:
            raise SubmissionError(f"Could not write responses to {self._path}: {exc}") from exc


__all__ = [
    "JsonFileResponseSink",
    "ResponseTransport",
]
