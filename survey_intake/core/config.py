from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

SUBMISSION_ORDERS = ("catalog", "insertion")


def _strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    json_logs: bool


class Settings:

    def __init__(self) -> None:
        catalog_path = _strip_or_none(os.getenv("SURVEY_CATALOG_PATH")) or "data/questions.json"
        self.catalog_path = Path(catalog_path).expanduser().resolve()

        outbox_path = _strip_or_none(os.getenv("SURVEY_OUTBOX_PATH")) or "data/responses.json"
        self.outbox_path = Path(outbox_path).expanduser().resolve()

        submission_order = (_strip_or_none(os.getenv("SURVEY_SUBMISSION_ORDER")) or "catalog").lower()
        if submission_order not in SUBMISSION_ORDERS:
            raise RuntimeError(
                f"SURVEY_SUBMISSION_ORDER must be one of {', '.join(SUBMISSION_ORDERS)}, got {submission_order!r}"
            )
        self.submission_order = submission_order

        self.logging = LoggingSettings(
            level=(_strip_or_none(os.getenv("SURVEY_LOG_LEVEL")) or "INFO").upper(),
            json_logs=_flag(_strip_or_none(os.getenv("SURVEY_LOG_JSON")), False),
        )

    @property
    def catalog_ordered_submission(self) -> bool:
        return self.submission_order == "catalog"


settings = Settings()
