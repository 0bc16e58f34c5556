from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from survey_intake.core.errors import CatalogError
from survey_intake.core.logging import get_logger
from survey_intake.models.survey import Catalog

logger = get_logger(__name__)


class CatalogLoader:
    """Load a question catalog from the intake service's JSON shape.

    The document is either a list of questions or an object holding them under
    ``"questions"``::

        [
          {"id": 1, "question_text": "Do you like tea?", "question_type": "single",
           "choices": [{"id": 10, "choice_text": "Yes", "is_other": 0},
                       {"id": 11, "choice_text": "Other", "is_other": 1}]},
          {"id": 2, "question_text": "Anything else?", "question_type": "text"}
        ]
    """

    def __init__(self, source: str | Path) -> None:
        self._path = Path(source)
        if not self._path.is_file():
            raise CatalogError(f"Catalog file not found: {self._path}")

        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise CatalogError(f"{self._path}: invalid JSON ({exc})") from exc

        self._catalog = parse_catalog(document, source=str(self._path))

    @property
    def catalog(self) -> Catalog:
        """Return the catalog loaded from the file."""

        return self._catalog


def parse_catalog(document: Any, *, source: str = "<payload>") -> Catalog:
    """Build a :class:`Catalog` from an already-decoded JSON document."""

    if isinstance(document, dict):
        document = document.get("questions")
    if not isinstance(document, list):
        raise CatalogError(f"{source}: expected a list of questions")

    try:
        catalog = Catalog(questions=document)
    except ValidationError as exc:
        raise CatalogError(f"{source}: {exc}") from exc

    logger.info("Loaded %d questions from %s", catalog.size, source)
    return catalog
