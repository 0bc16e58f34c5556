from __future__ import annotations

import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("SURVEY_SUBMISSION_ORDER", "catalog")
os.environ.setdefault("SURVEY_LOG_LEVEL", "WARNING")
