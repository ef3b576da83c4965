"""
Engine Configuration

Reads engine settings from the environment (a .env file is loaded when
present). Invalid values fall back to the defaults.
"""

import json
import logging
import os
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .constants import (
    MIN_COMPLETED_ASSESSMENTS,
    DEFAULT_CAREER_LIMIT,
    CAREER_MIN_SCORE,
    CAREER_RELAXED_MIN_SCORE,
    PROGRAM_MIN_SCORE,
    FIELD_KEYWORDS,
)

load_dotenv()

logger = logging.getLogger(__name__)


class EngineSettings(BaseModel):
    """Tunable engine settings."""
    min_completed_assessments: int = Field(default=MIN_COMPLETED_ASSESSMENTS, ge=0)
    career_limit: int = Field(default=DEFAULT_CAREER_LIMIT, ge=1)
    career_min_score: int = Field(default=CAREER_MIN_SCORE, ge=0, le=100)
    career_relaxed_min_score: int = Field(default=CAREER_RELAXED_MIN_SCORE, ge=0, le=100)
    program_min_score: int = Field(default=PROGRAM_MIN_SCORE, ge=0, le=100)
    field_keywords: Dict[str, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in FIELD_KEYWORDS.items()}
    )
    log_level: str = "INFO"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"⚠️ Ignoring invalid {name}={raw!r}; using {default}")
        return default


def load_field_keywords(path: Optional[str]) -> Dict[str, List[str]]:
    """
    Load a category -> keywords JSON object, or the built-in table when no
    path is given or the file cannot be used.
    """
    defaults = {k: list(v) for k, v in FIELD_KEYWORDS.items()}
    if not path:
        return defaults

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"⚠️ Could not read field keywords from {path}: {e}; using built-in table")
        return defaults

    if not isinstance(data, dict):
        logger.warning(f"⚠️ Field keywords file {path} is not a JSON object; using built-in table")
        return defaults

    keywords: Dict[str, List[str]] = {}
    for category, values in data.items():
        if isinstance(values, str):
            values = [values]
        if not isinstance(values, list):
            continue
        keywords[str(category).lower()] = [str(v).lower() for v in values if str(v).strip()]

    logger.info(f"📁 Loaded field keywords for {len(keywords)} categories from {path}")
    return keywords


def load_settings() -> EngineSettings:
    """Build EngineSettings from RECOMMENDATION_* environment variables."""
    min_score = _env_int("RECOMMENDATION_CAREER_MIN_SCORE", CAREER_MIN_SCORE)
    relaxed = _env_int("RECOMMENDATION_CAREER_RELAXED_MIN_SCORE", CAREER_RELAXED_MIN_SCORE)
    try:
        return EngineSettings(
            min_completed_assessments=_env_int("RECOMMENDATION_MIN_ASSESSMENTS", MIN_COMPLETED_ASSESSMENTS),
            career_limit=_env_int("RECOMMENDATION_CAREER_LIMIT", DEFAULT_CAREER_LIMIT),
            career_min_score=min_score,
            career_relaxed_min_score=relaxed,
            program_min_score=_env_int("RECOMMENDATION_PROGRAM_MIN_SCORE", PROGRAM_MIN_SCORE),
            field_keywords=load_field_keywords(os.getenv("RECOMMENDATION_FIELD_KEYWORDS_FILE")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
    except ValueError as e:
        logger.warning(f"⚠️ Invalid engine settings ({e}); using defaults")
        return EngineSettings()
