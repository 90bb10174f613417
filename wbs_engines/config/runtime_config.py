"""Runtime configuration helpers for WBS engines."""
from __future__ import annotations

import logging
import os
from datetime import date
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_CHART_PADDING_DAYS = 2
DEFAULT_EMPTY_CHART_DAYS = 7
DEFAULT_MAX_PROJECTS = 200
DEFAULT_MAX_CHART_DAYS = 3660


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(name, default)


def _get_int(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %s", name, raw, default)
        return default


def get_env() -> str:
    return (_get_env("ENV") or _get_env("APP_ENV") or "dev").lower()


def get_default_project_start() -> date:
    """Start date for projects created without one."""
    raw = _get_env("WBS_DEFAULT_PROJECT_START")
    if raw:
        try:
            return date.fromisoformat(raw.strip())
        except ValueError:
            logger.warning("Ignoring invalid WBS_DEFAULT_PROJECT_START=%r", raw)
    return date.today()


def get_chart_padding_days() -> int:
    """Days of margin on either side of the Gantt window."""
    return max(0, _get_int("WBS_CHART_PADDING_DAYS", DEFAULT_CHART_PADDING_DAYS))


def get_empty_chart_span_days() -> int:
    return max(1, _get_int("WBS_EMPTY_CHART_DAYS", DEFAULT_EMPTY_CHART_DAYS))


def get_max_chart_span_days() -> int:
    """Longest Gantt window; later dates fall outside the header row."""
    return max(1, _get_int("WBS_MAX_CHART_DAYS", DEFAULT_MAX_CHART_DAYS))


def get_max_projects() -> int:
    """Project capacity per tenant/env in the in-memory store."""
    return max(1, _get_int("WBS_MAX_PROJECTS", DEFAULT_MAX_PROJECTS))


def audit_strict() -> bool:
    return _get_env("WBS_AUDIT_STRICT") == "1"
