"""Style report settings: how many looks a report needs and may use."""

from __future__ import annotations

import json
import logging
import math
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

from style_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)

DEFAULT_MIN_LOOKS = 1
DEFAULT_MAX_LOOKS = 15
LOOKS_LOWER_BOUND = 1
LOOKS_UPPER_BOUND = 50


@dataclass(frozen=True)
class StyleReportSettings:
    min_looks: int = DEFAULT_MIN_LOOKS
    max_looks: int = DEFAULT_MAX_LOOKS


def _clamp(value: int) -> int:
    return max(LOOKS_LOWER_BOUND, min(LOOKS_UPPER_BOUND, value))


def coerce_bound(value: Any, default: int) -> int:
    """Turn a stored bound into an int in ``[1, 50]``; zero or garbage means ``default``."""

    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number) or number == 0:
        return default
    return _clamp(math.floor(number))


class SettingsProvider(ABC):
    """Source of the look-count bounds used by the style report agent."""

    @abstractmethod
    def get_settings(self) -> StyleReportSettings:
        """Return the current bounds."""

    def save_settings(
        self, min_looks: Optional[float] = None, max_looks: Optional[float] = None
    ) -> StyleReportSettings:
        raise NotImplementedError


class StaticSettingsProvider(SettingsProvider):
    """In-process settings, useful for tests and one-off runs."""

    def __init__(self, min_looks: Any = DEFAULT_MIN_LOOKS, max_looks: Any = DEFAULT_MAX_LOOKS) -> None:
        self._settings = StyleReportSettings(
            min_looks=coerce_bound(min_looks, DEFAULT_MIN_LOOKS),
            max_looks=coerce_bound(max_looks, DEFAULT_MAX_LOOKS),
        )

    def get_settings(self) -> StyleReportSettings:
        return self._settings

    def save_settings(
        self, min_looks: Optional[float] = None, max_looks: Optional[float] = None
    ) -> StyleReportSettings:
        self._settings = merge_settings(self._settings, min_looks, max_looks)
        return self._settings


def _updated_bound(current: int, value: Optional[float]) -> int:
    if value is None or not math.isfinite(value):
        return current
    return _clamp(math.floor(value))


def merge_settings(
    current: StyleReportSettings, min_looks: Optional[float], max_looks: Optional[float]
) -> StyleReportSettings:
    """Apply a partial update; ``max_looks`` is raised to ``min_looks`` when needed.

    ``None`` and non-finite values leave the current bound unchanged.
    """

    new_min = _updated_bound(current.min_looks, min_looks)
    new_max = _updated_bound(current.max_looks, max_looks)
    if new_min > new_max:
        new_max = new_min
    return StyleReportSettings(min_looks=new_min, max_looks=new_max)


class JSONSettingsProvider(SettingsProvider):
    """Settings persisted in a small JSON document."""

    def __init__(self, path: str | Path = "data/style_report_settings.json") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def get_settings(self) -> StyleReportSettings:
        if not self.path.exists():
            return StyleReportSettings()
        try:
            raw = json.loads(self.path.read_text())
        except (OSError, ValueError) as exc:
            log_event(
                LOGGER,
                logging.WARNING,
                "settings_unreadable",
                path=str(self.path),
                error=str(exc),
            )
            return StyleReportSettings()
        if not isinstance(raw, dict):
            return StyleReportSettings()
        return StyleReportSettings(
            min_looks=coerce_bound(raw.get("min_looks"), DEFAULT_MIN_LOOKS),
            max_looks=coerce_bound(raw.get("max_looks"), DEFAULT_MAX_LOOKS),
        )

    def save_settings(
        self, min_looks: Optional[float] = None, max_looks: Optional[float] = None
    ) -> StyleReportSettings:
        settings = merge_settings(self.get_settings(), min_looks, max_looks)
        self.path.write_text(json.dumps(asdict(settings), indent=2))
        log_event(
            LOGGER,
            logging.INFO,
            "settings_saved",
            min_looks=settings.min_looks,
            max_looks=settings.max_looks,
        )
        return settings


__all__ = [
    "DEFAULT_MAX_LOOKS",
    "DEFAULT_MIN_LOOKS",
    "JSONSettingsProvider",
    "SettingsProvider",
    "StaticSettingsProvider",
    "StyleReportSettings",
    "coerce_bound",
    "merge_settings",
]
