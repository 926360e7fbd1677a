"""Look records as supplied by the look store."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def parse_look_data(raw: Any) -> Dict[str, Any]:
    """Parse a stored look-analysis payload, treating anything unreadable as empty."""

    if isinstance(raw, dict):
        return raw
    if isinstance(raw, (str, bytes)):
        try:
            parsed = json.loads(raw)
        except ValueError:
            return {}
        return parsed if isinstance(parsed, dict) else {}
    return {}


@dataclass
class Look:
    """One analyzed outfit belonging to a user."""

    look_id: str
    user_id: str
    image_url: Optional[str] = None
    vibe: Optional[str] = None
    occasion: Optional[str] = None
    created_at: Optional[float] = None
    analysis: Dict[str, Any] = field(default_factory=dict)

    @property
    def raw_items(self) -> List[Any]:
        """Raw item entries from the analysis, empty when missing or not a list."""

        items = self.analysis.get("itemsSummary")
        return items if isinstance(items, list) else []


@dataclass
class LookPage:
    """A page of looks plus the total number the user owns."""

    items: List[Look] = field(default_factory=list)
    total: int = 0


__all__ = ["Look", "LookPage", "parse_look_data"]
