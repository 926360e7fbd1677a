"""Derived report views and the persisted style report document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.comprehensive import ComprehensiveProfile

REPORT_DATA_VERSION = 1
DEFAULT_HEADLINE = "Your Style Report"
ITEM_BUCKETS = ("clothing", "footwear", "accessory")


@dataclass(frozen=True)
class ItemSummary:
    """Canonical view of one raw item detected in a look."""

    type: Any = None
    description: Any = None
    category: Any = None
    color: Any = None
    style: Any = None
    look_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "type": self.type,
            "description": self.description,
            "category": self.category,
            "color": self.color,
            "style": self.style,
        }
        if self.look_id:
            data["lookId"] = self.look_id
        return data


@dataclass
class LookView:
    """Per-look view with items bucketed by type and a pairing sentence."""

    look_id: str
    image_url: Optional[str] = None
    vibe: Optional[str] = None
    occasion: Optional[str] = None
    time_of_day: Optional[str] = None
    comment: Optional[str] = None
    labels: List[Any] = field(default_factory=list)
    items: List[ItemSummary] = field(default_factory=list)
    items_by_type: Dict[str, List[ItemSummary]] = field(
        default_factory=lambda: {bucket: [] for bucket in ITEM_BUCKETS}
    )
    pairing_summary: Optional[str] = None
    classification_tags: List[Any] = field(default_factory=list)
    analysis_comment: Optional[str] = None
    suggestions: List[Any] = field(default_factory=list)

    def item_count_by_type(self) -> Dict[str, int]:
        return {bucket: len(self.items_by_type.get(bucket, [])) for bucket in ITEM_BUCKETS}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lookId": self.look_id,
            "imageUrl": self.image_url,
            "vibe": self.vibe,
            "occasion": self.occasion,
            "timeOfDay": self.time_of_day,
            "comment": self.comment,
            "labels": list(self.labels),
            "classificationTags": list(self.classification_tags),
            "analysisComment": self.analysis_comment,
            "suggestions": list(self.suggestions),
            "itemsByType": {
                bucket: [item.to_dict() for item in self.items_by_type.get(bucket, [])]
                for bucket in ITEM_BUCKETS
            },
            "pairingSummary": self.pairing_summary,
        }


@dataclass
class ItemAggregates:
    item_count: int = 0
    by_category: Dict[str, int] = field(default_factory=dict)
    by_color: Dict[str, int] = field(default_factory=dict)
    by_type: Dict[str, int] = field(default_factory=dict)
    top_types: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "itemCount": self.item_count,
            "byCategory": dict(self.by_category),
            "byColor": dict(self.by_color),
            "byType": dict(self.by_type),
            "topTypes": [dict(entry) for entry in self.top_types],
        }


@dataclass
class DetailedBreakdown:
    by_category: Dict[str, List[ItemSummary]] = field(default_factory=dict)
    by_color: Dict[str, List[ItemSummary]] = field(default_factory=dict)
    by_type: Dict[str, List[ItemSummary]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        def _dump(groups: Dict[str, List[ItemSummary]]) -> Dict[str, List[Dict[str, Any]]]:
            return {key: [item.to_dict() for item in items] for key, items in groups.items()}

        return {
            "byCategory": _dump(self.by_category),
            "byColor": _dump(self.by_color),
            "byType": _dump(self.by_type),
        }


@dataclass
class ByItemsView:
    """Cross-look item counts and grouped item lists."""

    aggregates: ItemAggregates = field(default_factory=ItemAggregates)
    detailed_breakdown: DetailedBreakdown = field(default_factory=DetailedBreakdown)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "aggregates": self.aggregates.to_dict(),
            "detailedBreakdown": self.detailed_breakdown.to_dict(),
        }


@dataclass(frozen=True)
class ReportSection:
    title: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "content": self.content}


@dataclass
class StyleReportData:
    """The persisted style report. A fresh instance is built on every run."""

    generated_at: str
    headline: str = DEFAULT_HEADLINE
    sections: List[ReportSection] = field(default_factory=list)
    by_looks: List[LookView] = field(default_factory=list)
    by_items: ByItemsView = field(default_factory=ByItemsView)
    comprehensive: Optional[ComprehensiveProfile] = None
    version: int = REPORT_DATA_VERSION

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "version": self.version,
            "generatedAt": self.generated_at,
            "headline": self.headline,
            "sections": [section.to_dict() for section in self.sections],
            "byLooks": [look.to_dict() for look in self.by_looks],
            "byItems": self.by_items.to_dict(),
        }
        if self.comprehensive is not None:
            data["comprehensive"] = self.comprehensive.to_dict()
        return data


__all__ = [
    "DEFAULT_HEADLINE",
    "ITEM_BUCKETS",
    "REPORT_DATA_VERSION",
    "ByItemsView",
    "DetailedBreakdown",
    "ItemAggregates",
    "ItemSummary",
    "LookView",
    "ReportSection",
    "StyleReportData",
]
