"""Cross-look item aggregates and grouped breakdowns."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from models.style_report import ByItemsView, DetailedBreakdown, ItemAggregates, ItemSummary, LookView

OTHER_KEY = "other"
TOP_TYPES_LIMIT = 10


def _group_key(value: Any) -> str:
    if value is None or value == "":
        return OTHER_KEY
    return value if isinstance(value, str) else str(value)


def flatten_items(look_views: Iterable[LookView]) -> List[ItemSummary]:
    """All item summaries across looks, in look order then raw item order."""

    return [item for view in look_views for item in view.items]


def rank_top_types(type_counts: Dict[str, int], limit: int = TOP_TYPES_LIMIT) -> List[Dict[str, Any]]:
    """Most frequent types first; ``sorted`` is stable so ties keep first-seen order."""

    ranked = sorted(type_counts.items(), key=lambda entry: entry[1], reverse=True)
    return [{"name": name, "count": count} for name, count in ranked[:limit]]


def build_by_items(look_views: Iterable[LookView]) -> ByItemsView:
    items = flatten_items(look_views)
    counts: Dict[str, Dict[str, int]] = {"category": {}, "color": {}, "type": {}}
    groups: Dict[str, Dict[str, List[ItemSummary]]] = {"category": {}, "color": {}, "type": {}}

    for item in items:
        for attribute in ("category", "color", "type"):
            key = _group_key(getattr(item, attribute))
            counts[attribute][key] = counts[attribute].get(key, 0) + 1
            groups[attribute].setdefault(key, []).append(item)

    aggregates = ItemAggregates(
        item_count=len(items),
        by_category=counts["category"],
        by_color=counts["color"],
        by_type=counts["type"],
        top_types=rank_top_types(counts["type"]),
    )
    breakdown = DetailedBreakdown(
        by_category=groups["category"],
        by_color=groups["color"],
        by_type=groups["type"],
    )
    return ByItemsView(aggregates=aggregates, detailed_breakdown=breakdown)


__all__ = ["OTHER_KEY", "TOP_TYPES_LIMIT", "build_by_items", "flatten_items", "rank_top_types"]
