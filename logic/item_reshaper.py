"""Reshape raw look-analysis items into canonical item summaries and per-look views."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from models.look import Look
from models.style_report import ITEM_BUCKETS, ItemSummary, LookView

# Current attribute name first, then the legacy name older analyses used.
ITEM_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "type": ("type",),
    "description": ("description",),
    "category": ("category", "category_lvl1"),
    "color": ("color", "color_primary"),
    "style": ("style", "style_family"),
}

PAIRING_LIMITS: Dict[str, int] = {"clothing": 3, "footwear": 2, "accessory": 2}


def _resolve(raw_item: Mapping[str, Any], names: Iterable[str]) -> Any:
    for name in names:
        value = raw_item.get(name)
        if value is not None:
            return value
    return None


def to_item_summary(raw_item: Any, look_id: Optional[str] = None) -> ItemSummary:
    """Build an :class:`ItemSummary` from one raw item entry.

    Never raises: entries that are not mappings produce an empty summary.
    """

    source = raw_item if isinstance(raw_item, Mapping) else {}
    values = {field: _resolve(source, names) for field, names in ITEM_FIELD_ALIASES.items()}
    return ItemSummary(look_id=look_id, **values)


def bucket_for(item: ItemSummary) -> str:
    item_type = item.type.lower() if isinstance(item.type, str) else ""
    if item_type in ("footwear", "accessory"):
        return item_type
    return "clothing"


def pairing_summary(items_by_type: Mapping[str, List[ItemSummary]]) -> Optional[str]:
    """Describe how a look pairs clothing with footwear and accessories."""

    parts: List[str] = []
    for bucket in ITEM_BUCKETS:
        items = items_by_type.get(bucket) or []
        if not items:
            continue
        labels = [str(item.description or item.category or bucket) for item in items]
        parts.append(", ".join(labels[: PAIRING_LIMITS[bucket]]))
    return " with ".join(parts) if parts else None


def _list_field(analysis: Mapping[str, Any], key: str) -> List[Any]:
    value = analysis.get(key)
    return list(value) if isinstance(value, list) else []


def build_look_view(look: Look) -> LookView:
    analysis = look.analysis or {}
    items = [to_item_summary(raw_item, look.look_id) for raw_item in look.raw_items]
    items_by_type: Dict[str, List[ItemSummary]] = {bucket: [] for bucket in ITEM_BUCKETS}
    for item in items:
        items_by_type[bucket_for(item)].append(item)

    return LookView(
        look_id=look.look_id,
        image_url=look.image_url,
        vibe=look.vibe if look.vibe is not None else analysis.get("vibe"),
        occasion=look.occasion if look.occasion is not None else analysis.get("occasion"),
        time_of_day=analysis.get("timeOfDay"),
        comment=analysis.get("comment"),
        labels=_list_field(analysis, "labels"),
        items=items,
        items_by_type=items_by_type,
        pairing_summary=pairing_summary(items_by_type),
        classification_tags=_list_field(analysis, "classificationTags"),
        analysis_comment=analysis.get("analysisComment"),
        suggestions=_list_field(analysis, "suggestions"),
    )


def build_by_looks(looks: Iterable[Look]) -> List[LookView]:
    """Map each look to a :class:`LookView`, preserving input order."""

    return [build_look_view(look) for look in looks]


__all__ = [
    "ITEM_FIELD_ALIASES",
    "bucket_for",
    "build_by_looks",
    "build_look_view",
    "pairing_summary",
    "to_item_summary",
]
