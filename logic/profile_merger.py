"""Fold a comprehensive profile's synthesis into the flat style profile."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from models.comprehensive import ComprehensiveProfile
from models.style_profile import StyleProfileData


def _join(values: Iterable[Any]) -> str:
    return ", ".join("" if value is None else str(value) for value in values)


def flat_from_comprehensive(
    comprehensive: ComprehensiveProfile,
    existing_flat: Optional[StyleProfileData] = None,
) -> StyleProfileData:
    """Return a new flat profile derived from ``existing_flat`` and ``comprehensive``.

    Per field:

    * ``dominant_silhouettes``: joined ``synthesis.dominant_silhouettes`` when
      non-empty, otherwise the existing value, otherwise
      ``synthesis.style_descriptor_short``.
    * ``color_palette``: always replaced by joined ``synthesis.dominant_colors``
      when that list is non-empty.
    * ``one_liner``: existing value, otherwise ``synthesis.one_line_takeaway``.
    * ``style_keywords``: existing non-empty list, otherwise
      ``synthesis.style_keywords``, otherwise ``style_dna.keywords``.

    Neither argument is modified.
    """

    flat = existing_flat or StyleProfileData()
    updates: Dict[str, Any] = {}
    synthesis = comprehensive.synthesis

    if synthesis is not None:
        if synthesis.dominant_silhouettes:
            updates["dominant_silhouettes"] = _join(synthesis.dominant_silhouettes)
        elif synthesis.style_descriptor_short and flat.dominant_silhouettes is None:
            updates["dominant_silhouettes"] = synthesis.style_descriptor_short

        if synthesis.dominant_colors:
            updates["color_palette"] = _join(synthesis.dominant_colors)

        if synthesis.one_line_takeaway and flat.one_liner is None:
            updates["one_liner"] = synthesis.one_line_takeaway

        if synthesis.style_keywords and not flat.style_keywords:
            updates["style_keywords"] = list(synthesis.style_keywords)

    style_dna = comprehensive.style_dna
    if (
        style_dna is not None
        and style_dna.keywords
        and not flat.style_keywords
        and "style_keywords" not in updates
    ):
        updates["style_keywords"] = list(style_dna.keywords)

    return flat.model_copy(update=updates, deep=True)


__all__ = ["flat_from_comprehensive"]
