"""Pydantic schemas for the nine-dimension comprehensive style profile.

Every field validator runs in ``before`` mode and coerces instead of
rejecting, so validating a mapping against these models never raises: string
fields fall back to ``None`` and list fields to ``[]``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

COMPREHENSIVE_SCHEMA_VERSION = "1"

COMPREHENSIVE_ELEMENT_KEYS = (
    "colour_palette",
    "silhouette_and_fit",
    "fabric_texture_and_feel",
    "styling_strategy",
    "trend_preference",
    "construction_and_detail_sensitivity",
    "expression_intensity",
    "contextual_flexibility",
    "temporal_orientation",
)


def string_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def list_or_empty(value: Any) -> List[Any]:
    return list(value) if isinstance(value, list) else []


def element_label(key: str) -> str:
    """Human title for a dimension key, e.g. ``silhouette_and_fit`` -> ``silhouette and fit``."""

    return key.replace("_", " ")


class StyleElement(BaseModel):
    label: str
    sub_elements: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("sub_elements", mode="before")
    @classmethod
    def _coerce_sub_elements(cls, value: Any) -> Dict[str, Any]:
        return dict(value) if isinstance(value, dict) else {}


class Synthesis(BaseModel):
    style_descriptor_short: Optional[str] = None
    style_descriptor_long: Optional[str] = None
    style_keywords: List[Any] = Field(default_factory=list)
    one_line_takeaway: Optional[str] = None
    dominant_categories: List[Any] = Field(default_factory=list)
    dominant_colors: List[Any] = Field(default_factory=list)
    dominant_silhouettes: List[Any] = Field(default_factory=list)

    @field_validator(
        "style_descriptor_short", "style_descriptor_long", "one_line_takeaway", mode="before"
    )
    @classmethod
    def _coerce_strings(cls, value: Any) -> Optional[str]:
        return string_or_none(value)

    @field_validator(
        "style_keywords",
        "dominant_categories",
        "dominant_colors",
        "dominant_silhouettes",
        mode="before",
    )
    @classmethod
    def _coerce_lists(cls, value: Any) -> List[Any]:
        return list_or_empty(value)


class StyleDna(BaseModel):
    archetype_name: Optional[str] = None
    archetype_tagline: Optional[str] = None
    keywords: List[Any] = Field(default_factory=list)
    dna_line: Optional[str] = None

    @field_validator("archetype_name", "archetype_tagline", "dna_line", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> Optional[str]:
        return string_or_none(value)

    @field_validator("keywords", mode="before")
    @classmethod
    def _coerce_lists(cls, value: Any) -> List[Any]:
        return list_or_empty(value)


class IdeasForYou(BaseModel):
    within_style_zone: List[Any] = Field(default_factory=list)
    adjacent_style_zone: List[Any] = Field(default_factory=list)

    @field_validator("within_style_zone", "adjacent_style_zone", mode="before")
    @classmethod
    def _coerce_lists(cls, value: Any) -> List[Any]:
        return list_or_empty(value)


class ComprehensiveMeta(BaseModel):
    version: str = COMPREHENSIVE_SCHEMA_VERSION
    generated_at: str
    generated_from_looks: int


class ComprehensiveProfile(BaseModel):
    """Normalized comprehensive profile; each facet is either fully shaped or absent."""

    elements: Optional[Dict[str, StyleElement]] = None
    synthesis: Optional[Synthesis] = None
    style_dna: Optional[StyleDna] = None
    ideas_for_you: Optional[IdeasForYou] = None
    meta: Optional[ComprehensiveMeta] = None

    @property
    def facet_count(self) -> int:
        facets = (self.elements, self.synthesis, self.style_dna, self.ideas_for_you)
        return sum(1 for facet in facets if facet is not None)

    def with_meta(self, generated_at: str, look_count: int) -> "ComprehensiveProfile":
        meta = ComprehensiveMeta(generated_at=generated_at, generated_from_looks=look_count)
        return self.model_copy(update={"meta": meta}, deep=True)

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in self.model_dump().items() if value is not None}


__all__ = [
    "COMPREHENSIVE_ELEMENT_KEYS",
    "COMPREHENSIVE_SCHEMA_VERSION",
    "ComprehensiveMeta",
    "ComprehensiveProfile",
    "IdeasForYou",
    "StyleDna",
    "StyleElement",
    "Synthesis",
    "element_label",
    "list_or_empty",
    "string_or_none",
]
