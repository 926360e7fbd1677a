"""Flat style profile used for personalization."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.comprehensive import ComprehensiveProfile, list_or_empty, string_or_none


class StyleProfileData(BaseModel):
    """Flat profile fields plus an optional embedded comprehensive profile.

    Attributes are snake_case; the stored document uses the camelCase aliases.
    """

    model_config = ConfigDict(populate_by_name=True)

    dominant_silhouettes: Optional[str] = Field(default=None, alias="dominantSilhouettes")
    color_palette: Optional[str] = Field(default=None, alias="colorPalette")
    formality_range: Optional[str] = Field(default=None, alias="formalityRange")
    style_keywords: List[Any] = Field(default_factory=list, alias="styleKeywords")
    one_liner: Optional[str] = Field(default=None, alias="oneLiner")
    pairing_tendencies: Optional[str] = Field(default=None, alias="pairingTendencies")
    comprehensive: Optional[ComprehensiveProfile] = None

    @field_validator(
        "dominant_silhouettes",
        "color_palette",
        "formality_range",
        "one_liner",
        "pairing_tendencies",
        mode="before",
    )
    @classmethod
    def _coerce_strings(cls, value: Any) -> Optional[str]:
        return string_or_none(value)

    @field_validator("style_keywords", mode="before")
    @classmethod
    def _coerce_keywords(cls, value: Any) -> List[Any]:
        return list_or_empty(value)

    @field_validator("comprehensive", mode="before")
    @classmethod
    def _coerce_comprehensive(cls, value: Any) -> Optional[ComprehensiveProfile]:
        # Only normalized profiles are embedded; raw generator output never is.
        return value if isinstance(value, ComprehensiveProfile) else None

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude={"comprehensive"})
        if self.comprehensive is not None:
            data["comprehensive"] = self.comprehensive.to_dict()
        return data


__all__ = ["StyleProfileData"]
