"""Pydantic schemas for validating style report requests and settings updates."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator


class StyleReportRequest(BaseModel):
    """Input contract for one style report run."""

    user_id: str = Field(min_length=1)
    force_regenerate: bool = False

    @field_validator("user_id", mode="before")
    @classmethod
    def _normalize_user_id(cls, value: Any) -> Any:
        if value is None:
            return value
        return str(value).strip()

    @field_validator("user_id")
    @classmethod
    def _reject_path_segments(cls, value: str) -> str:
        # User ids name files in the JSON profile store.
        if "/" in value or "\\" in value or ".." in value:
            raise ValueError("user_id must not contain path separators or '..'")
        return value


class SettingsUpdate(BaseModel):
    """Partial update for the look-count bounds."""

    min_looks: Optional[float] = Field(default=None, allow_inf_nan=False)
    max_looks: Optional[float] = Field(default=None, allow_inf_nan=False)


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["invalid_request"] = "invalid_request"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent payload."""

    return ValidationResult(message=message, details=exc.errors(include_url=False)).model_dump()


__all__ = [
    "SettingsUpdate",
    "StyleReportRequest",
    "ValidationResult",
    "validation_failure",
]
