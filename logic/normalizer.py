"""Validate and coerce untrusted generator output into canonical shapes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from models.comprehensive import (
    COMPREHENSIVE_ELEMENT_KEYS,
    ComprehensiveProfile,
    IdeasForYou,
    StyleDna,
    StyleElement,
    Synthesis,
    element_label,
)
from models.style_profile import StyleProfileData
from models.style_report import DEFAULT_HEADLINE, ReportSection
from tools.generation_client import GenerationError

FacetT = TypeVar("FacetT", bound=BaseModel)


def _normalize_facet(raw: Any, model: Type[FacetT]) -> Optional[FacetT]:
    """Validate one facet; anything that is not a mapping counts as absent."""

    if not isinstance(raw, Mapping):
        return None
    try:
        return model.model_validate(dict(raw))
    except ValidationError:
        return None


def _normalize_elements(raw: Any) -> Optional[Dict[str, StyleElement]]:
    if not isinstance(raw, Mapping):
        return None
    elements: Dict[str, StyleElement] = {}
    for key in COMPREHENSIVE_ELEMENT_KEYS:
        element = raw.get(key)
        if not isinstance(element, Mapping):
            continue
        label = element.get("label")
        elements[key] = StyleElement(
            label=label if isinstance(label, str) else element_label(key),
            sub_elements=element.get("sub_elements"),
        )
    return elements


def normalize_comprehensive(raw: Any) -> Optional[ComprehensiveProfile]:
    """Coerce a raw comprehensive generation into a :class:`ComprehensiveProfile`.

    Returns ``None`` when ``raw`` is not a mapping or when none of the four
    facets (``elements``, ``synthesis``, ``style_dna``, ``ideas_for_you``)
    survives validation. Unknown keys are dropped. Never raises.
    """

    if not isinstance(raw, Mapping):
        return None

    profile = ComprehensiveProfile(
        elements=_normalize_elements(raw.get("elements")),
        synthesis=_normalize_facet(raw.get("synthesis"), Synthesis),
        style_dna=_normalize_facet(raw.get("style_dna"), StyleDna),
        ideas_for_you=_normalize_facet(raw.get("ideas_for_you"), IdeasForYou),
    )
    if profile.facet_count == 0:
        return None
    return profile


@dataclass
class PrimaryGeneration:
    """Flat profile and short report produced by the primary generation."""

    style_profile: StyleProfileData = field(default_factory=StyleProfileData)
    headline: str = DEFAULT_HEADLINE
    sections: List[ReportSection] = field(default_factory=list)

    @classmethod
    def fallback(cls) -> "PrimaryGeneration":
        return cls()


def _parse_sections(raw_sections: Any) -> List[ReportSection]:
    if not isinstance(raw_sections, list):
        return []
    sections: List[ReportSection] = []
    for raw_section in raw_sections:
        section = raw_section if isinstance(raw_section, Mapping) else {}
        title = section.get("title")
        content = section.get("content")
        sections.append(
            ReportSection(
                title=str(title) if title else "Section",
                content=str(content) if content else "",
            )
        )
    return sections


def parse_primary_generation(raw: Any) -> PrimaryGeneration:
    """Adopt whichever parts of the two-key primary response are usable.

    Raises :class:`GenerationError` when the response is not a JSON object at
    all; missing or malformed keys fall back to the defaults individually.
    """

    if not isinstance(raw, Mapping):
        raise GenerationError(f"Primary generation returned {type(raw).__name__}, expected an object")

    result = PrimaryGeneration()

    raw_profile = raw.get("styleProfile")
    if isinstance(raw_profile, Mapping):
        profile_fields = {key: value for key, value in raw_profile.items() if key != "comprehensive"}
        result.style_profile = StyleProfileData.model_validate(profile_fields)

    report = raw.get("report")
    if isinstance(report, Mapping):
        headline = report.get("headline")
        if isinstance(headline, str) and headline:
            result.headline = headline
        sections = _parse_sections(report.get("sections"))
        if sections:
            result.sections = sections

    return result


__all__ = ["PrimaryGeneration", "normalize_comprehensive", "parse_primary_generation"]
