"""Prompt text, response schemas and data snippets for the two generations."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from models.comprehensive import COMPREHENSIVE_ELEMENT_KEYS
from models.style_report import ByItemsView, LookView

LOOKS_SNIPPET_LIMIT = 3000
ITEMS_SNIPPET_LIMIT = 2000
EXISTING_PROFILE_SNIPPET_LIMIT = 800
NO_EXISTING_PROFILE = "None yet."

GUARDRAIL_BULLETS: List[str] = [
    "Output only one valid JSON object. No markdown, code fences or preamble.",
    "Base every statement on the supplied look and item data; do not invent garments.",
    "Use null or an empty array where a field cannot be inferred.",
]

_STRING = {"type": "string"}
_NULLABLE_STRING = {"type": "string", "nullable": True}
_STRING_LIST = {"type": "array", "items": _STRING}

PRIMARY_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "styleProfile": {
            "type": "object",
            "properties": {
                "dominantSilhouettes": _NULLABLE_STRING,
                "colorPalette": _NULLABLE_STRING,
                "formalityRange": _NULLABLE_STRING,
                "styleKeywords": _STRING_LIST,
                "oneLiner": _NULLABLE_STRING,
                "pairingTendencies": _NULLABLE_STRING,
            },
        },
        "report": {
            "type": "object",
            "properties": {
                "headline": _STRING,
                "sections": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {"title": _STRING, "content": _STRING},
                        "required": ["title", "content"],
                    },
                },
            },
            "required": ["headline", "sections"],
        },
    },
    "required": ["styleProfile", "report"],
}

_ELEMENT_SCHEMA = {
    "type": "object",
    "properties": {
        "label": _STRING,
        "sub_elements": {"type": "object"},
    },
}

COMPREHENSIVE_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "elements": {
            "type": "object",
            "properties": {key: _ELEMENT_SCHEMA for key in COMPREHENSIVE_ELEMENT_KEYS},
        },
        "synthesis": {
            "type": "object",
            "properties": {
                "style_descriptor_short": _STRING,
                "style_descriptor_long": _NULLABLE_STRING,
                "style_keywords": _STRING_LIST,
                "one_line_takeaway": _STRING,
                "dominant_categories": _STRING_LIST,
                "dominant_colors": _STRING_LIST,
                "dominant_silhouettes": _STRING_LIST,
            },
        },
        "style_dna": {
            "type": "object",
            "properties": {
                "archetype_name": _STRING,
                "archetype_tagline": _NULLABLE_STRING,
                "keywords": _STRING_LIST,
                "dna_line": _STRING,
            },
        },
        "ideas_for_you": {
            "type": "object",
            "properties": {
                "within_style_zone": _STRING_LIST,
                "adjacent_style_zone": _STRING_LIST,
            },
        },
    },
    "required": ["synthesis", "style_dna"],
}


def system_instruction(role_hint: str) -> str:
    """Compose the JSON-only system prompt shared by both generations."""

    boundary_text = "\n".join(f"- {bullet}" for bullet in GUARDRAIL_BULLETS)
    return f"You are a fashion style analyst producing a {role_hint}.\n{boundary_text}"


def _compact(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def looks_snippet(look_views: Sequence[LookView]) -> str:
    summaries = [
        {
            "vibe": view.vibe,
            "occasion": view.occasion,
            "timeOfDay": view.time_of_day,
            "labels": view.labels,
            "classificationTags": view.classification_tags,
            "pairingSummary": view.pairing_summary,
            "itemCountByType": view.item_count_by_type(),
        }
        for view in look_views
    ]
    return _compact(summaries)[:LOOKS_SNIPPET_LIMIT]


def items_snippet(by_items: ByItemsView) -> str:
    return _compact(by_items.aggregates.to_dict())[:ITEMS_SNIPPET_LIMIT]


def existing_profile_snippet(existing_data: Optional[Dict[str, Any]]) -> str:
    if existing_data is None:
        return NO_EXISTING_PROFILE
    return _compact(existing_data)[:EXISTING_PROFILE_SNIPPET_LIMIT]


def build_primary_messages(looks_data: str, items_data: str, existing_data: str) -> List[Dict[str, str]]:
    prompt = f"""Based on the user's recent looks and item aggregates, produce:
1) A style profile (for personalization): dominant silhouettes, color palette, formality range, style keywords, one-liner summary. Optionally "pairingTendencies": one sentence on how they pair clothing with footwear/accessories.
2) A short report: headline and 2-4 sections (e.g. "Summary", "Look patterns", "Item patterns", "Recommendations") with title and content (1-3 sentences or bullets).

Data:
By-looks (with pairing per look): {looks_data}
By-items (aggregate counts): {items_data}
Existing style profile (if any): {existing_data}

Respond with a single JSON object with exactly two keys:
- "styleProfile": object with keys: dominantSilhouettes (string), colorPalette (string), formalityRange (string), styleKeywords (array of strings), oneLiner (string), pairingTendencies (string or null).
- "report": object with keys: headline (string), sections (array of {{ title: string, content: string }})."""
    return [
        {"role": "system", "content": system_instruction("style profile and short style report")},
        {"role": "user", "content": prompt},
    ]


def build_comprehensive_messages(looks_data: str, items_data: str) -> List[Dict[str, str]]:
    dimension_keys = ", ".join(COMPREHENSIVE_ELEMENT_KEYS)
    prompt = f"""Based on the user's recent looks and item aggregates below, produce a structured "comprehensive" style profile built from style dimensions and a synthesis.

Data:
By-looks (vibes, occasions, pairing per look): {looks_data}
By-items (aggregate counts): {items_data}

Respond with a single JSON object with up to four keys (you may omit "elements" if too large; always return synthesis and style_dna):
- "elements": optional object. Keys can be any of: {dimension_keys}. Each value: {{ "label": "Human title", "sub_elements": {{ "key_name": {{ "value": "..." or [], "scale": ["low","medium","high"] optional }} }} }}. Keep each dimension to 1-3 sub_elements.
- "synthesis": {{ "style_descriptor_short": string, "style_descriptor_long": string optional, "style_keywords": string[], "one_line_takeaway": string, "dominant_categories": string[], "dominant_colors": string[], "dominant_silhouettes": string[] }}.
- "style_dna": {{ "archetype_name": string, "archetype_tagline": string optional, "keywords": string[], "dna_line": string }}.
- "ideas_for_you": {{ "within_style_zone": string[], "adjacent_style_zone": string[] }} optional."""
    return [
        {"role": "system", "content": system_instruction("nine-dimension comprehensive style profile")},
        {"role": "user", "content": prompt},
    ]


__all__ = [
    "COMPREHENSIVE_RESPONSE_SCHEMA",
    "NO_EXISTING_PROFILE",
    "PRIMARY_RESPONSE_SCHEMA",
    "build_comprehensive_messages",
    "build_primary_messages",
    "existing_profile_snippet",
    "items_snippet",
    "looks_snippet",
    "system_instruction",
]
