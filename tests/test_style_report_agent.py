"""End-to-end runs of the style report agent against local stores and a scripted generator."""

from pathlib import Path
import sys

import pytest
from pydantic import ValidationError

sys.path.append(str(Path(__file__).resolve().parents[1]))

from agents.style_report_agent import (
    COMPREHENSIVE_MAX_TOKENS,
    PROFILE_SOURCE,
    STYLE_REPORT_MAX_TOKENS,
    StyleReportAgent,
    not_enough_looks_message,
)
from memory.profile_store import JSONProfileStore
from models.style_report import DEFAULT_HEADLINE, REPORT_DATA_VERSION
from tools.generation_client import GenerationError, MockGenerationClient
from tools.look_store import SQLiteLookStore
from tools.settings_provider import StaticSettingsProvider

FIXED_TIME = "2025-02-22T10:00:00.000Z"

PRIMARY_RESPONSE = {
    "styleProfile": {
        "dominantSilhouettes": "relaxed",
        "colorPalette": "earth tones",
        "formalityRange": "casual to smart casual",
        "styleKeywords": [],
        "oneLiner": "Easy layers in warm neutrals.",
        "pairingTendencies": "Denim with white sneakers.",
    },
    "report": {
        "headline": "Relaxed and warm",
        "sections": [
            {"title": "Summary", "content": "Mostly casual layering."},
            {"title": "Recommendations", "content": "Try a structured coat."},
        ],
    },
}


class SpyProfileStore(JSONProfileStore):
    """Records writes so tests can assert ordering and absence of writes."""

    def __init__(self, base_dir: Path) -> None:
        super().__init__(base_dir)
        self.writes = []

    def write_profile(self, user_id, source, data):
        self.writes.append(("profile", user_id))
        super().write_profile(user_id, source, data)

    def save_latest_report(self, user_id, report_data):
        self.writes.append(("report", user_id))
        super().save_latest_report(user_id, report_data)


class FailingProfileStore(JSONProfileStore):
    def write_profile(self, user_id, source, data):
        raise OSError("disk full")


def _seed_looks(store: SQLiteLookStore, user_id: str, count: int) -> None:
    for index in range(count):
        store.add_look(
            user_id,
            look_data={
                "timeOfDay": "day",
                "labels": ["casual"],
                "itemsSummary": [
                    {"type": "clothing", "description": f"tee {index}", "category": "top", "color": "white"},
                    {"type": "footwear", "description": "sneakers", "color_primary": "white"},
                ],
            },
            image_url=f"https://cdn.example.com/{index}.jpg",
            vibe="relaxed",
            occasion="weekend",
            created_at=1_700_000_000 + index,
        )


def _agent(tmp_path: Path, client, profile_store=None, min_looks=2, max_looks=15) -> StyleReportAgent:
    look_store = SQLiteLookStore(tmp_path / "looks.db")
    _seed_looks(look_store, "user-1", 3)
    return StyleReportAgent(
        look_store=look_store,
        profile_store=profile_store or SpyProfileStore(tmp_path / "profiles"),
        settings_provider=StaticSettingsProvider(min_looks=min_looks, max_looks=max_looks),
        generation_client=client,
        clock=lambda: FIXED_TIME,
    )


def test_not_enough_looks_short_circuits_without_writes(tmp_path: Path) -> None:
    client = MockGenerationClient(default=PRIMARY_RESPONSE)
    store = SpyProfileStore(tmp_path / "profiles")
    agent = _agent(tmp_path, client, profile_store=store, min_looks=4)

    result = agent.run("user-1")

    assert result == {
        "report_data": None,
        "style_profile_updated": False,
        "not_enough_looks": True,
        "message": not_enough_looks_message(4),
    }
    assert "4 look(s)" in result["message"]
    assert store.writes == []
    assert client.calls == []


def test_full_run_builds_report_and_profile(tmp_path: Path) -> None:
    comprehensive = {
        "elements": {"silhouette_and_fit": {"label": "Silhouette", "sub_elements": {"fit": {"value": "loose"}}}},
        "synthesis": {
            "style_descriptor_short": "Relaxed neutral",
            "dominant_colors": ["white", "beige"],
            "style_keywords": ["relaxed", "neutral"],
            "one_line_takeaway": "Comfort first.",
        },
        "style_dna": {"archetype_name": "The Easygoer", "keywords": ["easy"]},
        "extra": "ignored",
    }
    client = MockGenerationClient([PRIMARY_RESPONSE, comprehensive])
    store = SpyProfileStore(tmp_path / "profiles")
    agent = _agent(tmp_path, client, profile_store=store)

    result = agent.run("  user-1  ")
    report = result["report_data"]

    assert result["style_profile_updated"] is True
    assert report.version == REPORT_DATA_VERSION
    assert report.generated_at == FIXED_TIME
    assert report.headline == "Relaxed and warm"
    assert [section.title for section in report.sections] == ["Summary", "Recommendations"]
    assert [view.look_id for view in report.by_looks] == [
        look.look_id for look in agent.look_store.list_looks_for_report("user-1", 15).items
    ]
    assert report.by_items.aggregates.item_count == 6
    assert report.comprehensive.meta.generated_at == FIXED_TIME
    assert report.comprehensive.meta.generated_from_looks == 3
    assert report.comprehensive.meta.version == "1"
    assert store.writes == [("profile", "user-1"), ("report", "user-1")]

    stored = store.get_profile("user-1")["style_profile"]
    assert stored["source"] == PROFILE_SOURCE
    data = stored["data"]
    assert data["colorPalette"] == "white, beige"
    assert data["oneLiner"] == "Easy layers in warm neutrals."
    assert data["dominantSilhouettes"] == "relaxed"
    assert data["styleKeywords"] == ["relaxed", "neutral"]
    assert data["comprehensive"] == report.comprehensive.to_dict()
    assert "extra" not in data["comprehensive"]

    latest = store.get_latest_report("user-1")["report_data"]
    assert latest == report.to_dict()
    assert latest["generatedAt"] == FIXED_TIME


def test_generation_calls_use_expected_parameters(tmp_path: Path) -> None:
    client = MockGenerationClient([PRIMARY_RESPONSE, {"synthesis": {}}])
    agent = _agent(tmp_path, client)

    agent.run("user-1")

    primary_call, comprehensive_call = client.calls
    assert primary_call["max_tokens"] == STYLE_REPORT_MAX_TOKENS
    assert comprehensive_call["max_tokens"] == COMPREHENSIVE_MAX_TOKENS
    assert primary_call["temperature"] == comprehensive_call["temperature"] == 0.3
    assert primary_call["response_format"] == "structured-json"
    assert "None yet." in primary_call["messages"][-1]["content"]
    assert primary_call["messages"][0]["role"] == "system"


def test_existing_profile_is_offered_to_the_primary_prompt(tmp_path: Path) -> None:
    store = SpyProfileStore(tmp_path / "profiles")
    store.write_profile("user-1", source="manual", data={"oneLiner": "Loves linen."})
    client = MockGenerationClient([PRIMARY_RESPONSE, GenerationError("boom")])
    agent = _agent(tmp_path, client, profile_store=store)

    agent.run("user-1")

    assert "Loves linen." in client.calls[0]["messages"][-1]["content"]


def test_both_generations_failing_still_persists_default_report(tmp_path: Path) -> None:
    client = MockGenerationClient()
    store = SpyProfileStore(tmp_path / "profiles")
    agent = _agent(tmp_path, client, profile_store=store, min_looks=3)

    result = agent.run("user-1")
    report_dict = result["report_data"].to_dict()

    assert result["style_profile_updated"] is True
    assert report_dict["headline"] == DEFAULT_HEADLINE
    assert report_dict["sections"] == []
    assert "comprehensive" not in report_dict
    assert len(report_dict["byLooks"]) == 3
    assert store.writes == [("profile", "user-1"), ("report", "user-1")]
    data = store.get_profile("user-1")["style_profile"]["data"]
    assert data["styleKeywords"] == []
    assert "comprehensive" not in data


def test_malformed_primary_output_falls_back(tmp_path: Path) -> None:
    client = MockGenerationClient(["```json\n{not valid", ["a", "list"]])
    agent = _agent(tmp_path, client)

    report = agent.run("user-1")["report_data"]

    assert report.headline == DEFAULT_HEADLINE
    assert report.comprehensive is None


def test_keywords_come_from_style_dna_when_nothing_else_supplies_them(tmp_path: Path) -> None:
    client = MockGenerationClient([GenerationError("down"), {"style_dna": {"keywords": ["minimal", "clean"]}}])
    store = SpyProfileStore(tmp_path / "profiles")
    agent = _agent(tmp_path, client, profile_store=store)

    result = agent.run("user-1")

    data = store.get_profile("user-1")["style_profile"]["data"]
    assert data["styleKeywords"] == ["minimal", "clean"]
    assert result["report_data"].headline == DEFAULT_HEADLINE
    assert result["report_data"].comprehensive.style_dna.keywords == ["minimal", "clean"]


def test_max_looks_limits_the_looks_used(tmp_path: Path) -> None:
    client = MockGenerationClient()
    agent = _agent(tmp_path, client, min_looks=1, max_looks=2)

    report = agent.run("user-1")["report_data"]

    assert len(report.by_looks) == 2


def test_persistence_failure_propagates(tmp_path: Path) -> None:
    client = MockGenerationClient([PRIMARY_RESPONSE, {"synthesis": {}}])
    agent = _agent(tmp_path, client, profile_store=FailingProfileStore(tmp_path / "profiles"))

    with pytest.raises(OSError, match="disk full"):
        agent.run("user-1")


@pytest.mark.parametrize("user_id", [None, "", "   ", "../escaped", "a/b", "a\\b"])
def test_invalid_user_id_is_rejected(tmp_path: Path, user_id) -> None:
    client = MockGenerationClient()
    store = SpyProfileStore(tmp_path / "profiles")
    agent = _agent(tmp_path, client, profile_store=store)

    with pytest.raises(ValidationError):
        agent.run(user_id)
    assert store.writes == []


def test_user_id_with_path_segments_never_reaches_the_store(tmp_path: Path) -> None:
    client = MockGenerationClient()
    store = SpyProfileStore(tmp_path / "profiles")
    agent = _agent(tmp_path, client, profile_store=store, min_looks=1)
    _seed_looks(agent.look_store, "../escaped", 1)

    with pytest.raises(ValidationError):
        agent.run("../escaped")

    assert store.writes == []
    assert not (tmp_path / "escaped.json").exists()
