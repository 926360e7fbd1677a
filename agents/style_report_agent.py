"""Style report agent: turns a user's recent looks into a report and a style profile."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from logic.aggregation import build_by_items
from logic.item_reshaper import build_by_looks
from logic.normalizer import PrimaryGeneration, normalize_comprehensive, parse_primary_generation
from logic.profile_merger import flat_from_comprehensive
from logic.prompts import (
    COMPREHENSIVE_RESPONSE_SCHEMA,
    PRIMARY_RESPONSE_SCHEMA,
    build_comprehensive_messages,
    build_primary_messages,
    existing_profile_snippet,
    items_snippet,
    looks_snippet,
)
from logic.validation import StyleReportRequest
from memory.profile_store import ProfileStore
from models.comprehensive import ComprehensiveProfile
from models.style_profile import StyleProfileData
from models.style_report import StyleReportData
from style_app.logging_config import get_logger, log_event, operation_context
from tools.generation_client import STRUCTURED_JSON, GenerationClient
from tools.look_store import LookStore
from tools.observability import instrument_call
from tools.settings_provider import SettingsProvider

LOGGER = get_logger(__name__)

PROFILE_SOURCE = "style_report_agent"
STYLE_REPORT_MAX_TOKENS = 2000
COMPREHENSIVE_MAX_TOKENS = 2500
GENERATION_TEMPERATURE = 0.3


def utc_timestamp() -> str:
    """ISO 8601 UTC timestamp with millisecond precision, e.g. ``2025-02-22T10:00:00.000Z``."""

    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def not_enough_looks_message(min_looks: int) -> str:
    return (
        f"Add at least {min_looks} look(s) (upload and analyze outfit images) "
        "to generate your style report."
    )


class StyleReportAgent:
    """Builds a versioned style report and replaces the user's style profile.

    A run reshapes the most recent looks into per-look and per-item views,
    asks the generator for a flat profile plus short report and, separately,
    for the nine-dimension comprehensive profile. Either generation may fail
    without stopping the run; store failures are not caught.
    """

    def __init__(
        self,
        look_store: LookStore,
        profile_store: ProfileStore,
        settings_provider: SettingsProvider,
        generation_client: GenerationClient,
        clock: Callable[[], str] | None = None,
    ) -> None:
        self.look_store = look_store
        self.profile_store = profile_store
        self.settings_provider = settings_provider
        self.generation_client = generation_client
        self.clock = clock or utc_timestamp
        self._complete = instrument_call("generation_client.complete")(generation_client.complete)

    def run(self, user_id: Any, force_regenerate: bool = False) -> Dict[str, Any]:
        """Run the full pipeline for one user.

        Returns ``{"report_data": StyleReportData, "style_profile_updated": True}``
        on success, or ``report_data=None`` with ``not_enough_looks`` and a
        ``message`` when the user has fewer looks than ``min_looks``.

        Raises:
            pydantic.ValidationError: if ``user_id`` is missing or blank.
        """

        request = StyleReportRequest.model_validate(
            {"user_id": user_id, "force_regenerate": force_regenerate}
        )
        uid = request.user_id

        with operation_context("agent:style_report.run") as correlation_id:
            log_event(
                LOGGER,
                logging.INFO,
                "agent_call_started",
                agent="style_report",
                method="run",
                user_id=uid,
                force_regenerate=request.force_regenerate,
                correlation_id=correlation_id,
            )

            settings = self.settings_provider.get_settings()
            page = self.look_store.list_looks_for_report(uid, settings.max_looks)
            looks = page.items
            if len(looks) < settings.min_looks:
                log_event(
                    LOGGER,
                    logging.INFO,
                    "style_report_not_enough_looks",
                    agent="style_report",
                    look_count=len(looks),
                    min_looks=settings.min_looks,
                    correlation_id=correlation_id,
                )
                return {
                    "report_data": None,
                    "style_profile_updated": False,
                    "not_enough_looks": True,
                    "message": not_enough_looks_message(settings.min_looks),
                }

            by_looks = build_by_looks(looks)
            by_items = build_by_items(by_looks)

            existing_profile = self.profile_store.get_profile(uid)
            existing_data = ((existing_profile or {}).get("style_profile") or {}).get("data")
            looks_data = looks_snippet(by_looks)
            items_data = items_snippet(by_items)

            generated_at = self.clock()
            primary = self._generate_primary(
                looks_data, items_data, existing_profile_snippet(existing_data), correlation_id
            )
            comprehensive = self._generate_comprehensive(looks_data, items_data, correlation_id)

            report = StyleReportData(
                generated_at=generated_at,
                headline=primary.headline,
                sections=list(primary.sections),
                by_looks=by_looks,
                by_items=by_items,
            )
            profile = primary.style_profile
            if comprehensive is not None:
                stamped = comprehensive.with_meta(generated_at, len(by_looks))
                report.comprehensive = stamped
                profile = flat_from_comprehensive(comprehensive, profile).model_copy(
                    update={"comprehensive": stamped}
                )

            self._persist(uid, profile, report, correlation_id)

            log_event(
                LOGGER,
                logging.INFO,
                "agent_call_completed",
                agent="style_report",
                method="run",
                look_count=len(by_looks),
                item_count=by_items.aggregates.item_count,
                section_count=len(report.sections),
                has_comprehensive=report.comprehensive is not None,
                correlation_id=correlation_id,
            )
            return {"report_data": report, "style_profile_updated": True}

    def _generate_primary(
        self, looks_data: str, items_data: str, existing_data: str, correlation_id: str
    ) -> PrimaryGeneration:
        """Flat profile and short report; any failure yields the default report."""

        messages = build_primary_messages(looks_data, items_data, existing_data)
        try:
            raw = self._complete(
                messages,
                response_format=STRUCTURED_JSON,
                max_tokens=STYLE_REPORT_MAX_TOKENS,
                temperature=GENERATION_TEMPERATURE,
                response_schema=PRIMARY_RESPONSE_SCHEMA,
            )
            return parse_primary_generation(raw)
        except Exception as exc:  # noqa: BLE001
            log_event(
                LOGGER,
                logging.WARNING,
                "primary_generation_failed",
                agent="style_report",
                error=f"{type(exc).__name__}: {exc}",
                correlation_id=correlation_id,
            )
            return PrimaryGeneration.fallback()

    def _generate_comprehensive(
        self, looks_data: str, items_data: str, correlation_id: str
    ) -> Optional[ComprehensiveProfile]:
        """Nine-dimension profile, or ``None`` when generation fails or is unusable."""

        messages = build_comprehensive_messages(looks_data, items_data)
        try:
            raw = self._complete(
                messages,
                response_format=STRUCTURED_JSON,
                max_tokens=COMPREHENSIVE_MAX_TOKENS,
                temperature=GENERATION_TEMPERATURE,
                response_schema=COMPREHENSIVE_RESPONSE_SCHEMA,
            )
        except Exception as exc:  # noqa: BLE001
            log_event(
                LOGGER,
                logging.WARNING,
                "comprehensive_generation_failed",
                agent="style_report",
                error=f"{type(exc).__name__}: {exc}",
                correlation_id=correlation_id,
            )
            return None

        comprehensive = normalize_comprehensive(raw)
        if comprehensive is None:
            log_event(
                LOGGER,
                logging.WARNING,
                "comprehensive_generation_unusable",
                agent="style_report",
                response_type=type(raw).__name__,
                correlation_id=correlation_id,
            )
        return comprehensive

    def _persist(
        self,
        user_id: str,
        profile: StyleProfileData,
        report: StyleReportData,
        correlation_id: str,
    ) -> None:
        try:
            self.profile_store.write_profile(user_id, source=PROFILE_SOURCE, data=profile.to_dict())
            self.profile_store.save_latest_report(user_id, report.to_dict())
        except Exception:
            log_event(
                LOGGER,
                logging.ERROR,
                "style_report_persist_failed",
                agent="style_report",
                correlation_id=correlation_id,
                exc_info=True,
            )
            raise


__all__ = ["PROFILE_SOURCE", "StyleReportAgent", "not_enough_looks_message", "utc_timestamp"]
