"""Style report service bootstrap."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from agents.style_report_agent import StyleReportAgent
from logic.validation import SettingsUpdate, StyleReportRequest
from memory.profile_store import JSONProfileStore, ProfileStore, SQLiteProfileStore
from style_app.config import DEFAULT_DATA_DIR, StyleReportConfig
from style_app.logging_config import configure_logging, get_logger, log_event, operation_context
from tools.generation_client import GeminiGenerationClient, GenerationClient, MockGenerationClient
from tools.look_store import LookStore, SQLiteLookStore
from tools.settings_provider import JSONSettingsProvider, SettingsProvider

LOGGER = get_logger(__name__)


class StyleReportApp:
    """Wires together config, stores, the generation client and the agent."""

    def __init__(
        self,
        config: StyleReportConfig | None = None,
        look_store: LookStore | None = None,
        profile_store: ProfileStore | None = None,
        settings_provider: SettingsProvider | None = None,
        generation_client: GenerationClient | None = None,
    ) -> None:
        self.config = config or StyleReportConfig.from_env()
        configure_logging()

        data_dir = Path(DEFAULT_DATA_DIR)
        self.look_store = look_store or SQLiteLookStore(self.config.looks_db_path or data_dir / "looks.db")
        self.profile_store = profile_store or self._build_profile_store(data_dir)
        self.settings_provider = settings_provider or JSONSettingsProvider(
            self.config.settings_path or data_dir / "style_report_settings.json"
        )
        self.generation_client = generation_client or self._build_generation_client()
        self.style_report_agent = StyleReportAgent(
            look_store=self.look_store,
            profile_store=self.profile_store,
            settings_provider=self.settings_provider,
            generation_client=self.generation_client,
        )

    def _build_profile_store(self, data_dir: Path) -> ProfileStore:
        if self.config.profile_store_backend == "sqlite":
            return SQLiteProfileStore(self.config.profile_store_path or data_dir / "profiles.db")
        return JSONProfileStore(self.config.profile_store_path or data_dir / "profiles")

    def _build_generation_client(self) -> GenerationClient:
        if self.config.generation_backend == "mock":
            # Every generation fails, so runs exercise the fallback report path.
            return MockGenerationClient()
        return GeminiGenerationClient(
            model=self.config.model,
            api_key=self.config.api_key,
            timeout_seconds=self.config.generation_timeout_seconds,
        )

    def generate_style_report(self, user_id: Any, force_regenerate: bool = False) -> Dict[str, Any]:
        """Run the style report agent and return a JSON-ready result."""

        with operation_context("app:generate_style_report") as correlation_id:
            result = self.style_report_agent.run(user_id, force_regenerate=force_regenerate)
            report = result.get("report_data")
            response: Dict[str, Any] = {
                "report_data": report.to_dict() if report is not None else None,
                "style_profile_updated": result["style_profile_updated"],
            }
            if result.get("not_enough_looks"):
                response["not_enough_looks"] = True
                response["message"] = result.get("message")

            log_event(
                LOGGER,
                logging.INFO,
                "app_call_completed",
                agent="app",
                method="generate_style_report",
                correlation_id=correlation_id,
                style_profile_updated=response["style_profile_updated"],
            )
            return response

    def get_latest_report(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Return the stored report document, or ``None`` before the first run."""

        request = StyleReportRequest.model_validate({"user_id": user_id})
        latest = self.profile_store.get_latest_report(request.user_id)
        return latest.get("report_data") if latest else None

    def get_settings(self) -> Dict[str, int]:
        settings = self.settings_provider.get_settings()
        return {"min_looks": settings.min_looks, "max_looks": settings.max_looks}

    def update_settings(self, min_looks: Any = None, max_looks: Any = None) -> Dict[str, int]:
        update = SettingsUpdate.model_validate({"min_looks": min_looks, "max_looks": max_looks})
        settings = self.settings_provider.save_settings(update.min_looks, update.max_looks)
        return {"min_looks": settings.min_looks, "max_looks": settings.max_looks}


__all__ = ["StyleReportApp"]
