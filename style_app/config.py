"""Configuration helpers for the style report service."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_GEMINI_MODEL = "models/gemini-1.5-flash-002"
DEFAULT_DATA_DIR = "data"


@dataclass
class StyleReportConfig:
    """Configuration values for the style report service.

    Storage paths default to files under ``data/`` so a local run needs no
    setup beyond an API key. Setting ``generation_backend`` to ``"mock"``
    swaps the Gemini client for the scripted offline client.
    """

    model: str = DEFAULT_GEMINI_MODEL
    api_key: Optional[str] = None
    generation_backend: str = "gemini"
    generation_timeout_seconds: Optional[float] = None
    looks_db_path: Optional[str] = None
    profile_store_backend: str = "json"
    profile_store_path: Optional[str] = None
    settings_path: Optional[str] = None
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "StyleReportConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables so that secrets such as
        the Gemini API key can be injected by the runtime environment.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("STYLE_REPORT_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        model = get_value("model", DEFAULT_GEMINI_MODEL)
        api_key = get_value("google_api_key")
        generation_backend = get_value("generation_backend", "gemini")
        raw_timeout = get_value("generation_timeout_seconds")
        looks_db_path = get_value("looks_db_path")
        profile_store_backend = get_value("profile_store_backend", "json")
        profile_store_path = get_value("profile_store_path")
        settings_path = get_value("settings_path")

        return cls(
            model=str(model or DEFAULT_GEMINI_MODEL),
            api_key=api_key,
            generation_backend=str(generation_backend or "gemini").lower(),
            generation_timeout_seconds=cls._parse_timeout(raw_timeout),
            looks_db_path=looks_db_path,
            profile_store_backend=str(profile_store_backend or "json").lower(),
            profile_store_path=profile_store_path,
            settings_path=settings_path,
            environment=env_name,
        )

    @staticmethod
    def _parse_timeout(raw_value: Optional[str]) -> Optional[float]:
        if raw_value in (None, ""):
            return None
        try:
            timeout = float(raw_value)
        except ValueError:
            return None
        return timeout if timeout > 0 else None

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
