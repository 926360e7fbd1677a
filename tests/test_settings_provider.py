from pathlib import Path
import json
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from tools.settings_provider import (
    JSONSettingsProvider,
    StaticSettingsProvider,
    StyleReportSettings,
    coerce_bound,
    merge_settings,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 15),
        ("abc", 15),
        (0, 15),
        (True, 15),
        (float("nan"), 15),
        (-3, 1),
        (120, 50),
        (7.9, 7),
        ("12", 12),
    ],
)
def test_coerce_bound(raw, expected) -> None:
    assert coerce_bound(raw, 15) == expected


def test_json_provider_defaults_when_file_missing_or_corrupt(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    provider = JSONSettingsProvider(path)

    assert provider.get_settings() == StyleReportSettings(min_looks=1, max_looks=15)

    path.write_text("{broken")
    assert provider.get_settings() == StyleReportSettings()

    path.write_text("[1, 2]")
    assert provider.get_settings() == StyleReportSettings()


def test_json_provider_clamps_stored_values(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"min_looks": 0, "max_looks": 80}))

    settings = JSONSettingsProvider(path).get_settings()

    assert settings == StyleReportSettings(min_looks=1, max_looks=50)


def test_save_settings_merges_and_raises_max_to_min(tmp_path: Path) -> None:
    provider = JSONSettingsProvider(tmp_path / "settings.json")

    saved = provider.save_settings(min_looks=20.7)

    assert saved == StyleReportSettings(min_looks=20, max_looks=20)
    assert provider.get_settings() == saved

    updated = provider.save_settings(max_looks=30)
    assert updated == StyleReportSettings(min_looks=20, max_looks=30)


def test_static_provider_save_settings() -> None:
    provider = StaticSettingsProvider(min_looks=3, max_looks=5)

    assert provider.get_settings() == StyleReportSettings(min_looks=3, max_looks=5)
    assert provider.save_settings(max_looks=99) == StyleReportSettings(min_looks=3, max_looks=50)


@pytest.mark.parametrize("bad", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_updates_keep_current_bounds(tmp_path: Path, bad: float) -> None:
    provider = JSONSettingsProvider(tmp_path / "settings.json")
    provider.save_settings(min_looks=3, max_looks=9)

    assert provider.save_settings(min_looks=bad) == StyleReportSettings(min_looks=3, max_looks=9)
    assert provider.save_settings(max_looks=bad) == StyleReportSettings(min_looks=3, max_looks=9)
    assert merge_settings(StyleReportSettings(), bad, bad) == StyleReportSettings()
