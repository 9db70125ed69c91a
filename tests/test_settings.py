"""Tests for persisted viewer settings."""

from pathlib import Path

import pytest

from mturkview.settings import ViewerSettings, load_settings, save_settings, settings_path


class TestViewerSettings:
    """Tests for load_settings() / save_settings()."""

    def test_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        settings = ViewerSettings(
            recent_files=[tmp_path / "a.csv", tmp_path / "b.csv"],
            additional_required_fields=["Answer.sentiment"],
        )

        save_settings(settings, path)

        assert load_settings(path) == settings

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_settings(tmp_path / "nope.json") == ViewerSettings()

    def test_corrupt_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_settings(path) == ViewerSettings()

    def test_wrong_types_are_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(
            '{"recent_files": "a.csv", "additional_required_fields": ["x", 3, ""]}',
            encoding="utf-8",
        )

        assert load_settings(path) == ViewerSettings(additional_required_fields=["x"])

    def test_write_failure_does_not_raise(self, tmp_path: Path) -> None:
        save_settings(ViewerSettings(), tmp_path / "missing_dir" / "settings.json")

    def test_env_overrides_location(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        target = tmp_path / "custom.json"
        monkeypatch.setenv("MTURKVIEW_SETTINGS_PATH", str(target))

        assert settings_path() == target
