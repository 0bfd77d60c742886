"""Tests for YAML settings."""

from __future__ import annotations

from pathlib import Path

from bodytrack.config.settings import Settings


class TestSettings:
    """Tests for Settings.load and Settings.save."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        settings = Settings.load(tmp_path / "config.yaml")
        assert settings.database.path.name == "bodytrack.db"
        assert settings.nutrition.calories == 2500
        assert settings.logging.level == "WARNING"

    def test_load_overrides(self, tmp_path: Path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text(
            "database:\n"
            f"  path: {tmp_path / 'data.db'}\n"
            "nutrition:\n"
            "  calories: 2200\n"
            "  water: 10\n"
            "defaults:\n"
            "  output_format: json\n"
            "logging:\n"
            "  level: debug\n"
        )
        settings = Settings.load(config)

        assert settings.database.path == tmp_path / "data.db"
        assert settings.nutrition.calories == 2200.0
        assert settings.nutrition.protein == 150
        assert settings.nutrition.water == 10
        assert settings.defaults.output_format == "json"
        assert settings.logging.level == "DEBUG"

        goals = settings.nutrition.to_goals()
        assert goals.calories == 2200.0
        assert goals.source == "manual"

    def test_empty_file(self, tmp_path: Path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("")
        assert Settings.load(config).nutrition.fat == 80

    def test_save_and_reload(self, tmp_path: Path) -> None:
        config = tmp_path / "nested" / "config.yaml"
        settings = Settings()
        settings.nutrition.protein = 180
        settings.database.path = tmp_path / "other.db"
        settings.save(config)

        reloaded = Settings.load(config)
        assert reloaded.nutrition.protein == 180
        assert reloaded.database.path == tmp_path / "other.db"
