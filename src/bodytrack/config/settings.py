"""Application settings and configuration management."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from bodytrack.nutrition.models import NutritionGoals

logger = logging.getLogger(__name__)


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".bodytrack"


def _default_db_path() -> Path:
    """Return the default database path."""
    return _default_config_dir() / "bodytrack.db"


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: Path = field(default_factory=_default_db_path)


@dataclass
class NutritionConfig:
    """Goals new day logs start with until an evaluation replaces them."""

    calories: float = 2500
    protein: float = 150
    carbs: float = 300
    fat: float = 80
    water: int = 8

    def to_goals(self) -> NutritionGoals:
        return NutritionGoals(
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            water=self.water,
        )


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    output_format: str = "table"  # "table" or "json"


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class Settings:
    """Main application settings."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    nutrition: NutritionConfig = field(default_factory=NutritionConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.bodytrack/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        if "database" in data:
            db_data = data["database"]
            if "path" in db_data:
                settings.database.path = Path(db_data["path"]).expanduser()

        if "nutrition" in data:
            nut_data = data["nutrition"]
            for name in ("calories", "protein", "carbs", "fat"):
                if name in nut_data:
                    setattr(settings.nutrition, name, float(nut_data[name]))
            if "water" in nut_data:
                settings.nutrition.water = int(nut_data["water"])

        if "defaults" in data:
            def_data = data["defaults"]
            if "output_format" in def_data:
                settings.defaults.output_format = def_data["output_format"]

        if "logging" in data:
            log_data = data["logging"]
            if "level" in log_data:
                settings.logging.level = str(log_data["level"]).upper()

        logger.debug("Loaded settings from %s", config_path)
        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.bodytrack/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "database": {
                "path": str(self.database.path),
            },
            "nutrition": {
                "calories": self.nutrition.calories,
                "protein": self.nutrition.protein,
                "carbs": self.nutrition.carbs,
                "fat": self.nutrition.fat,
                "water": self.nutrition.water,
            },
            "defaults": {
                "output_format": self.defaults.output_format,
            },
            "logging": {
                "level": self.logging.level,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings
