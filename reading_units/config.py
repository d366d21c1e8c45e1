"""Configuration loader for the reading unit pipeline."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "Reading Units"
    version: str = "1.0.0"


class ScoringConfig(BaseModel):
    """Weights applied to each score dimension."""

    toc: float = 1.5
    heading: float = 1.2
    length: float = 1.0
    content: float = 1.0
    position: float = 0.8
    continuity: float = 0.8

    def weights(self) -> dict[str, float]:
        return self.model_dump()


class DecisionConfig(BaseModel):
    """Thresholds of the decision cascade."""

    merge_threshold: float = 3.0
    new_threshold: float = -3.0
    gray_zone_length: int = 800


class FallbackConfig(BaseModel):
    """Reduced rule set used when the scoring path cannot run."""

    gray_zone_length: int = 800
    force: bool = False  # decide every segment with the fallback rules


class StorageConfig(BaseModel):
    """Storage paths configuration."""

    sqlite_path: str = "./db/app.db"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    decision: DecisionConfig = Field(default_factory=DecisionConfig)
    fallback: FallbackConfig = Field(default_factory=FallbackConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Environment overrides
    sqlite_path = os.getenv("READING_UNITS_SQLITE_PATH")
    if sqlite_path:
        config.storage.sqlite_path = sqlite_path
    log_level = os.getenv("READING_UNITS_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level.upper()

    return config
