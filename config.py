import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.json"


class Section(BaseModel):
    # JSON keys are camelCase, attributes snake_case
    model_config = ConfigDict(populate_by_name=True)


class AppSection(Section):
    name: str = "ElectraBase Pro"
    version: str = "1.0.0"
    organization: str = "ElectraBase"


class DatabaseSection(Section):
    path: str = "inventory.db"
    timeout: float = Field(5.0, gt=0)


class UiSection(Section):
    low_stock_threshold: int = Field(10, ge=0, alias="lowStockThreshold")
    show_low_stock_warnings: bool = Field(True, alias="showLowStockWarnings")


class FeaturesSection(Section):
    enable_sample_data: bool = Field(True, alias="enableSampleData")


class LoggingSection(Section):
    level: str = "INFO"


class AppConfig(Section):
    """Application settings, loaded from a JSON file with per-key defaults."""
    app: AppSection = Field(default_factory=AppSection)
    database: DatabaseSection = Field(default_factory=DatabaseSection)
    ui: UiSection = Field(default_factory=UiSection)
    features: FeaturesSection = Field(default_factory=FeaturesSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)


def load_config(path: str = DEFAULT_CONFIG_PATH) -> AppConfig:
    """
    Load settings from a JSON file.

    Missing sections and keys keep their defaults. A missing, unreadable or
    invalid file yields the full default configuration.
    """
    config_file = Path(path)
    if not config_file.exists():
        logger.warning("Config file not found: %s - using defaults", path)
        return AppConfig()

    try:
        config = AppConfig.model_validate_json(config_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Failed to load config %s - using defaults: %s", path, e)
        return AppConfig()

    logger.debug("Configuration loaded from: %s", path)
    return config


def save_config(config: AppConfig, path: str = DEFAULT_CONFIG_PATH) -> None:
    payload = config.model_dump(by_alias=True)
    Path(path).write_text(json.dumps(payload, indent=4, ensure_ascii=False), encoding="utf-8")
    logger.debug("Configuration saved to: %s", path)
