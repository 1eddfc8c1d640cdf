"""
Configuration for the template knowledge base.
"""

from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class TemplateKBConfig(BaseModel):
    """Main configuration for the knowledge base and its retriever"""

    # None means the document bundled with the package
    document_path: Optional[Path] = None
    default_top_k: int = Field(default=3, ge=1)
    extra_stop_words: List[str] = Field(default_factory=list)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("extra_stop_words")
    @classmethod
    def lowercase_stop_words(cls, v: List[str]) -> List[str]:
        return [w.strip().lower() for w in v if w.strip()]

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> "TemplateKBConfig":
        """Load configuration from YAML file"""
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
        if not isinstance(config_data, dict):
            raise ValueError(
                f"{config_path}: top level must be a mapping, "
                f"got {type(config_data).__name__}"
            )
        return cls(**config_data)

    def to_yaml(self, output_path: Union[str, Path]) -> None:
        """Save configuration to YAML file"""
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                self.model_dump(mode="json"), f, default_flow_style=False
            )


class TemplateKBSettings(BaseSettings):
    """Environment overrides, read from TEMPLATE_KB_* variables or a .env file"""

    config_path: Optional[Path] = None
    document_path: Optional[Path] = None
    log_level: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="TEMPLATE_KB_", env_file=".env", extra="ignore"
    )


def load_config(config_path: Optional[Union[str, Path]] = None) -> TemplateKBConfig:
    """
    Load configuration from file or create default.

    Args:
        config_path: Path to YAML configuration file. If None, returns defaults.

    Returns:
        TemplateKBConfig: Loaded configuration
    """
    if config_path:
        return TemplateKBConfig.from_yaml(config_path)
    else:
        return TemplateKBConfig()


def resolve_config(
    config_path: Optional[Union[str, Path]] = None,
    settings: Optional[TemplateKBSettings] = None,
) -> TemplateKBConfig:
    """
    Combine a YAML file with environment overrides.

    An explicit ``config_path`` wins over ``TEMPLATE_KB_CONFIG_PATH``; the
    document path and log level from the environment win over the file.
    """
    settings = settings or TemplateKBSettings()
    config = load_config(config_path or settings.config_path)

    updates = {}
    if settings.document_path is not None:
        updates["document_path"] = settings.document_path
    if settings.log_level:
        updates["log_level"] = settings.log_level
    if updates:
        config = TemplateKBConfig(**{**config.model_dump(), **updates})
    return config
