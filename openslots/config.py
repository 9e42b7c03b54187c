"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.models import RAW_INSTANT, SlotOptions, resolve_timezone


class SlotDefaults(BaseModel):
    """Default settings for slot searches."""
    strategy: Literal["gaps", "grid"] = "gaps"
    slot_duration_minutes: int = 60
    step_minutes: int = 30
    output_timezone: str = RAW_INSTANT
    group_by_date: bool = False
    appointment_policy: Literal["strict", "lenient"] = "lenient"
    fit_within_window: bool = True
    input_timezone: str = "UTC"

    @field_validator("slot_duration_minutes", "step_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure durations are positive."""
        if value <= 0:
            raise ValueError(f"must be greater than zero, got {value}")
        return value

    @field_validator("output_timezone")
    @classmethod
    def validate_output_timezone(cls, value: str) -> str:
        """Accept "raw-instant" or a known IANA zone."""
        if value != RAW_INSTANT:
            resolve_timezone(value)
        return value

    @field_validator("input_timezone")
    @classmethod
    def validate_input_timezone(cls, value: str) -> str:
        """Validate the zone used for naive input."""
        resolve_timezone(value)
        return value

    def to_options(self, **overrides) -> SlotOptions:
        """
        Build ``SlotOptions`` from these defaults.

        Overrides set to None are ignored, so unset CLI flags fall through to
        the configured value.
        """
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        return SlotOptions(**values)


class AppConfig(BaseModel):
    """Application configuration."""
    defaults: SlotDefaults = Field(default_factory=SlotDefaults)
    appointments_file: Optional[Path] = None

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.
        
        Args:
            config_path: Path to the YAML config file
            
        Returns:
            AppConfig instance
            
        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
