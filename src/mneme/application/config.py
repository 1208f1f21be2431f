from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from mneme.domain import constants as c
from mneme.domain.scheduling.parameters import SchedulingParameters


class TuningConfig(BaseModel):
    """
    Overridable scheduling tunables.

    Tier formulas are fixed; these are the weights, thresholds and
    multipliers around them.
    """

    recent_window: int = Field(default=c.RECENT_WINDOW, ge=1)
    default_time_minutes: float = Field(default=c.DEFAULT_TIME_MINUTES, gt=0)
    correctness_weight: float = Field(default=c.CORRECTNESS_WEIGHT, ge=0)
    confidence_weight: float = Field(default=c.CONFIDENCE_WEIGHT, ge=0)
    efficiency_weight: float = Field(default=c.EFFICIENCY_WEIGHT, ge=0)
    improving_multiplier: float = Field(default=c.IMPROVING_INTERVAL_MULTIPLIER, gt=0)
    declining_multiplier: float = Field(default=c.DECLINING_INTERVAL_MULTIPLIER, gt=0)
    high_variance_threshold: float = Field(default=c.HIGH_VARIANCE_THRESHOLD, ge=0)
    low_variance_threshold: float = Field(default=c.LOW_VARIANCE_THRESHOLD, ge=0)
    high_variance_multiplier: float = Field(default=c.HIGH_VARIANCE_MULTIPLIER, gt=0)
    low_variance_multiplier: float = Field(default=c.LOW_VARIANCE_MULTIPLIER, gt=0)

    def to_parameters(self) -> SchedulingParameters:
        return SchedulingParameters(**self.model_dump())


class AppConfig(BaseSettings):
    """
    Configuration model for mneme.
    Supports loading from:
    1. Environment variables (MNEME_*, nested with MNEME_TUNING__*)
    2. Config file (~/.config/mneme/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="MNEME_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Storage
    backend: Literal["sqlite", "memory"] = "sqlite"
    db_path: Path = Field(
        default_factory=lambda: Path.home() / ".config/mneme/mneme.db", validate_default=True
    )

    # Scheduling
    history_limit: int = Field(default=c.HISTORY_LIMIT, ge=1)
    max_write_retries: int = Field(default=c.MAX_WRITE_RETRIES, ge=1)
    tuning: TuningConfig = Field(default_factory=TuningConfig)

    # Server
    host: str = "127.0.0.1"
    port: int = 8777

    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Earlier sources win: overrides, then env, then the first config file found
        toml_files = [
            Path.home() / ".config/mneme/config.toml",
            Path.home() / ".mneme.toml",
        ]
        toml_file = next((f for f in toml_files if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("db_path", mode="before")
    @classmethod
    def resolve_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/mneme/config.toml (if exists)
    3. Environment variables (MNEME_*)
    4. cli_overrides (passed from Typer or the server), None values ignored
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
