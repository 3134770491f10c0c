from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from kartei.domain import constants
from kartei.domain.exceptions import ConfigError
from kartei.domain.models import SchedulerParams, SessionMix

CONFIG_FILES = [
    Path(".config/kartei/config.toml"),
    Path(".kartei.toml"),
]


def find_config_file() -> Path | None:
    """First existing config file under the user's home, if any."""
    for rel in CONFIG_FILES:
        candidate = Path.home() / rel
        if candidate.exists():
            return candidate
    return None


class AppConfig(BaseSettings):
    """
    Configuration model for kartei.
    Supports loading from:
    1. Config file (~/.config/kartei/config.toml or ~/.kartei.toml)
    2. Environment variables (KARTEI_*)
    3. Manual overrides (CLI), which win
    """

    model_config = SettingsConfigDict(
        env_prefix="KARTEI_",
        extra="ignore",
    )

    # Storage
    backend: Literal["file", "memory"] = "file"
    store_path: Path = Field(default_factory=lambda: Path.home() / ".config/kartei/cards.json")

    # Sessions
    session_limit: int = Field(default=constants.DEFAULT_SESSION_LIMIT, ge=1)
    seed: int | None = None
    learning_share: float = Field(default=constants.LEARNING_SHARE, ge=0, le=1)
    review_share: float = Field(default=constants.REVIEW_SHARE, ge=0, le=1)
    new_share: float = Field(default=constants.NEW_SHARE, ge=0, le=1)

    # Scheduler
    learning_steps: list[int] = Field(default_factory=lambda: list(constants.LEARNING_STEPS))
    graduating_interval: int = Field(default=constants.GRADUATING_INTERVAL, ge=1)
    easy_interval: int = Field(default=constants.EASY_INTERVAL, ge=1)
    second_interval: int = Field(default=constants.SECOND_INTERVAL, ge=1)
    starting_ease: float = constants.STARTING_EASE
    minimum_ease: float = Field(default=constants.MINIMUM_EASE, gt=0)
    hard_modifier: float = Field(default=constants.HARD_MODIFIER, gt=0, lt=1)
    good_modifier: float = Field(default=constants.GOOD_MODIFIER, gt=0)
    easy_modifier: float = Field(default=constants.EASY_MODIFIER, gt=1)

    verbose: int = Field(default=0, ge=0)

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

        toml_file = find_config_file()
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("store_path", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Any:
        if isinstance(v, str | Path):
            return Path(v).expanduser()
        return v

    @field_validator("learning_steps")
    @classmethod
    def check_steps(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("learning_steps needs at least one step")
        if any(step < 1 for step in v):
            raise ValueError("learning steps are whole days, at least 1")
        return v

    @model_validator(mode="after")
    def check_consistency(self) -> "AppConfig":
        if self.minimum_ease > self.starting_ease:
            raise ValueError("minimum_ease must not exceed starting_ease")
        if self.learning_share + self.review_share + self.new_share > 1.0 + 1e-9:
            raise ValueError("session shares must not sum to more than 1")
        return self

    def to_scheduler_params(self) -> SchedulerParams:
        return SchedulerParams(
            learning_steps=tuple(self.learning_steps),
            graduating_interval=self.graduating_interval,
            easy_interval=self.easy_interval,
            second_interval=self.second_interval,
            starting_ease=self.starting_ease,
            minimum_ease=self.minimum_ease,
            hard_modifier=self.hard_modifier,
            good_modifier=self.good_modifier,
            easy_modifier=self.easy_modifier,
        )

    def to_session_mix(self) -> SessionMix:
        return SessionMix(
            learning=self.learning_share,
            review=self.review_share,
            new=self.new_share,
        )


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/kartei/config.toml (if exists)
    3. Environment variables (KARTEI_*)
    4. cli_overrides (passed from Typer, Nones already dropped)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    try:
        return AppConfig(**overrides)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
