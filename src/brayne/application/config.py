from datetime import timedelta
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from brayne.domain.constants import DEFAULT_LEDGER_FILE, REPEAT_TIMEOUT


def _config_files() -> list[Path]:
    return [
        Path.home() / ".config/brayne/config.toml",
        Path.home() / ".brayne.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for brayne.
    Supports loading from:
    1. Environment variables (BRAYNE_*)
    2. Config file (~/.config/brayne/config.toml or ~/.brayne.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="BRAYNE_",
        extra="ignore",
    )

    # Paths
    ledger_path: Path = Path(DEFAULT_LEDGER_FILE)
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".config/brayne/logs")

    # Scheduling
    repeat_timeout_hours: float = Field(
        default=REPEAT_TIMEOUT.total_seconds() / 3600, gt=0
    )

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

        # First existing file wins; CLI overrides beat env, env beats the file.
        toml_file = next((f for f in _config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("ledger_path", "log_dir", mode="before")
    @classmethod
    def expand_user(cls, v: Any) -> Path:
        return Path(v).expanduser()

    @property
    def repeat_timeout(self) -> timedelta:
        return timedelta(hours=self.repeat_timeout_hours)


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/brayne/config.toml (if exists)
    3. Environment variables (BRAYNE_*)
    4. cli_overrides (passed from Typer)
    """
    config = AppConfig(**(cli_overrides or {}))
    config.ledger_path = config.ledger_path.resolve()
    return config
