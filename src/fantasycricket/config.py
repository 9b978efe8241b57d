"""Environment-driven settings for fantasycricket."""

from pathlib import Path

from platformdirs import user_config_dir
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CricketSettings(BaseSettings):
    """Runtime settings for acquisition, lookups and generation."""

    # Request settings
    timeout: float = Field(
        default=10.0,
        description="Per-call HTTP timeout in seconds",
        alias="FANTASYCRICKET_TIMEOUT",
    )

    user_agent: str = Field(
        default="Fantasy-Cricket-Bot/1.0",
        description="Client tag sent with every outbound request",
        alias="FANTASYCRICKET_USER_AGENT",
    )

    # Acquisition
    window_hours: float = Field(
        default=48.0,
        description="Events further than this from now are discarded",
        alias="FANTASYCRICKET_WINDOW_HOURS",
    )

    # Squad lookups
    name_lookup: bool = Field(
        default=True,
        description="Query the external person-name provider",
        alias="FANTASYCRICKET_NAME_LOOKUP",
    )

    weather_lookup: bool = Field(
        default=True,
        description="Query the external weather providers",
        alias="FANTASYCRICKET_WEATHER_LOOKUP",
    )

    # Generation
    seed: int | None = Field(
        default=None,
        description="Seed for synthetic data and player statistics",
        alias="FANTASYCRICKET_SEED",
    )

    config_dir: Path = Field(
        default_factory=lambda: Path(user_config_dir("fantasycricket")),
        description="Directory searched for sources.yaml",
        alias="FANTASYCRICKET_CONFIG_DIR",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global configuration instance
config = CricketSettings()


def get_config() -> CricketSettings:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> None:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
        else:
            raise ValueError(f"Unknown configuration option: {key}")


def reset_config() -> None:
    """Reset configuration to defaults."""
    global config
    config = CricketSettings()
