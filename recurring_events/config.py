"""
Configuration management for the recurring events core.

Uses Pydantic Settings for type-safe environment variable loading.
Configured via .env file in project root.
"""

import re
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Application
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )

    # Timezone Configuration
    timezone: str = Field(
        default="UTC",
        description="Zone used to turn edited wall-clock times into instants (IANA name)"
    )

    # Event creation
    event_id_prefix: str = Field(
        default="event_",
        description="Prefix for ids assigned to events created by dragging"
    )
    default_event_color: str = Field(
        default="#23cfde",
        description="Colour given to new events when none is supplied"
    )
    event_color_mode: Literal["fixed", "random"] = Field(
        default="fixed",
        description="Use the default colour or pick one from the palette"
    )
    event_color_palette: list[str] = Field(
        default=[
            "#5428F2",
            "#8EBB85",
            "#B70100",
            "#EAAB7E",
            "#AC2A57",
            "#DC1F98",
            "#6E911C",
            "#BE1459",
            "#BA3D9D",
            "#23cfde",
        ],
        description="Palette used when event_color_mode is 'random'"
    )
    default_resource_id: Optional[str] = Field(
        default=None,
        description="Resource given to new events when the draft has none"
    )

    # Expansion
    max_expanded_instances: int = Field(
        default=100,
        ge=1,
        description="Safety limit on occurrences generated per series"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def uses_random_colors(self) -> bool:
        """Check if new events get a palette colour."""
        return self.event_color_mode == "random"

    def validate_color_config(self) -> None:
        """
        Validate the colour settings used for new events.

        Raises:
            ValueError: If the palette is unusable or a colour is malformed
        """
        errors = []

        if not HEX_COLOR_PATTERN.match(self.default_event_color):
            errors.append(
                f"DEFAULT_EVENT_COLOR must be a #RRGGBB colour, got {self.default_event_color!r}."
            )

        if self.uses_random_colors and not self.event_color_palette:
            errors.append("EVENT_COLOR_PALETTE cannot be empty when EVENT_COLOR_MODE=random.")

        bad_colors = [c for c in self.event_color_palette if not HEX_COLOR_PATTERN.match(c)]
        if bad_colors:
            errors.append(f"EVENT_COLOR_PALETTE has malformed colours: {', '.join(bad_colors)}")

        if errors:
            raise ValueError("Colour configuration errors:\n- " + "\n- ".join(errors))


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    This function is cached to ensure we only load settings once.
    Use this function throughout the application to access settings.

    Returns:
        Settings instance loaded from environment

    Example:
        >>> from recurring_events.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.timezone)
    """
    return Settings()
