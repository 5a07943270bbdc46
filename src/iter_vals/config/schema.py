"""Settings schema and validation using Pydantic.

Values are read from ``ITER_VALS_*`` environment variables and may be
overridden programmatically. Every field has a default, so an empty
environment always resolves.
"""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ComposerSettings(BaseSettings):
    """Pydantic settings schema for composed sequences."""

    model_config = SettingsConfigDict(
        env_prefix="ITER_VALS_",
        env_file=None,
        case_sensitive=False,
        extra="ignore",  # Unknown env vars are tolerated
        frozen=True,
    )

    validate_expanded: bool = Field(
        default=True,
        description=(
            "Check elements pulled from expanded sources against the declared "
            "element type"
        ),
    )

    telemetry: bool = Field(
        default=False,
        description="Report fragment and element counts to telemetry reporters",
    )

    debug: bool = Field(
        default=False,
        description="Log fragment transitions at DEBUG level",
    )

    def with_overrides(self, **overrides: Any) -> "ComposerSettings":
        """Return a validated copy with ``overrides`` applied."""
        return type(self).model_validate({**self.model_dump(), **overrides})
