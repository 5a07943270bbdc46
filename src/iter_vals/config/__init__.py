"""Settings for iter_vals.

Precedence: programmatic overrides > ambient scope > environment > defaults.

Key components:
- ComposerSettings: validated, immutable settings
- resolve_settings: resolve settings with optional overrides
- settings_scope / settings_override: context-local overrides
"""

import functools
import logging
from typing import Any

from pydantic import ValidationError

from iter_vals.core.exceptions import ConfigurationError

from .schema import ComposerSettings
from .scope import get_ambient_settings, settings_override, settings_scope

log = logging.getLogger(__name__)


@functools.lru_cache(maxsize=1)
def _settings_from_env() -> ComposerSettings:
    return _validated(ComposerSettings, {})


def _validated(factory: Any, values: dict[str, Any]) -> ComposerSettings:
    try:
        return factory(**values)
    except ValidationError as e:
        fields = ", ".join(".".join(map(str, err["loc"])) for err in e.errors())
        raise ConfigurationError(f"Invalid iter_vals settings ({fields}): {e}") from e


def get_settings() -> ComposerSettings:
    """Return the effective settings without overrides.

    The environment is read once per process; call ``reset_settings_cache``
    after changing ``ITER_VALS_*`` variables at runtime.
    """
    ambient = get_ambient_settings()
    if ambient is not None:
        return ambient
    return _settings_from_env()


def resolve_settings(programmatic: dict[str, Any] | None = None) -> ComposerSettings:
    """Resolve settings, applying ``programmatic`` overrides last.

    Args:
        programmatic: Field overrides with the highest precedence.

    Returns:
        Validated ComposerSettings.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    base = get_settings()
    if not programmatic:
        return base
    log.debug("Applying settings overrides: %s", sorted(programmatic))
    return _validated(base.with_overrides, programmatic)


def reset_settings_cache() -> None:
    """Forget the cached environment resolution."""
    _settings_from_env.cache_clear()


__all__ = [
    "ComposerSettings",
    "get_ambient_settings",
    "get_settings",
    "reset_settings_cache",
    "resolve_settings",
    "settings_override",
    "settings_scope",
]
