"""Scoped settings overrides.

Settings are resolved once when a sequence is composed. A scope only affects
sequences composed inside it; sequences that already exist keep the settings
they were built with.
"""

from collections.abc import Generator
from contextlib import contextmanager
import contextvars
from typing import Any

from .schema import ComposerSettings

_ambient_settings: contextvars.ContextVar[ComposerSettings] = contextvars.ContextVar(
    "iter_vals_settings"
)


def get_ambient_settings() -> ComposerSettings | None:
    """Return the settings installed by the innermost scope, or None."""
    try:
        return _ambient_settings.get()
    except LookupError:
        return None


@contextmanager
def settings_scope(settings: ComposerSettings) -> Generator[None]:
    """Use ``settings`` for every sequence composed within the block.

    Example:
        with settings_scope(ComposerSettings(validate_expanded=False)):
            seq = compose(expand(rows), element_type=int)
    """
    token = _ambient_settings.set(settings)
    try:
        yield
    finally:
        _ambient_settings.reset(token)


@contextmanager
def settings_override(**overrides: Any) -> Generator[None]:
    """Apply field overrides on top of the currently effective settings."""
    # Import here to avoid a circular import at module level
    from . import resolve_settings

    with settings_scope(resolve_settings(overrides)):
        yield
