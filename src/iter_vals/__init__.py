"""Compose lazy sequences from single, conditional and expanded fragments."""

import importlib.metadata
import logging

from iter_vals.composer import EXHAUSTED, ComposedSequence, compose, pull
from iter_vals.config import (
    ComposerSettings,
    resolve_settings,
    settings_override,
    settings_scope,
)
from iter_vals.core.exceptions import (
    ConfigurationError,
    ElementTypeError,
    FragmentError,
    IterValsError,
)
from iter_vals.core.fragments import (
    Conditional,
    Expand,
    Fragment,
    Single,
    conditional,
    expand,
    optional,
    single,
)
from iter_vals.telemetry import SimpleReporter, TelemetryContext, TelemetryReporter

try:
    __version__ = importlib.metadata.version("iter-vals")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library code never configures logging; the application does
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Composition
    "compose",
    "pull",
    "EXHAUSTED",
    "ComposedSequence",
    # Fragments
    "single",
    "conditional",
    "optional",
    "expand",
    "Fragment",
    "Single",
    "Conditional",
    "Expand",
    # Settings
    "ComposerSettings",
    "resolve_settings",
    "settings_scope",
    "settings_override",
    # Telemetry (extension points)
    "TelemetryContext",
    "TelemetryReporter",
    "SimpleReporter",
    # Exceptions
    "IterValsError",
    "ConfigurationError",
    "FragmentError",
    "ElementTypeError",
]
