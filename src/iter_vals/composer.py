"""Fragment composer: one lazy sequence from an ordered list of fragments.

The composed sequence behaves exactly like::

    for fragment in fragments:
        yield from fragment's contribution

but is an explicit cursor-based iterator so that its state (current fragment,
exhaustion) can be inspected, and so that element type checks and telemetry
can run at fragment boundaries instead of per element.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import enum
import logging
import typing

from iter_vals.config import ComposerSettings, resolve_settings
from iter_vals.core.exceptions import ElementTypeError
from iter_vals.core.fragments import Expand, Fragment, as_fragment
from iter_vals.telemetry import TelemetryContext, TelemetryReporter

if typing.TYPE_CHECKING:
    from iter_vals.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)


class _Signal(enum.Enum):
    EXHAUSTED = "EXHAUSTED"

    def __repr__(self) -> str:
        return self.value


EXHAUSTED: typing.Final = _Signal.EXHAUSTED
"""Returned by ``pull`` once a sequence has no more elements."""


class ComposedSequence[T]:
    """Lazy, order-preserving concatenation of fragment contributions.

    A composed sequence is single-use and single-consumer. Each fragment is
    entered only when the previous one has been drained, and each source is
    iterated exactly once. Once exhausted, every further pull reports
    exhaustion.
    """

    __slots__ = (
        "_checking",
        "_current",
        "_cursor",
        "_debug",
        "_element_type",
        "_entered",
        "_exhausted",
        "_fragments",
        "_telemetry",
        "_validate_expanded",
        "_yielded",
    )

    def __init__(
        self,
        fragments: tuple[Fragment[T], ...],
        *,
        element_type: type[T] | None,
        settings: ComposerSettings,
        telemetry: TelemetryContextProtocol,
    ) -> None:
        self._fragments = fragments
        self._element_type = element_type
        self._validate_expanded = settings.validate_expanded
        self._debug = settings.debug
        self._telemetry = telemetry
        self._cursor = 0
        self._current: Iterator[T] | None = None
        self._checking = False
        self._entered = 0
        self._yielded = 0
        self._exhausted = False

    @property
    def element_type(self) -> type[T] | None:
        """The declared element type, if one was given to ``compose``."""
        return self._element_type

    @property
    def exhausted(self) -> bool:
        """Whether the sequence has reached its terminal state."""
        return self._exhausted

    def __iter__(self) -> ComposedSequence[T]:
        return self

    def __next__(self) -> T:
        if self._exhausted:
            raise StopIteration
        try:
            return self._advance()
        except StopIteration:
            raise
        except BaseException:
            # Upstream errors leave the sequence finished, like a generator
            self._close()
            raise

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(fragments={len(self._fragments)}, "
            f"cursor={self._cursor}, exhausted={self._exhausted})"
        )

    # --- Internal helpers ---

    def _advance(self) -> T:
        while True:
            current = self._current
            if current is not None:
                for value in current:
                    if self._checking:
                        self._check_expanded(value)
                    self._yielded += 1
                    return value
                self._current = None

            if self._cursor >= len(self._fragments):
                self._finish()
                raise StopIteration

            fragment = self._fragments[self._cursor]
            self._cursor += 1
            self._entered += 1
            if self._debug:
                log.debug(
                    "Entering fragment %d/%d: %s",
                    self._cursor,
                    len(self._fragments),
                    type(fragment).__name__,
                )
            self._checking = (
                self._element_type is not None
                and self._validate_expanded
                and isinstance(fragment, Expand)
            )
            self._current = fragment.contribution()

    def _check_expanded(self, value: object) -> None:
        element_type = typing.cast("type", self._element_type)
        if not isinstance(value, element_type):
            raise ElementTypeError(
                f"fragment {self._cursor - 1}: expanded element {value!r} is "
                f"{type(value).__name__}, expected {element_type.__name__}"
            )

    def _finish(self) -> None:
        if self._debug:
            log.debug(
                "Sequence exhausted after %d fragments, %d elements",
                self._entered,
                self._yielded,
            )
        self._telemetry.count("compose.fragments", self._entered)
        self._telemetry.count("compose.elements", self._yielded)
        self._close()

    def _close(self) -> None:
        self._exhausted = True
        self._current = None
        self._checking = False
        self._fragments = ()


def compose(
    *fragments: object,
    element_type: type | None = None,
    settings: ComposerSettings | dict[str, typing.Any] | None = None,
    reporters: Iterable[TelemetryReporter] = (),
) -> ComposedSequence[typing.Any]:
    """Compose fragments into a single lazy sequence.

    Arguments that are not fragments are treated as ``single(value)``. Nothing
    is evaluated or iterated here: predicates run and sources are iterated
    only as the returned sequence is pulled.

    Args:
        *fragments: Fragments in output order. Zero fragments yield an
            immediately exhausted sequence.
        element_type: Optional class every element must be an instance of.
            Single and conditional values are checked here; elements of
            expanded sources are checked as they are pulled.
        settings: ComposerSettings, or a dict of overrides applied to the
            effective settings.
        reporters: Telemetry reporters notified when the sequence is
            exhausted. Ignored unless telemetry is enabled.

    Returns:
        A ComposedSequence over all contributed elements.

    Raises:
        ElementTypeError: If ``element_type`` is not a class, or a value
            known at construction is not an instance of it.
        ConfigurationError: If settings overrides are invalid.

    Example:
        def next_numbers(start, include_first):
            return compose(
                conditional(include_first, start + 1),
                start + 2,
                start + 3,
            )
    """
    if not isinstance(settings, ComposerSettings):
        settings = resolve_settings(settings)
    telemetry = TelemetryContext(*reporters, enabled=settings.telemetry)
    parts = tuple(as_fragment(f) for f in fragments)

    if element_type is not None:
        if not isinstance(element_type, type):
            raise ElementTypeError(
                f"element_type must be a class, got {type(element_type).__name__}"
            )
        with telemetry("compose.check", fragments=len(parts)):
            for position, fragment in enumerate(parts):
                fragment.check(element_type, position)

    return ComposedSequence(
        parts, element_type=element_type, settings=settings, telemetry=telemetry
    )


@typing.overload
def pull[T](seq: Iterator[T]) -> T | typing.Literal[_Signal.EXHAUSTED]: ...
@typing.overload
def pull[T, D](seq: Iterator[T], default: D) -> T | D: ...
def pull(seq: Iterator[typing.Any], default: typing.Any = EXHAUSTED) -> typing.Any:
    """Return the next element of ``seq``, or ``default`` once it is exhausted.

    Unlike ``next``, exhaustion never raises; the default ``EXHAUSTED`` signal
    cannot be confused with any element, including ``None``.
    """
    return next(seq, default)
