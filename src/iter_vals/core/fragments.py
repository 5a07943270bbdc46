"""Fragment descriptors consumed by the composer.

A fragment describes one unit of input to a composed sequence: a single value,
a value included only when a predicate holds, or an iterable whose elements are
expanded in place. Fragments are immutable and inert; nothing is evaluated or
iterated until a composed sequence's cursor reaches the fragment and asks it
for its contribution.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
import dataclasses
import inspect
import typing

from iter_vals.core.exceptions import ElementTypeError, FragmentError

type Predicate = bool | Callable[[], object]

# --- Minimal guard helpers ---


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = FragmentError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _require_zero_arg_callable(func: typing.Any, field_name: str) -> None:
    """Validate callable takes no arguments so it can be evaluated later."""
    try:
        sig = inspect.signature(func)
    except (ValueError, TypeError):
        # Builtins without introspectable signatures are accepted as-is
        return
    has_required_params = any(
        p.default is p.empty
        and p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY)
        for p in sig.parameters.values()
    )
    _require(
        condition=not has_required_params,
        message="must be a zero-argument callable",
        field_name=field_name,
    )


def _is_iterable(value: object) -> bool:
    # Old-style sequences only implement __getitem__
    return isinstance(value, Iterable) or hasattr(type(value), "__getitem__")


def _check_value(value: object, element_type: type, position: int) -> None:
    if not isinstance(value, element_type):
        raise ElementTypeError(
            f"fragment {position}: expected {element_type.__name__}, "
            f"got {type(value).__name__} ({value!r})"
        )


# --- Fragment variants ---


@dataclasses.dataclass(frozen=True, slots=True)
class Single[T]:
    """Contributes exactly one element, the value itself."""

    value: T

    def contribution(self) -> Iterator[T]:
        return iter((self.value,))

    def check(self, element_type: type, position: int) -> None:
        _check_value(self.value, element_type, position)


@dataclasses.dataclass(frozen=True, slots=True)
class Conditional[T]:
    """Contributes the value once when the predicate holds, nothing otherwise.

    The predicate is either an already-evaluated ``bool`` or a zero-argument
    callable. A callable predicate is evaluated exactly once, when the
    composed sequence reaches this fragment.
    """

    predicate: Predicate
    value: T

    def __post_init__(self) -> None:
        """Validate the predicate shape at construction."""
        if isinstance(self.predicate, bool):
            return
        _require(
            condition=callable(self.predicate),
            message=(
                f"must be bool or a zero-argument callable, "
                f"got {type(self.predicate).__name__}"
            ),
            field_name="predicate",
        )
        _require_zero_arg_callable(self.predicate, "predicate")

    def evaluate(self) -> bool:
        if isinstance(self.predicate, bool):
            return self.predicate
        return bool(self.predicate())

    def contribution(self) -> Iterator[T]:
        if self.evaluate():
            return iter((self.value,))
        return iter(())

    def check(self, element_type: type, position: int) -> None:
        # Any literal False can never contribute, whatever its value; this keeps
        # optional(None) valid. Callable predicates are only known at pull time.
        if self.predicate is False:
            return
        _check_value(self.value, element_type, position)


@dataclasses.dataclass(frozen=True, slots=True)
class Expand[T]:
    """Contributes every element of ``source`` in the source's own order."""

    source: Iterable[T]

    def __post_init__(self) -> None:
        """Reject sources that cannot be iterated."""
        _require(
            condition=_is_iterable(self.source),
            message=f"must be iterable, got {type(self.source).__name__}",
            field_name="source",
        )

    def contribution(self) -> Iterator[T]:
        return iter(self.source)

    def check(self, element_type: type, position: int) -> None:
        # Only sources that declare their element type can be checked up front
        declared = getattr(self.source, "element_type", None)
        if isinstance(declared, type) and not issubclass(declared, element_type):
            raise ElementTypeError(
                f"fragment {position}: expanded sequence yields "
                f"{declared.__name__}, expected {element_type.__name__}"
            )


type Fragment[T] = Single[T] | Conditional[T] | Expand[T]

FRAGMENT_TYPES: tuple[type, ...] = (Single, Conditional, Expand)


# --- Constructors ---


def single[T](value: T) -> Single[T]:
    """Return a fragment contributing exactly ``value``."""
    return Single(value)


def conditional[T](predicate: Predicate, value: T) -> Conditional[T]:
    """Return a fragment contributing ``value`` only if ``predicate`` holds.

    Args:
        predicate: A ``bool``, or a zero-argument callable evaluated once when
            the composed sequence reaches this fragment.
        value: The element contributed when the predicate holds.

    Raises:
        FragmentError: If the predicate is neither a bool nor a zero-argument
            callable.
    """
    return Conditional(predicate, value)


def optional[T](value: T | None) -> Conditional[T | None]:
    """Return a fragment contributing ``value`` unless it is ``None``."""
    return Conditional(value is not None, value)


def expand[T](source: Iterable[T]) -> Expand[T]:
    """Return a fragment flattening every element of ``source`` in place.

    The source is not iterated here; iteration begins when the composed
    sequence reaches this fragment and consumes the source exactly once.

    Raises:
        FragmentError: If ``source`` is not iterable.
    """
    return Expand(source)


def as_fragment(value: object) -> Fragment[typing.Any]:
    """Return ``value`` unchanged if it is a fragment, otherwise ``single(value)``."""
    if isinstance(value, FRAGMENT_TYPES):
        return typing.cast("Fragment[typing.Any]", value)
    return Single(value)
