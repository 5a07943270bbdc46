"""
Global test configuration.
"""

from collections.abc import Callable, Iterator
import os

import pytest

from iter_vals.config import reset_settings_cache


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_iter_vals_env(request, monkeypatch):
    """Ensure a clean ITER_VALS_* environment and settings cache for each test.

    Escape hatch: mark a test with @pytest.mark.allow_env_pollution to keep
    the current environment unchanged.
    """
    if not request.node.get_closest_marker("allow_env_pollution"):
        for key in list(os.environ.keys()):
            if key.startswith("ITER_VALS_"):
                monkeypatch.delenv(key, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "contract: Behavioral guarantees of composed sequences",
        "allow_env_pollution: Keep ITER_VALS_* environment variables",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Shared fixtures ---


class CountingSource:
    """Iterable that records how often it is iterated and pulled."""

    def __init__(self, items):
        self.items = list(items)
        self.iter_calls = 0
        self.pulled: list[object] = []

    def __iter__(self) -> Iterator[object]:
        self.iter_calls += 1
        for item in self.items:
            self.pulled.append(item)
            yield item


@pytest.fixture
def counting_source() -> Callable[..., CountingSource]:
    """Factory for iterables that record their own consumption."""
    return CountingSource


@pytest.fixture
def counted_predicate():
    """Factory returning (predicate, calls) where calls[0] counts evaluations."""

    def _make(result: bool):
        calls = [0]

        def predicate() -> bool:
            calls[0] += 1
            return result

        return predicate, calls

    return _make
