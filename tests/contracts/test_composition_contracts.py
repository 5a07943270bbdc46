"""Behavioral contracts for composed sequences.

Each test pins one guarantee callers rely on: ordering, laziness, exactly-once
evaluation and idempotent exhaustion.
"""

import itertools

import pytest

from iter_vals import EXHAUSTED, compose, conditional, expand, pull, single


@pytest.mark.contract
class TestOrderAndShape:
    """Output is the in-order concatenation of fragment contributions."""

    def test_singles_preserve_order(self):
        assert list(compose(single(1), single(2), single(3))) == [1, 2, 3]

    def test_strings_preserve_order(self):
        seq = compose(single("this"), single("is"), single("a"), single("test"))
        assert list(seq) == ["this", "is", "a", "test"]

    def test_empty_composition_yields_nothing(self):
        seq = compose()
        assert list(seq) == []
        assert seq.exhausted

    def test_conditionals_include_only_true(self):
        assert list(compose(conditional(True, 5), conditional(False, 10))) == [5]
        assert list(compose(conditional(False, 5), conditional(True, 10))) == [10]

    def test_expand_flattens_in_place(self):
        assert list(compose(expand([1, 2, 3]), expand([4]))) == [1, 2, 3, 4]
        assert list(compose(expand([]), expand([4]))) == [4]

    def test_mixed_fragment_kinds(self):
        seq = compose(
            single(1),
            conditional(True, 2),
            single(3),
            conditional(False, 99),
            expand([5, 6, 7]),
        )
        assert list(seq) == [1, 2, 3, 5, 6, 7]

    def test_computed_predicates(self):
        seq = compose(
            1,
            conditional(2 % 2 == 1, 2),
            3,
            conditional(4 % 2 == 0, 4),
            expand([5, 6, 7]),
        )
        assert list(seq) == [1, 3, 4, 5, 6, 7]

    def test_nested_composition_flattens(self):
        inner = compose(2, expand([3, 4]))
        assert list(compose(1, expand(inner), 5)) == [1, 2, 3, 4, 5]

    def test_expression_values_need_no_grouping(self):
        assert list(compose(1 + 1, 2 + 2, 3 + 3)) == [2, 4, 6]


@pytest.mark.contract
class TestExhaustion:
    """Exhaustion is terminal and idempotent."""

    def test_repeated_next_after_exhaustion(self):
        seq = compose(1)
        assert next(seq) == 1
        for _ in range(3):
            with pytest.raises(StopIteration):
                next(seq)

    def test_repeated_pull_after_exhaustion(self):
        seq = compose(expand([1]))
        assert pull(seq) == 1
        assert [pull(seq) for _ in range(3)] == [EXHAUSTED] * 3

    def test_exhausted_sequence_is_not_restartable(self):
        seq = compose(1, 2)
        assert list(seq) == [1, 2]
        assert list(seq) == []

    def test_source_extended_after_exhaustion_is_not_resurrected(self):
        items = [1]
        seq = compose(expand(items))
        assert list(seq) == [1]
        items.append(2)
        assert pull(seq) is EXHAUSTED


@pytest.mark.contract
class TestExactlyOnce:
    """Sources and predicates are evaluated once, lazily, left to right."""

    def test_source_iterated_once_across_pauses(self, counting_source):
        source = counting_source([1, 2, 3])
        seq = compose(0, expand(source), 4)

        assert next(seq) == 0
        assert source.iter_calls == 0
        assert next(seq) == 1
        assert next(seq) == 2
        assert list(seq) == [3, 4]
        assert source.iter_calls == 1
        assert source.pulled == [1, 2, 3]

    def test_no_speculative_pull(self, counting_source):
        first = counting_source([1, 2])
        second = counting_source([3])
        seq = compose(expand(first), expand(second))

        assert next(seq) == 1
        assert first.pulled == [1]
        assert next(seq) == 2
        assert second.iter_calls == 0

    @pytest.mark.parametrize("result", [True, False])
    def test_predicate_evaluated_once(self, counted_predicate, result):
        predicate, calls = counted_predicate(result)
        seq = compose(1, conditional(predicate, 2), 3)

        assert next(seq) == 1
        assert calls[0] == 0
        list(seq)
        pull(seq)
        pull(seq)
        assert calls[0] == 1

    def test_effectful_generator_consumed_in_order(self):
        log: list[str] = []

        def gen():
            for i in range(3):
                log.append(f"produce {i}")
                yield i

        for value in compose(expand(gen())):
            log.append(f"consume {value}")

        assert log == [
            "produce 0",
            "consume 0",
            "produce 1",
            "consume 1",
            "produce 2",
            "consume 2",
        ]

    def test_infinite_source_is_pulled_lazily(self):
        seq = compose("start", expand(itertools.count()))
        assert list(itertools.islice(seq, 4)) == ["start", 0, 1, 2]
        assert next(seq) == 3


@pytest.mark.contract
class TestUpstreamFailure:
    """Errors from predicates and sources surface unmodified."""

    def test_predicate_error_propagates_at_pull(self):
        def boom() -> bool:
            raise RuntimeError("predicate failed")

        seq = compose(1, conditional(boom, 2))
        assert next(seq) == 1
        with pytest.raises(RuntimeError, match="predicate failed"):
            next(seq)

    def test_source_error_propagates_at_pull(self):
        def gen():
            yield 1
            raise KeyError("source failed")

        seq = compose(expand(gen()), 2)
        assert next(seq) == 1
        with pytest.raises(KeyError):
            next(seq)

    def test_sequence_is_exhausted_after_failure(self):
        def boom() -> bool:
            raise RuntimeError("predicate failed")

        seq = compose(conditional(boom, 1), 2)
        with pytest.raises(RuntimeError):
            next(seq)
        assert seq.exhausted
        assert pull(seq) is EXHAUSTED
