# tests/unit/compiler/test_reference_resolver.py — v1
"""Tests for compiler/reference_resolver.py: bounded reference substitution."""

from __future__ import annotations

import pytest

from pagequeries.compiler.reference_resolver import (
    CIRCULAR_REFERENCE_ERROR,
    MISSING_REFERENCE_ERROR,
    ReferenceResolver,
    find_references,
    reference_id,
    resolve_queries,
    undefined_reference_error,
)
from pagequeries.core.models import Query


def _queries(**bodies: str) -> list[Query]:
    return [Query.from_body(qid, body) for qid, body in bodies.items()]


def _by_id(queries: list[Query]) -> dict[str, Query]:
    return {q.id: q for q in queries}


def _assert_resolved_invariant(queries: list[Query]) -> None:
    for q in queries:
        if q.compile_error is None:
            assert find_references(q.compiled_body) == []
        else:
            assert q.compiled_body == q.compile_error


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestTokenHelpers:
    def test_find_references(self):
        assert find_references("a ${x} b ${ y } c") == ["${x}", "${ y }"]

    def test_find_references_does_not_cross_lines(self):
        assert find_references("${x\n}") == []

    def test_reference_id_trims(self):
        assert reference_id("${  orders }") == "orders"

    def test_reference_id_empty(self):
        assert reference_id("${}") == ""

    def test_undefined_message(self):
        assert undefined_reference_error("missing") == (
            "Compiler error: 'missing' is not a query on this page"
        )

    def test_undefined_message_empty_id(self):
        assert undefined_reference_error("") == MISSING_REFERENCE_ERROR


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class TestResolve:
    def test_simple_reference(self):
        queries = resolve_queries(_queries(a="select 1", b="select * from (${a}) t"))
        q = _by_id(queries)
        assert q["a"].compiled_body == "select 1"
        assert q["b"].compiled_body == "select * from ((select 1)) t"
        assert q["b"].compiled is True
        assert q["a"].compiled is False
        assert q["b"].input_body == "select * from (${a}) t"
        _assert_resolved_invariant(queries)

    def test_returns_same_list(self):
        queries = _queries(a="select 1")
        assert ReferenceResolver().resolve(queries) is queries

    def test_chain_resolved_regardless_of_order(self):
        queries = resolve_queries(
            _queries(a="select * from ${b}", b="select * from ${c}", c="select 3")
        )
        q = _by_id(queries)
        assert q["a"].compiled_body == "select * from (select * from (select 3))"
        assert q["b"].compiled_body == "select * from (select 3)"
        _assert_resolved_invariant(queries)

    def test_repeated_reference(self):
        queries = resolve_queries(_queries(a="select 1", b="${a} union ${a}"))
        assert _by_id(queries)["b"].compiled_body == "(select 1) union (select 1)"

    def test_whitespace_inside_token(self):
        queries = resolve_queries(_queries(a="select 1", b="${ a }"))
        assert _by_id(queries)["b"].compiled_body == "(select 1)"

    def test_missing_reference(self):
        queries = resolve_queries(_queries(a="${missing}"))
        a = queries[0]
        expected = "Compiler error: 'missing' is not a query on this page"
        assert a.compile_error == expected
        assert a.compiled_body == expected
        assert a.compiled is True

    def test_empty_reference(self):
        queries = resolve_queries(_queries(a="select ${ }"))
        assert queries[0].compile_error == MISSING_REFERENCE_ERROR
        assert queries[0].compiled_body == MISSING_REFERENCE_ERROR

    def test_mutual_reference_is_circular(self):
        queries = resolve_queries(_queries(a="${b}", b="${a}"))
        for q in queries:
            assert q.compile_error == CIRCULAR_REFERENCE_ERROR
            assert q.compiled_body == CIRCULAR_REFERENCE_ERROR
        _assert_resolved_invariant(queries)

    def test_circular_reported_at_iteration_bound(self):
        resolver = ReferenceResolver(max_iterations=100)
        resolver.resolve(_queries(a="${b}", b="${a}"))
        assert resolver.last_stats.passes == 101
        assert resolver.last_stats.circular == 2

    @pytest.mark.parametrize("bound", [1, 7])
    def test_configurable_bound(self, bound: int):
        resolver = ReferenceResolver(max_iterations=bound)
        queries = resolver.resolve(_queries(a="${a}"))
        assert queries[0].compile_error == CIRCULAR_REFERENCE_ERROR
        assert resolver.last_stats.passes == bound + 1

    def test_self_reference_is_circular(self):
        queries = resolve_queries(_queries(a="select * from ${a}"))
        assert queries[0].compile_error == CIRCULAR_REFERENCE_ERROR

    def test_self_reference_still_splices_undefined_reference(self):
        queries = resolve_queries(_queries(a="select ${a} join ${b}", b="${missing}"))
        q = _by_id(queries)
        expected = "Compiler error: 'missing' is not a query on this page"
        assert q["a"].compile_error == expected
        assert q["b"].compile_error == expected
        _assert_resolved_invariant(queries)

    def test_self_reference_through_other_query_reports_undefined(self):
        queries = resolve_queries(_queries(a="q ${b} ${a}", b="q ${zz} ${a}"))
        expected = "Compiler error: 'zz' is not a query on this page"
        assert [q.compile_error for q in queries] == [expected, expected]

    def test_self_reference_keeps_growing_until_bound(self):
        resolver = ReferenceResolver(max_iterations=3)
        queries = resolver.resolve(_queries(a="x ${a}"))
        assert queries[0].compile_error == CIRCULAR_REFERENCE_ERROR
        assert resolver.last_stats.substitutions == 3

    def test_doubling_self_reference_stopped_by_length_guard(self):
        resolver = ReferenceResolver(max_body_length=1000)
        queries = resolver.resolve(_queries(a="${a} ${a}"))
        assert queries[0].compile_error == CIRCULAR_REFERENCE_ERROR
        assert resolver.last_stats.passes < 101

    def test_dependent_of_cycle_is_circular(self):
        queries = resolve_queries(_queries(a="${b}", b="${a}", c="select * from ${a}"))
        assert _by_id(queries)["c"].compile_error == CIRCULAR_REFERENCE_ERROR

    def test_errors_are_contained(self):
        queries = resolve_queries(
            _queries(bad="${missing}", x="${x}", ok="select 1", uses_ok="${ok} limit 1")
        )
        q = _by_id(queries)
        assert q["bad"].compile_error is not None
        assert q["x"].compile_error == CIRCULAR_REFERENCE_ERROR
        assert q["ok"].compile_error is None
        assert q["uses_ok"].compiled_body == "(select 1) limit 1"
        _assert_resolved_invariant(queries)

    def test_short_chain_resolves_before_bound(self):
        resolver = ReferenceResolver(max_iterations=2)
        queries = resolver.resolve(_queries(a="${b}", b="${c}", c="select 1"))
        assert _by_id(queries)["a"].compiled_body == "((select 1))"

    def test_chain_longer_than_bound_is_circular(self):
        resolver = ReferenceResolver(max_iterations=1)
        queries = resolver.resolve(_queries(a="${b}", b="${c}", c="${d}", d="select 1"))
        assert _by_id(queries)["a"].compile_error == CIRCULAR_REFERENCE_ERROR

    def test_body_length_guard(self):
        resolver = ReferenceResolver(max_body_length=20)
        queries = resolver.resolve(_queries(a="x" * 15, b="${a} ${a}"))
        assert _by_id(queries)["b"].compile_error == CIRCULAR_REFERENCE_ERROR

    def test_duplicate_ids_use_first_query(self):
        queries = [
            Query.from_body("a", "select 1"),
            Query.from_body("a", "select 2"),
            Query.from_body("b", "${a}"),
        ]
        resolve_queries(queries)
        assert queries[2].compiled_body == "(select 1)"

    def test_no_queries(self):
        assert resolve_queries([]) == []

    @pytest.mark.parametrize("bound", [-1, 0])
    def test_non_positive_bound_rejected(self, bound: int):
        with pytest.raises(ValueError, match="max_iterations"):
            ReferenceResolver(max_iterations=bound)

    def test_non_positive_body_length_rejected(self):
        with pytest.raises(ValueError, match="max_body_length"):
            ReferenceResolver(max_body_length=0)
