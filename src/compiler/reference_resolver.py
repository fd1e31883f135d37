# src/compiler/reference_resolver.py — v1
"""Reference resolver: splice ``${id}`` tokens with other queries' bodies.

Resolution is a bounded fixed-point iteration over the queries of a single
document. Each pass substitutes every reference token found in a query with
the referenced query's *current* compiled body, wrapped in parentheses so the
splice cannot change operator precedence at the insertion point. Chains of
any depth resolve over successive passes; anything still unresolved on the
final pass is reported as a circular reference.

Failures are recorded on the query (``compile_error`` plus a body equal to
the message) and never raised, so one broken query cannot stop the others.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from pagequeries.core.models import Query

logger = logging.getLogger(__name__)

REFERENCE_PATTERN = re.compile(r"\$\{.*?\}")

COMPILER_ERROR_PREFIX = "Compiler error: "
MISSING_REFERENCE_ERROR = f"{COMPILER_ERROR_PREFIX}missing query reference"
CIRCULAR_REFERENCE_ERROR = f"{COMPILER_ERROR_PREFIX}circular reference"

DEFAULT_MAX_ITERATIONS = 100
DEFAULT_MAX_BODY_LENGTH = 10_000_000


def undefined_reference_error(reference_id: str) -> str:
    """Error message for a token whose id is not a query of the document."""
    if reference_id == "":
        return MISSING_REFERENCE_ERROR
    return f"{COMPILER_ERROR_PREFIX}'{reference_id}' is not a query on this page"


def find_references(body: str) -> list[str]:
    """Return every reference token in ``body``, in order of appearance."""
    return REFERENCE_PATTERN.findall(body)


def reference_id(token: str) -> str:
    """Extract the referenced query id from a ``${...}`` token."""
    return token.replace("${", "", 1).replace("}", "", 1).strip()


@dataclass
class ResolutionStats:
    """Counters describing one resolve() call."""

    passes: int = 0
    substitutions: int = 0
    undefined: int = 0
    circular: int = 0


class ReferenceResolver:
    """Resolve reference tokens between the queries of one document.

    Args:
        max_iterations: Index of the final pass, at least 1. Passes run from
            0 up to and including this value; references left on the final
            pass are reported as circular.
        max_body_length: Upper bound on a compiled body. A substitution that
            would exceed it marks the query circular straight away.
    """

    def __init__(
        self,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        max_body_length: int = DEFAULT_MAX_BODY_LENGTH,
    ) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        if max_body_length < 1:
            raise ValueError("max_body_length must be >= 1")
        self._max_iterations = max_iterations
        self._max_body_length = max_body_length
        self.last_stats = ResolutionStats()

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    def resolve(self, queries: list[Query]) -> list[Query]:
        """Resolve ``queries`` in place and return the same list.

        With duplicate ids, the first query carrying an id is the one
        substituted for references to that id.
        """
        stats = ResolutionStats()
        known_ids = {query.id for query in queries}
        sources: dict[str, Query] = {}
        for query in queries:
            sources.setdefault(query.id, query)

        for iteration in range(self._max_iterations + 1):
            stats.passes += 1
            final_pass = iteration == self._max_iterations
            any_references = False

            for query in queries:
                tokens = find_references(query.compiled_body)
                if not tokens:
                    continue
                any_references = True
                query.compiled = True

                for token in tokens:
                    ref_id = reference_id(token)
                    if ref_id not in known_ids:
                        query.fail(undefined_reference_error(ref_id))
                        stats.undefined += 1
                    elif final_pass:
                        query.fail(CIRCULAR_REFERENCE_ERROR)
                        stats.circular += 1
                    elif not query.has_error:
                        self._substitute(query, token, sources[ref_id], stats)

            if not any_references:
                break

        self.last_stats = stats
        logger.debug(
            "Resolved %d queries in %d passes: %d substitutions, "
            "%d undefined, %d circular",
            len(queries), stats.passes, stats.substitutions,
            stats.undefined, stats.circular,
        )
        for query in queries:
            if query.compile_error:
                logger.warning("Query %r: %s", query.id, query.compile_error)
        return queries

    def _substitute(
        self, query: Query, token: str, source: Query, stats: ResolutionStats,
    ) -> None:
        replacement = f"({source.compiled_body})"
        new_length = len(query.compiled_body) - len(token) + len(replacement)
        if new_length > self._max_body_length:
            query.fail(CIRCULAR_REFERENCE_ERROR)
            stats.circular += 1
            return
        query.compiled_body = query.compiled_body.replace(token, replacement, 1)
        stats.substitutions += 1


def resolve_queries(
    queries: list[Query],
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    max_body_length: int = DEFAULT_MAX_BODY_LENGTH,
) -> list[Query]:
    """Convenience wrapper around ReferenceResolver.resolve()."""
    return ReferenceResolver(max_iterations, max_body_length).resolve(queries)
