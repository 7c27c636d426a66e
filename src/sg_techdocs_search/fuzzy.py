"""Approximate substring matching over weighted record fields.

A query matches a field when some substring of the field lies within a
bounded edit distance of the query. The allowed distance grows with the
query length:

- threshold 0.0: the query must occur verbatim
- threshold 0.3: roughly one edit per three query characters
- threshold 1.0: anything matches
"""

from __future__ import annotations

import math
import sys
from collections.abc import Mapping, Sequence

from sg_techdocs_search.models import DocumentRecord, SearchResult

# Stands in for a perfect field score so weights still separate exact hits
EPSILON = sys.float_info.epsilon


def substring_distance(pattern: str, text: str, max_errors: int) -> int:
    """Return the smallest edit distance between pattern and any substring of text.

    Uses the column-wise dynamic programme for approximate string matching
    with a cut-off on the last row that can still finish within
    max_errors, so rows beyond it are never computed.

    Args:
        pattern: The string to look for.
        text: The string to search in.
        max_errors: Largest distance of interest.

    Returns:
        The distance, or max_errors + 1 when no substring is close enough.

    Examples:
        >>> substring_distance("jwks", "the jwks endpoint", 1)
        0
        >>> substring_distance("jkws", "the jwks endpoint", 2)
        2
        >>> substring_distance("oidc", "saml only", 1)
        2
    """
    m = len(pattern)
    if m == 0 or pattern in text:
        return 0
    if max_errors <= 0:
        return 1
    # Deleting the whole pattern always costs m
    max_errors = min(max_errors, m)

    column = list(range(m + 1))
    last_active = max_errors
    best = max_errors + 1

    for char in text:
        diagonal = 0
        for i in range(1, last_active + 1):
            cost = 0 if pattern[i - 1] == char else 1
            value = min(column[i] + 1, column[i - 1] + 1, diagonal + cost)
            diagonal, column[i] = column[i], value

        if last_active < m:
            i = last_active + 1
            cost = 0 if pattern[i - 1] == char else 1
            column[i] = min(column[i - 1] + 1, diagonal + cost)
            last_active = i

        while last_active > 0 and column[last_active] > max_errors:
            last_active -= 1

        if last_active == m:
            best = min(best, column[m])

    return best


class FuzzyIndex:
    """Fuzzy matcher built once over a fixed list of records."""

    def __init__(
        self,
        records: Sequence[DocumentRecord],
        fields: Mapping[str, float] | None = None,
        threshold: float = 0.3,
    ) -> None:
        """Initialise the index.

        Args:
            records: Records to match against; never modified.
            fields: Record attribute names mapped to relative weights.
            threshold: Largest accepted ratio of edits to query length.

        Raises:
            ValueError: If a weight is not positive or threshold is out of range.
        """
        fields = dict(fields or {"title": 2.0, "content": 1.0})
        if not fields or any(weight <= 0 for weight in fields.values()):
            msg = "Field weights must be positive"
            raise ValueError(msg)
        if not 0.0 <= threshold <= 1.0:
            msg = f"Threshold must be between 0 and 1, got {threshold}"
            raise ValueError(msg)

        total = sum(fields.values())
        self.weights = {name: weight / total for name, weight in fields.items()}
        self.threshold = threshold
        self.records = tuple(records)
        # Lowercased once; matching is case-insensitive
        self._haystacks = tuple(
            {name: str(getattr(record, name)).lower() for name in self.weights} for record in self.records
        )

    def __len__(self) -> int:
        return len(self.records)

    def score_field(self, query: str, text: str) -> float | None:
        """Score one field, 0.0 being a verbatim hit.

        Returns:
            The ratio of edits to query length, or None if above threshold.
        """
        max_errors = math.floor(self.threshold * len(query))
        distance = substring_distance(query, text, max_errors)
        if distance > max_errors:
            return None
        return distance / len(query)

    def search(self, query: str) -> list[SearchResult]:
        """Rank records against a query.

        Each matching field contributes its score raised to its normalized
        weight; the product is the record score. Records without any
        matching field are left out.

        Args:
            query: Raw query string.

        Returns:
            Results by ascending score, ties kept in index order.
        """
        needle = query.lower()
        if not needle:
            return []

        scored: list[tuple[float, int, SearchResult]] = []
        for position, (record, haystack) in enumerate(zip(self.records, self._haystacks)):
            total = 1.0
            matched = []
            for name, weight in self.weights.items():
                score = self.score_field(needle, haystack[name])
                if score is None:
                    continue
                matched.append(name)
                total *= max(score, EPSILON) ** weight
            if matched:
                result = SearchResult(record=record, score=total, matched_fields=tuple(matched))
                scored.append((total, position, result))

        scored.sort(key=lambda item: (item[0], item[1]))
        return [result for _, _, result in scored]
