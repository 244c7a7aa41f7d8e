"""
Bias Matcher

Given a SignalRecord, return every catalog rule whose predicate holds,
in catalog order. There is no scoring and no secondary sort: catalog
order is the only ordering rule.

Matching is a pure function. It holds no state, performs no I/O and
never mutates the record or the catalog, so the same record always
yields the same result.
"""

from __future__ import annotations

from typing import Optional, Sequence

from shopbias.catalog import BIAS_CATALOG, BiasRule
from shopbias.signals import SignalRecord


def match(
    record: SignalRecord,
    catalog: Optional[Sequence[BiasRule]] = None,
) -> list[BiasRule]:
    """
    Evaluate every rule against the record.

    Args:
        record: The shopper's signals for one listing.
        catalog: Rules to evaluate. Defaults to the frozen BIAS_CATALOG.

    Returns:
        The matching rules as a subsequence of `catalog`.
    """
    rules = BIAS_CATALOG if catalog is None else catalog
    return [rule for rule in rules if rule.predicate(record)]
