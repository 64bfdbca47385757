"""Pairwise sameness test for result items reported by different indexers.

The rules run in a fixed order and the first one that decides wins:

  1. same indexer          -> never the same release
  2. both groups known     -> must be equal
  3. both posters known    -> must be equal
  4. exactly one of group/poster known and equal -> thresholds doubled
  5. publish age and size must both be within the (effective) thresholds
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from dupefinder.config import Config, get_config
from dupefinder.models import ResultItem
from dupefinder.utils.logger import log_debug

SECONDS_PER_HOUR = 60 * 60


@dataclass(frozen=True)
class Thresholds:
    """Age and size tolerances applied by the sameness test.

    Attributes:
        age_hours: Largest allowed publish age difference, in whole hours (inclusive).
        size_percent: Size difference, in percent of the average size, that
            must not be reached (exclusive).
    """

    age_hours: float
    size_percent: float

    def doubled(self) -> "Thresholds":
        return Thresholds(self.age_hours * 2, self.size_percent * 2)

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "Thresholds":
        searching = (config or get_config()).searching
        return cls(
            age_hours=searching.duplicate_age_threshold,
            size_percent=searching.duplicate_size_threshold_in_percent,
        )


@dataclass(frozen=True)
class Comparison:
    """Verdict of one comparison and the rule that produced it."""

    same: bool
    reason: str


def is_same_age(a: ResultItem, b: ResultItem, age_hours: float) -> bool:
    """Publish times differ by at most ``age_hours`` whole hours."""
    first, second = a.epoch_second, b.epoch_second
    if first is None or second is None:
        return False
    return abs(first - second) // SECONDS_PER_HOUR <= age_hours


def is_same_size(a: ResultItem, b: ResultItem, size_percent: float) -> bool:
    """Sizes differ by less than ``size_percent`` of their average.

    The average is an integer average truncated toward zero; a zero average
    never counts as the same size.
    """
    if a.size is None or b.size is None:
        return False
    difference = abs(a.size - b.size)
    total = a.size + b.size
    average = total // 2 if total >= 0 else -(-total // 2)
    if average == 0:
        return False
    difference_percent = abs(difference / average) * 100
    return difference_percent < size_percent


class SamenessTester:
    """Decide whether two result items describe the same release.

    Args:
        thresholds: Base tolerances. Defaults to the configured values.
        trace: Log every comparison and its deciding rule at DEBUG. Defaults
            to ``DEDUP_TRACE_COMPARISONS``.

    Usage::

        tester = SamenessTester(Thresholds(age_hours=2, size_percent=1))
        if tester.same(a, b):
            ...
    """

    def __init__(self, thresholds: Optional[Thresholds] = None, trace: Optional[bool] = None):
        if thresholds is None or trace is None:
            config = get_config()
            thresholds = thresholds or Thresholds.from_config(config)
            trace = config.searching.dedup_trace_comparisons if trace is None else trace
        self.thresholds = thresholds
        self.trace = trace

    def same(self, a: ResultItem, b: ResultItem) -> bool:
        return self.compare(a, b).same

    def compare(self, a: ResultItem, b: ResultItem) -> Comparison:
        """Run the rules in order and return the first decisive verdict."""
        result = self._compare(a, b)
        if self.trace:
            log_debug(
                "Compared results",
                first=repr(a),
                second=repr(b),
                same=result.same,
                reason=result.reason,
            )
        return result

    def _compare(self, a: ResultItem, b: ResultItem) -> Comparison:
        if a.indexer == b.indexer:
            return Comparison(False, "same_indexer")

        group_known = a.group is not None and b.group is not None
        same_group = group_known and a.group == b.group
        poster_known = a.poster is not None and b.poster is not None
        same_poster = poster_known and a.poster == b.poster

        if group_known and not same_group:
            return Comparison(False, "different_group")
        if poster_known and not same_poster:
            return Comparison(False, "different_poster")

        thresholds = self.thresholds
        if (same_group and not poster_known) or (same_poster and not group_known):
            thresholds = thresholds.doubled()

        if not is_same_age(a, b, thresholds.age_hours):
            return Comparison(False, "age")
        if not is_same_size(a, b, thresholds.size_percent):
            return Comparison(False, "size")
        return Comparison(True, "age_and_size")
