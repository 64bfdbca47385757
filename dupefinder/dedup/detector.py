"""Group result items from several indexers into duplicate clusters.

``DuplicateDetector.detect`` buckets results by a cheaply normalized title and
then clusters each bucket greedily: items are visited newest first and join
the first existing cluster holding a member that passes the sameness test,
otherwise they open a new cluster. Placement is never revisited, so the
grouping depends on that visiting order and is reproducible for equal input.
"""

from __future__ import annotations

import time
from collections import Counter
from typing import List, Optional, Sequence, Tuple

from dupefinder import metrics
from dupefinder.dedup.grouping import group_positions
from dupefinder.dedup.result import DetectionResult, DuplicateCluster
from dupefinder.dedup.sameness import SamenessTester, Thresholds
from dupefinder.models import ResultItem
from dupefinder.performance import get_performance_metrics
from dupefinder.utils.logger import log_debug, log_detection_summary

# A cluster under construction: input positions of its members.
_Bucket = List[int]


def _newest_first(positioned: List[Tuple[int, ResultItem]]) -> List[Tuple[int, ResultItem]]:
    """Sort by publish time descending; undated items go last, ties keep input order.

    Sub-second differences count: the full timestamp is the key, not the
    whole seconds the age test uses.
    """

    def sort_key(entry: Tuple[int, ResultItem]):
        pub_date = entry[1].pub_date
        return (pub_date is not None, pub_date.timestamp() if pub_date is not None else 0.0)

    return sorted(positioned, key=sort_key, reverse=True)


class DuplicateDetector:
    """Partition search results into clusters that describe the same release.

    Args:
        thresholds: Age/size tolerances. Defaults to the configured values.
        tester: Sameness test to use. Built from ``thresholds`` if *None*.
        annotate: Write each cluster identifier onto its members'
            ``duplicate_identifier``. The identifiers are always available
            through ``DetectionResult.assignments`` as well.

    Usage::

        detector = DuplicateDetector(Thresholds(age_hours=2, size_percent=1))
        result = detector.detect(items)
        for cluster in result.clusters:
            ...
    """

    def __init__(
        self,
        thresholds: Optional[Thresholds] = None,
        tester: Optional[SamenessTester] = None,
        annotate: bool = True,
    ):
        self.tester = tester if tester is not None else SamenessTester(thresholds)
        self.annotate = annotate

    @property
    def thresholds(self) -> Thresholds:
        return self.tester.thresholds

    def detect(self, results: Sequence[ResultItem]) -> DetectionResult:
        """Cluster ``results`` and count unique hits per indexer.

        Args:
            results: Result items from any number of indexers, in any order.

        Returns:
            ``DetectionResult`` with clusters in title-group then discovery
            order and identifiers numbered from 0 in that same order.
        """
        started = time.perf_counter()

        unique_hits: Counter = Counter()
        buckets: List[_Bucket] = []
        duplicates_detected = 0

        for title_key, positioned in group_positions(results).items():
            group_buckets, joined = self._cluster_title_group(positioned)
            duplicates_detected += joined

            last_bucket = group_buckets[-1]
            if len(last_bucket) == 1:
                unique_hits[results[last_bucket[0]].indexer] += 1

            log_debug(
                "Clustered title group",
                title_key=title_key,
                results=len(positioned),
                clusters=len(group_buckets),
            )
            buckets.extend(group_buckets)

        result = self._annotate(results, buckets)
        result.unique_hits_per_indexer = unique_hits
        result.duplicates_detected = duplicates_detected

        elapsed = time.perf_counter() - started
        get_performance_metrics().record("duplicate_detection", elapsed)
        log_detection_summary(len(results), elapsed * 1000, duplicates_detected)
        self._emit_metrics(result, len(results), elapsed)
        return result

    def _cluster_title_group(
        self, positioned: List[Tuple[int, ResultItem]]
    ) -> Tuple[List[_Bucket], int]:
        """Greedy first-match clustering of one title group.

        Returns the buckets in creation order and how many items joined an
        existing bucket.
        """
        ordered = _newest_first(positioned)
        first_position, first_item = ordered[0]
        buckets: List[_Bucket] = [[first_position]]
        members: List[List[ResultItem]] = [[first_item]]
        joined = 0

        for position, item in ordered[1:]:
            target = self._find_bucket(item, members)
            if target is None:
                buckets.append([position])
                members.append([item])
            else:
                buckets[target].append(position)
                members[target].append(item)
                joined += 1

        return buckets, joined

    def _find_bucket(self, item: ResultItem, members: List[List[ResultItem]]) -> Optional[int]:
        """Index of the first bucket with a member the item matches, else None."""
        for index, bucket_members in enumerate(members):
            for other in bucket_members:
                if self.tester.same(item, other):
                    return index
        return None

    def _annotate(self, results: Sequence[ResultItem], buckets: List[_Bucket]) -> DetectionResult:
        """Number the clusters in order and record every member's identifier."""
        result = DetectionResult()
        for identifier, bucket in enumerate(buckets):
            cluster = DuplicateCluster(identifier=identifier)
            for position in bucket:
                item = results[position]
                cluster.items.append(item)
                result.assignments[position] = identifier
                if self.annotate:
                    item.duplicate_identifier = identifier
            result.clusters.append(cluster)
        return result

    @staticmethod
    def _emit_metrics(result: DetectionResult, result_count: int, elapsed: float) -> None:
        metrics.incr("results.processed", value=result_count)
        metrics.incr("duplicates.found", value=result.duplicates_detected)
        metrics.incr("clusters.created", value=len(result.clusters))
        for indexer, count in result.unique_hits_per_indexer.items():
            metrics.incr("unique_hits", value=count, indexer=indexer.name)
        if result.clusters:
            metrics.gauge("clusters.largest", max(len(cluster) for cluster in result.clusters))
        metrics.timing("detection.duration", elapsed * 1000)


def detect_duplicates(
    results: Sequence[ResultItem], thresholds: Optional[Thresholds] = None
) -> DetectionResult:
    """Run a one-off detection with the given or configured thresholds."""
    return DuplicateDetector(thresholds).detect(results)
