"""Duplicate detection across indexer search results.

Results are bucketed by a cheaply normalized title, then clustered inside
each bucket with a multi-signal sameness test (indexer, group, poster,
publish age, size).
"""

from dupefinder.dedup.result import DetectionResult, DuplicateCluster
from dupefinder.dedup.sameness import SamenessTester, Thresholds
from dupefinder.dedup.detector import DuplicateDetector, detect_duplicates

__all__ = [
    "DetectionResult",
    "DuplicateCluster",
    "DuplicateDetector",
    "SamenessTester",
    "Thresholds",
    "detect_duplicates",
]
