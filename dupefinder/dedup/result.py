"""Data classes for duplicate detection results."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from dupefinder.models import Indexer, ResultItem


@dataclass
class DuplicateCluster:
    """Result items believed to represent the same release.

    Attributes:
        identifier: Duplicate-group identifier, unique across one detection run.
        items: Members in insertion order, unique by identity.
    """

    identifier: int
    items: List[ResultItem] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __contains__(self, item: object) -> bool:
        return any(member is item for member in self.items)

    @property
    def indexers(self) -> List[Indexer]:
        return [item.indexer for item in self.items]


@dataclass
class DetectionResult:
    """Outcome of one duplicate detection run.

    Attributes:
        clusters: Every cluster in discovery order (title group, then cluster).
            A cluster's position equals its identifier.
        unique_hits_per_indexer: Per indexer, how many of its results were the
            sole member of the last cluster formed in their title group.
        assignments: Input position of each result item mapped to the
            identifier of the cluster that holds it.
        duplicates_detected: Number of items that joined an existing cluster.
    """

    clusters: List[DuplicateCluster] = field(default_factory=list)
    unique_hits_per_indexer: Counter = field(default_factory=Counter)
    assignments: Dict[int, int] = field(default_factory=dict)
    duplicates_detected: int = 0

    def duplicate_id_for(self, index: int) -> int:
        """Cluster identifier for the item at ``index`` in the detector input."""
        return self.assignments[index]

    def cluster_for(self, item: ResultItem) -> Optional[DuplicateCluster]:
        """Cluster holding ``item`` (matched by identity), or None."""
        for cluster in self.clusters:
            if item in cluster:
                return cluster
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clusters": [
                {
                    "identifier": cluster.identifier,
                    "items": [item.to_dict() for item in cluster.items],
                }
                for cluster in self.clusters
            ],
            "unique_hits_per_indexer": {
                indexer.name: count
                for indexer, count in self.unique_hits_per_indexer.items()
            },
            "duplicates_detected": self.duplicates_detected,
        }
