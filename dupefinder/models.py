"""Result item and indexer types shared by the loader and the detector."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Indexer:
    """Identity of the indexer back-end that produced a result.

    Only the name takes part in equality, so indexers rebuilt from the same
    configuration compare equal and count together.
    """

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(eq=False)
class ResultItem:
    """One indexer's report of a release.

    Items compare and hash by identity: two indexers reporting the very same
    content must remain two distinct members of a duplicate cluster.
    ``duplicate_identifier`` stays ``None`` until the detector annotates it.
    """

    title: str
    indexer: Indexer
    pub_date: Optional[datetime] = None
    size: Optional[int] = None
    group: Optional[str] = None
    poster: Optional[str] = None
    guid: Optional[str] = None
    link: Optional[str] = None
    category: Optional[str] = None
    duplicate_identifier: Optional[int] = None

    @property
    def epoch_second(self) -> Optional[int]:
        """Publish time in whole seconds since the epoch, floored."""
        if self.pub_date is None:
            return None
        return math.floor(self.pub_date.timestamp())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "indexer": self.indexer.name,
            "pub_date": self.pub_date.isoformat() if self.pub_date else None,
            "size": self.size,
            "group": self.group,
            "poster": self.poster,
            "guid": self.guid,
            "link": self.link,
            "category": self.category,
            "duplicate_identifier": self.duplicate_identifier,
        }

    def __repr__(self) -> str:
        return (
            f"ResultItem(title={self.title!r}, indexer={self.indexer.name!r}, "
            f"pub_date={self.pub_date!r}, size={self.size!r})"
        )
