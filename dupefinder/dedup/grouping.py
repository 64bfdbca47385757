"""Cheap title bucketing ahead of pairwise duplicate comparison."""

from __future__ import annotations

import re
from typing import Dict, List, Sequence, Tuple

from dupefinder.models import ResultItem

_FIRST_SEPARATOR = re.compile(r"[ .\-_]")


def normalize_title(title: str) -> str:
    """Drop the first space, dot, hyphen or underscore from ``title``.

    Only the first separator goes; "Some.Show.S01" and "Some Show.S01" land in
    the same bucket while "Some.Show.S01" and "Some.Show S01" do not.
    """
    return _FIRST_SEPARATOR.sub("", title, count=1)


def group_by_title(items: Sequence[ResultItem]) -> Dict[str, List[ResultItem]]:
    """Bucket items by normalized title, keeping input order inside each bucket."""
    return {key: [item for _, item in members] for key, members in group_positions(items).items()}


def group_positions(items: Sequence[ResultItem]) -> Dict[str, List[Tuple[int, ResultItem]]]:
    """Like :func:`group_by_title` but keeps each item's input position.

    Buckets are ordered by the first appearance of their key.
    """
    groups: Dict[str, List[Tuple[int, ResultItem]]] = {}
    for position, item in enumerate(items):
        groups.setdefault(normalize_title(item.title), []).append((position, item))
    return groups
