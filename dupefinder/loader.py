"""Read search results from JSON or YAML files.

A file holds either a list of result records or a mapping with a
``results`` list. Each record is validated with ``ResultRecord`` and turned
into a ``ResultItem``; indexers with the same name share one ``Indexer``.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from dupefinder.models import Indexer, ResultItem
from dupefinder.utils.logger import log_error, log_info


class ResultsFileError(ValueError):
    """The results file could not be read or does not hold valid records."""


def parse_pub_date(raw: Union[str, int, float, datetime, None]) -> Optional[datetime]:
    """Parse ISO 8601, RFC 2822 or epoch-second timestamps into aware UTC datetimes."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, (int, float)):
        return datetime.fromtimestamp(raw, tz=timezone.utc)
    else:
        text = str(raw).strip()
        if text.isdigit():
            return datetime.fromtimestamp(int(text), tz=timezone.utc)
        try:
            parsed = datetime.fromisoformat(text[:-1] + "+00:00" if text.endswith("Z") else text)
        except ValueError:
            try:
                parsed = parsedate_to_datetime(text)
            except (TypeError, ValueError):
                raise ValueError(f"Unrecognized timestamp: {raw!r}") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class ResultRecord(BaseModel):
    """One search result as it appears in a results file."""

    title: str = Field(..., min_length=1, description="Release title as reported by the indexer")
    indexer: str = Field(..., min_length=1, description="Name of the indexer that returned the result")
    pub_date: Optional[datetime] = Field(None, description="Publish time")
    size: Optional[int] = Field(None, description="Size in bytes")
    group: Optional[str] = Field(None, description="Release group tag")
    poster: Optional[str] = Field(None, description="Uploader / poster identity")
    guid: Optional[str] = None
    link: Optional[str] = None
    category: Optional[str] = None

    @field_validator("pub_date", mode="before")
    @classmethod
    def validate_pub_date(cls, v):
        return parse_pub_date(v)

    @field_validator("group", "poster", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_item(self, indexer: Indexer) -> ResultItem:
        return ResultItem(
            title=self.title,
            indexer=indexer,
            pub_date=self.pub_date,
            size=self.size,
            group=self.group,
            poster=self.poster,
            guid=self.guid,
            link=self.link,
            category=self.category,
        )


def build_items(records: List[Dict[str, Any]]) -> List[ResultItem]:
    """Validate raw record dicts and convert them to result items."""
    indexers: Dict[str, Indexer] = {}
    items: List[ResultItem] = []
    for position, raw in enumerate(records):
        if not isinstance(raw, dict):
            raise ResultsFileError(f"Result #{position} is not a mapping")
        try:
            record = ResultRecord(**raw)
        except ValidationError as exc:
            raise ResultsFileError(f"Result #{position} is invalid: {exc}") from exc
        indexer = indexers.setdefault(record.indexer, Indexer(record.indexer))
        items.append(record.to_item(indexer))
    return items


def _read_document(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as fh:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(fh)
        return json.load(fh)


def load_results(path: Union[str, Path]) -> List[ResultItem]:
    """Load result items from a JSON or YAML file."""
    results_path = Path(path)
    try:
        document = _read_document(results_path)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        log_error("Failed to read results file", error=str(exc), path=str(results_path))
        raise ResultsFileError(f"Cannot read {results_path}: {exc}") from exc

    if isinstance(document, dict):
        document = document.get("results")
    if not isinstance(document, list):
        log_error("Results file has no result list", path=str(results_path))
        raise ResultsFileError(f"{results_path} must contain a list of results")

    try:
        items = build_items(document)
    except ResultsFileError as exc:
        log_error("Invalid result record", error=str(exc), path=str(results_path))
        raise

    log_info(
        "Loaded search results",
        path=str(results_path),
        result_count=len(items),
        indexer_count=len({item.indexer for item in items}),
    )
    return items
