"""Detection observability via DogStatsD custom metrics.

When METRICS_ENABLED=true, this module emits operational metrics to a local
Datadog Agent (or DogStatsD sidecar). When disabled or if the connection
fails, all calls become no-ops.

Metrics emitted:
  - dupefinder.results.processed     (count)
  - dupefinder.duplicates.found      (count)
  - dupefinder.clusters.created      (count)
  - dupefinder.unique_hits           (count, tagged by indexer)
  - dupefinder.clusters.largest      (gauge, members in the biggest cluster)
  - dupefinder.detection.duration    (timing, ms)
"""

from __future__ import annotations

import atexit
from typing import Dict, List, Optional

from dupefinder.utils.logger import log_debug, log_info, log_warning


class _NoOpStatsd:
    """Drop-in replacement when DogStatsD is unavailable."""

    def increment(self, *a, **kw):
        pass

    def gauge(self, *a, **kw):
        pass

    def histogram(self, *a, **kw):
        pass

    def timing(self, *a, **kw):
        pass

    def close(self):
        pass


_client = None  # will be _NoOpStatsd or real DogStatsd


def _init_client() -> None:
    global _client
    if _client is not None:
        return

    from dupefinder.config import get_config

    config = get_config().metrics

    if not config.metrics_enabled:
        log_debug("DogStatsD metrics disabled (METRICS_ENABLED=false)")
        _client = _NoOpStatsd()
        return

    try:
        from datadog import DogStatsd

        _client = DogStatsd(
            host=config.dd_agent_host,
            port=config.dd_agent_port,
            namespace=config.metrics_prefix,
        )
        atexit.register(_client.close)
        log_info(
            "DogStatsD client initialized",
            host=config.dd_agent_host,
            port=config.dd_agent_port,
            prefix=config.metrics_prefix,
        )
    except Exception as exc:
        log_warning("DogStatsD unavailable, metrics disabled", error=str(exc))
        _client = _NoOpStatsd()


def _get_client():
    if _client is None:
        _init_client()
    return _client


def reset_client() -> None:
    """Drop the cached client so the next call re-reads configuration."""
    global _client
    _client = None


def _tags(extra: Optional[Dict[str, str]] = None) -> List[str]:
    """Build tag list from key-value pairs, filtering out None values."""
    tags: List[str] = []
    if extra:
        tags.extend(f"{k}:{v}" for k, v in extra.items() if v)
    return tags


# --- Public API ---


def incr(metric: str, value: int = 1, **extra_tags) -> None:
    """Increment a counter metric."""
    tags = _tags(extra_tags)
    _get_client().increment(metric, value=value, tags=tags or None)


def gauge(metric: str, value: float, **extra_tags) -> None:
    """Set a gauge metric."""
    tags = _tags(extra_tags)
    _get_client().gauge(metric, value=value, tags=tags or None)


def timing(metric: str, value_ms: float, **extra_tags) -> None:
    """Record a timing metric in milliseconds."""
    tags = _tags(extra_tags)
    _get_client().timing(metric, value=value_ms, tags=tags or None)
