"""Unit tests for dupefinder.metrics module."""

import pytest
from unittest.mock import MagicMock, patch

import dupefinder.metrics as metrics_mod
from dupefinder.config import Config
from dupefinder.metrics import _NoOpStatsd, _tags, incr, gauge, timing


class TestNoOpStatsd:
    """Verify _NoOpStatsd is a valid drop-in."""

    def test_all_methods_are_noop(self):
        client = _NoOpStatsd()
        # Should not raise
        client.increment("x", value=1)
        client.gauge("x", value=1.0)
        client.histogram("x", value=1.0)
        client.timing("x", value=1.0)
        client.close()


class TestTags:
    def test_empty_returns_empty_list(self):
        assert _tags(None) == []

    def test_with_values(self):
        tags = _tags({"indexer": "alpha", "env": "prod"})
        assert "indexer:alpha" in tags
        assert "env:prod" in tags

    def test_none_values_filtered(self):
        tags = _tags({"indexer": None, "env": "prod"})
        assert tags == ["env:prod"]


class TestClientInit:
    def test_disabled_uses_noop(self):
        metrics_mod.reset_client()
        with patch("dupefinder.config.get_config", return_value=Config(metrics_enabled=False)):
            assert isinstance(metrics_mod._get_client(), _NoOpStatsd)

    def test_unavailable_falls_back_to_noop(self):
        metrics_mod.reset_client()
        with (
            patch("dupefinder.config.get_config", return_value=Config(metrics_enabled=True)),
            patch("datadog.DogStatsd", side_effect=OSError("no socket")),
        ):
            assert isinstance(metrics_mod._get_client(), _NoOpStatsd)

    def test_enabled_builds_client_from_metrics_settings(self):
        metrics_mod.reset_client()
        config = Config(metrics_enabled=True, dd_agent_host="statsd", dd_agent_port=9125, metrics_prefix="dupes")
        with (
            patch("dupefinder.config.get_config", return_value=config),
            patch("datadog.DogStatsd") as mock_cls,
            patch("dupefinder.metrics.atexit.register"),
        ):
            client = metrics_mod._get_client()
        mock_cls.assert_called_once_with(host="statsd", port=9125, namespace="dupes")
        assert client is mock_cls.return_value


class TestMetricsDelegation:
    """When a client is available, calls delegate correctly."""

    def test_incr_delegates_to_client(self):
        mock_statsd = MagicMock()
        metrics_mod._client = mock_statsd
        incr("unique_hits", value=3, indexer="alpha")
        mock_statsd.increment.assert_called_once_with("unique_hits", value=3, tags=["indexer:alpha"])

    def test_incr_without_tags(self):
        mock_statsd = MagicMock()
        metrics_mod._client = mock_statsd
        incr("results.processed", value=50)
        assert mock_statsd.increment.call_args[1]["tags"] is None

    def test_gauge_delegates_to_client(self):
        mock_statsd = MagicMock()
        metrics_mod._client = mock_statsd
        gauge("clusters.size", 12.5)
        assert mock_statsd.gauge.call_args[0][0] == "clusters.size"
        assert mock_statsd.gauge.call_args[1]["value"] == 12.5

    def test_timing_delegates_to_client(self):
        mock_statsd = MagicMock()
        metrics_mod._client = mock_statsd
        timing("detection.duration", 150.0)
        assert mock_statsd.timing.call_args[1]["value"] == 150.0
