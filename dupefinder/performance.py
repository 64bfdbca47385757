"""Timing of detection runs for dupefinder.

``PerformanceMetrics`` keeps the last hundred durations per operation so a
long-lived process can report averages without growing without bound.
"""

import time
from typing import Any, Dict, List

from dupefinder.config import get_config
from dupefinder.utils.logger import log_info

_MAX_SAMPLES = 100


class PerformanceMetrics:
    """Track performance metrics for detection runs."""

    def __init__(self):
        self.metrics: Dict[str, List[float]] = {}
        self.start_times: Dict[str, float] = {}

    def start_timer(self, operation: str) -> None:
        """Start timing an operation."""
        self.start_times[operation] = time.perf_counter()

    def end_timer(self, operation: str) -> float:
        """End timing an operation and return duration in seconds."""
        if operation not in self.start_times:
            return 0.0

        duration = time.perf_counter() - self.start_times.pop(operation)
        self.record(operation, duration)
        return duration

    def record(self, operation: str, duration: float) -> None:
        """Store a measured duration (seconds) for ``operation``."""
        samples = self.metrics.setdefault(operation, [])
        samples.append(duration)
        if len(samples) > _MAX_SAMPLES:
            self.metrics[operation] = samples[-_MAX_SAMPLES:]

    def get_operation_stats(self, operation: str) -> Dict[str, float]:
        """Get statistics for a specific operation."""
        if operation not in self.metrics or not self.metrics[operation]:
            return {}

        durations = self.metrics[operation]
        return {
            "count": len(durations),
            "avg_ms": round(sum(durations) * 1000 / len(durations), 2),
            "min_ms": round(min(durations) * 1000, 2),
            "max_ms": round(max(durations) * 1000, 2),
            "total_ms": round(sum(durations) * 1000, 2),
        }

    def get_all_stats(self) -> Dict[str, Dict[str, float]]:
        """Get statistics for all operations."""
        return {op: self.get_operation_stats(op) for op in self.metrics.keys()}

    def clear(self) -> None:
        self.metrics.clear()
        self.start_times.clear()

    def log_performance_summary(self) -> None:
        """Log a performance summary."""
        stats = self.get_all_stats()
        if not stats:
            return

        log_info("Performance metrics summary")
        for operation, op_stats in stats.items():
            if op_stats:
                log_info(
                    f"  {operation}: {op_stats['count']} calls, "
                    f"avg {op_stats['avg_ms']}ms, "
                    f"min {op_stats['min_ms']}ms, "
                    f"max {op_stats['max_ms']}ms"
                )


# Global instance
performance_metrics = PerformanceMetrics()


def get_performance_metrics() -> PerformanceMetrics:
    """Get the global performance metrics instance."""
    return performance_metrics


def log_performance_summary() -> None:
    """Log the recorded performance metrics."""
    performance_metrics.log_performance_summary()


def log_configuration_performance() -> None:
    """Log configuration values that affect detection cost and grouping."""
    config = get_config()

    log_info(
        "Performance configuration",
        duplicate_age_threshold=config.duplicate_age_threshold,
        duplicate_size_threshold_in_percent=config.duplicate_size_threshold_in_percent,
        trace_comparisons=config.dedup_trace_comparisons,
    )


def get_performance_recommendations(result_count: int = 0) -> List[str]:
    """Get recommendations based on current configuration and input size."""
    config = get_config()
    recommendations = []

    if config.dedup_trace_comparisons:
        recommendations.append(
            "DEDUP_TRACE_COMPARISONS=true logs every pairwise comparison; "
            "disable it outside of debugging sessions"
        )

    if config.dedup_trace_comparisons and result_count > 1000:
        recommendations.append(
            f"Tracing {result_count} results will produce a very large log; "
            "consider narrowing the input"
        )

    return recommendations


def summarize(stats: Dict[str, Any]) -> str:
    """One-line rendering of ``get_operation_stats`` output."""
    if not stats:
        return "no samples"
    return f"{stats['count']} runs, avg {stats['avg_ms']}ms, max {stats['max_ms']}ms"
