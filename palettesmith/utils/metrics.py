"""
Palettesmith Metrics Collection
In-process counters and distributions for the /v1 routes.

Counter names:
    requests_total, requests_total_<operation>
    palette_mode_used_total_<mode>
    fallback_total_<kind>        (harmony_mode, contrast)
    failed_total_<error_type>    (invalid_color, internal)
"""
import time
from collections import Counter, defaultdict
from threading import Lock
from typing import Any, Dict, Iterable, List, Optional

import numpy as np


def _describe(values: Iterable[float], percentiles: bool = True) -> Dict[str, float]:
    """Summarize a series as count/mean/min/max and optionally p50/p95."""
    data = np.asarray(list(values), dtype=float)
    if data.size == 0:
        return {}
    stats = {
        "count": int(data.size),
        "mean": float(data.mean()),
        "min": float(data.min()),
        "max": float(data.max()),
    }
    if percentiles:
        p50, p95 = np.percentile(data, [50, 95])
        stats["p50"] = float(p50)
        stats["p95"] = float(p95)
    return stats


class MetricsCollector:
    """Thread-safe collector shared by every request handler."""

    def __init__(self):
        self._lock = Lock()
        self._counters: Counter = Counter()
        self._durations: Dict[str, List[float]] = defaultdict(list)
        self._palette_sizes: List[int] = []
        self._started_at = time.time()

    def _bump(self, *names: str):
        with self._lock:
            for name in names:
                self._counters[name] += 1

    def increment_request_count(self, operation: str):
        self._bump("requests_total", f"requests_total_{operation}")

    def increment_mode_count(self, mode: str):
        self._bump(f"palette_mode_used_total_{mode}")

    def increment_fallback_count(self, kind: str):
        """Count a silent domain fallback (unknown harmony mode, black/white text)."""
        self._bump(f"fallback_total_{kind}")

    def increment_failure_count(self, error_type: str):
        self._bump(f"failed_total_{error_type}")

    def record_timing(self, operation: str, duration_ms: float):
        """Record a handler duration under "<operation>_duration_ms"."""
        with self._lock:
            self._durations[f"{operation}_duration_ms"].append(duration_ms)

    def record_palette_size(self, size: int):
        with self._lock:
            self._palette_sizes.append(size)

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            snapshot = {name: list(values) for name, values in self._durations.items()}
        return {name: _describe(values) for name, values in snapshot.items() if values}

    def get_palette_size_stats(self) -> Dict[str, float]:
        with self._lock:
            sizes = list(self._palette_sizes)
        return _describe(sizes, percentiles=False)

    def get_uptime_seconds(self) -> float:
        return time.time() - self._started_at

    def get_summary(self) -> Dict[str, Any]:
        """Snapshot served by GET /v1/metrics."""
        return {
            "uptime_seconds": self.get_uptime_seconds(),
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats(),
            "palette_size_stats": self.get_palette_size_stats()
        }

    def reset(self):
        with self._lock:
            self._counters.clear()
            self._durations.clear()
            self._palette_sizes.clear()
            self._started_at = time.time()


_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create the process-wide collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    """Clear the process-wide collector (used by the test suite)."""
    if _metrics is not None:
        _metrics.reset()
