"""Metrics service for tracking relay performance.

Singleton service that counts relay calls to the remote API per route, with
their outcome and latency.
"""

import threading
from typing import Dict


class RelayMetrics:
    """Singleton service for tracking relay metrics.

    Thread-safe counters and latency tracking, keyed by route name.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        """Create singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(RelayMetrics, cls).__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize metrics counters."""
        if self._initialized:
            return

        self._lock = threading.Lock()
        self._routes: Dict[str, Dict[str, float]] = {}
        self._initialized = True

    def record_relay(self, route: str, latency_ms: float, ok: bool) -> None:
        """Record one relay call.

        Args:
            route: Logical route name (e.g. "message", "feedback")
            latency_ms: Time spent waiting on the remote API in milliseconds
            ok: Whether the remote call succeeded
        """
        with self._lock:
            stats = self._routes.setdefault(
                route,
                {
                    "calls": 0,
                    "failures": 0,
                    "total_latency_ms": 0.0,
                    "max_latency_ms": 0.0,
                },
            )
            stats["calls"] += 1
            if not ok:
                stats["failures"] += 1
            stats["total_latency_ms"] += latency_ms
            if latency_ms > stats["max_latency_ms"]:
                stats["max_latency_ms"] = latency_ms

    def get_metrics(self) -> Dict:
        """Get current metrics.

        Returns:
            Dictionary with total call/failure counts and a per-route
            breakdown including average and max latency.
        """
        with self._lock:
            routes = {}
            for route, stats in self._routes.items():
                calls = int(stats["calls"])
                routes[route] = {
                    "calls": calls,
                    "failures": int(stats["failures"]),
                    "average_latency_ms": (
                        round(stats["total_latency_ms"] / calls, 2) if calls else 0.0
                    ),
                    "max_latency_ms": round(stats["max_latency_ms"], 2),
                }

            return {
                "relay_calls": sum(r["calls"] for r in routes.values()),
                "relay_failures": sum(r["failures"] for r in routes.values()),
                "routes": routes,
            }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self._routes = {}


# Global singleton instance
relay_metrics = RelayMetrics()
