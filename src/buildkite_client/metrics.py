"""Prometheus metrics for outgoing Buildkite API requests.

Metrics are registered on a caller-owned registry rather than the global one,
so several clients (or tests) can coexist in one process.
"""

from prometheus_client import CollectorRegistry, Counter, Histogram


class RequestMetrics:
    """Request counter and duration histogram for Buildkite API calls."""

    def __init__(self, registry: CollectorRegistry | None = None):
        """Create and register the request metrics.

        Args:
            registry: Registry to register on. A fresh registry is created
                when omitted.
        """
        self.registry = registry if registry is not None else CollectorRegistry()
        self._requests = Counter(
            "buildkite_api_requests",
            "Requests sent to the Buildkite API",
            labelnames=["method", "host", "status"],
            registry=self.registry,
        )
        self._duration = Histogram(
            "buildkite_api_request_duration_seconds",
            "Duration of requests sent to the Buildkite API in seconds",
            labelnames=["method", "host"],
            registry=self.registry,
        )

    def observe(self, method: str, host: str, status: str, duration: float) -> None:
        """Record one completed or failed request.

        Args:
            method: HTTP method.
            host: Target host.
            status: Response status code, or "error" if no response arrived.
            duration: Elapsed time in seconds.
        """
        self._requests.labels(method=method, host=host, status=status).inc()
        self._duration.labels(method=method, host=host).observe(duration)
