"""Composable httpx transports used by the Buildkite API client.

Each transport wraps a ``next`` transport and delegates to it, so concerns
such as header injection, logging and metrics are stacked rather than
inherited. All of them are safe to share between threads: their state is
fixed at construction.
"""

import time
from collections.abc import Mapping

import httpx
import structlog

from ..metrics import RequestMetrics

logger = structlog.get_logger(__name__)


class HeaderTransport(httpx.BaseTransport):
    """Sets a fixed set of headers on every outgoing request.

    Values replace whatever the request already carries under the same
    names. The request is modified in place before being forwarded.
    """

    def __init__(
        self,
        headers: Mapping[str, str],
        next: httpx.BaseTransport | None = None,  # noqa: A002
    ):
        """Initialize the header transport.

        Args:
            headers: Headers to set on every request.
            next: Transport to forward to (default: httpx.HTTPTransport).
        """
        self._next = next if next is not None else httpx.HTTPTransport()
        self.headers = httpx.Headers(headers)

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        for name, value in self.headers.items():
            request.headers[name] = value
        return self._next.handle_request(request)

    def close(self) -> None:
        self._next.close()


class LoggingTransport(httpx.BaseTransport):
    """Logs every request with its status and duration."""

    def __init__(self, next: httpx.BaseTransport | None = None):  # noqa: A002
        self._next = next if next is not None else httpx.HTTPTransport()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        start_time = time.time()
        try:
            response = self._next.handle_request(request)
        except httpx.HTTPError as exc:
            logger.debug(
                "HTTP request failed",
                method=request.method,
                url=str(request.url),
                error=str(exc),
                duration_seconds=round(time.time() - start_time, 3),
            )
            raise
        logger.debug(
            "HTTP request completed",
            method=request.method,
            url=str(request.url),
            status=response.status_code,
            duration_seconds=round(time.time() - start_time, 3),
        )
        return response

    def close(self) -> None:
        self._next.close()


class MetricsTransport(httpx.BaseTransport):
    """Records request counts and durations in :class:`RequestMetrics`."""

    def __init__(
        self,
        metrics: RequestMetrics,
        next: httpx.BaseTransport | None = None,  # noqa: A002
    ):
        self._metrics = metrics
        self._next = next if next is not None else httpx.HTTPTransport()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        start_time = time.time()
        status = "error"
        try:
            response = self._next.handle_request(request)
            status = str(response.status_code)
            return response
        finally:
            self._metrics.observe(
                method=request.method,
                host=request.url.host,
                status=status,
                duration=time.time() - start_time,
            )

    def close(self) -> None:
        self._next.close()
