"""Timeout-bounded retries for rate-limited and transiently failing calls.

The client never retries on its own. Callers wrap GraphQL operations in
:func:`retry_on_retryable` to re-issue them while the API answers with 429 or
502-504, typically bounded by one of the client's :class:`Timeouts`.
"""

from collections.abc import Callable
from typing import TypeVar

import structlog
import tenacity

from .errors import classify_error, is_retryable_error

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_WAIT = 10.0


def _log_retry(retry_state: tenacity.RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Retrying Buildkite API call",
        attempt=retry_state.attempt_number,
        error_class=classify_error(exc).value if exc else None,
        error=str(exc),
    )


def retry_on_retryable(
    operation: Callable[[], T],
    *,
    timeout: float,
    wait: tenacity.wait.wait_base | None = None,
) -> T:
    """Call ``operation`` until it succeeds, fails fatally, or time runs out.

    Args:
        operation: Zero-argument callable to invoke.
        timeout: Seconds after which no further attempt is started.
        wait: Wait strategy between attempts (default: exponential backoff
            capped at 10 seconds).

    Returns:
        The value returned by the first successful call.

    Raises:
        Exception: The first fatal error, or the last retryable error once
            the timeout has elapsed.
    """
    retrying = tenacity.Retrying(
        retry=tenacity.retry_if_exception(is_retryable_error),
        stop=tenacity.stop_after_delay(timeout),
        wait=wait if wait is not None else tenacity.wait_exponential(max=DEFAULT_MAX_WAIT),
        before_sleep=_log_retry,
        reraise=True,
    )
    return retrying(operation)
