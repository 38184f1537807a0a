"""Tests for the timeout-bounded retry helper."""

from unittest.mock import MagicMock

import pytest
import tenacity

from buildkite_client.buildkiteapi import errors, retry

NO_WAIT = tenacity.wait_none()


def test_returns_result_without_retry_on_success():
    operation = MagicMock(return_value="ok")

    assert retry.retry_on_retryable(operation, timeout=60, wait=NO_WAIT) == "ok"
    operation.assert_called_once()


def test_retries_rate_limited_errors():
    operation = MagicMock(side_effect=[errors.GraphQLHTTPError(429, "slow down"), "ok"])

    assert retry.retry_on_retryable(operation, timeout=60, wait=NO_WAIT) == "ok"
    assert operation.call_count == 2


def test_retries_server_errors():
    operation = MagicMock(
        side_effect=[
            errors.GraphQLHTTPError(502, "bad gateway"),
            errors.GraphQLHTTPError(503, "unavailable"),
            errors.GraphQLHTTPError(504, "timeout"),
            "ok",
        ],
    )

    assert retry.retry_on_retryable(operation, timeout=60, wait=NO_WAIT) == "ok"
    assert operation.call_count == 4


def test_retries_errors_classified_from_text():
    """Errors from other layers are retried when their text embeds a 429."""
    operation = MagicMock(side_effect=[RuntimeError("returned error 429: {}"), "ok"])

    assert retry.retry_on_retryable(operation, timeout=60, wait=NO_WAIT) == "ok"


def test_fatal_error_propagates_immediately():
    operation = MagicMock(side_effect=errors.GraphQLHTTPError(404, "not found"))

    with pytest.raises(errors.GraphQLHTTPError):
        retry.retry_on_retryable(operation, timeout=60, wait=NO_WAIT)
    operation.assert_called_once()


def test_unclassified_error_propagates_immediately():
    operation = MagicMock(side_effect=ValueError("bad input"))

    with pytest.raises(ValueError, match="bad input"):
        retry.retry_on_retryable(operation, timeout=60, wait=NO_WAIT)
    operation.assert_called_once()


def test_timeout_reraises_last_retryable_error():
    """Once the timeout has elapsed the last retryable error is raised as-is."""
    operation = MagicMock(side_effect=errors.GraphQLHTTPError(503, "unavailable"))

    with pytest.raises(errors.GraphQLHTTPError) as exc_info:
        retry.retry_on_retryable(operation, timeout=0, wait=NO_WAIT)

    assert exc_info.value.status_code == 503
    operation.assert_called_once()
