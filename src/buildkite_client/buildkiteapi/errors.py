"""Exceptions raised by the Buildkite API client and retry classification.

Every failure surfaces as a :class:`BuildkiteError` subclass. GraphQL HTTP
failures carry their status code both as an attribute and in their message
(``returned error NNN: <body>``), so errors that crossed other layers as
plain text can still be classified.
"""

import enum
import re

_STATUS_PATTERN = re.compile(r"returned error (\d{3}):", re.ASCII)

HTTP_TOO_MANY_REQUESTS = 429
HTTP_BAD_GATEWAY = 502
HTTP_GATEWAY_TIMEOUT = 504


class BuildkiteError(Exception):
    """Base class for Buildkite API client errors."""


class RequestEncodingError(BuildkiteError):
    """Raised when a request payload cannot be serialized to JSON."""


class RequestBuildError(BuildkiteError):
    """Raised when an HTTP request cannot be constructed."""


class NetworkError(BuildkiteError):
    """Raised when a request cannot be sent or times out."""


class StatusCodeError(BuildkiteError):
    """An error response carrying an HTTP status code."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class ApiRequestError(StatusCodeError):
    """Raised when the REST API answers with status >= 400."""

    def __init__(self, method: str, url: str, status_code: int):
        super().__init__(
            f"Buildkite API request failed: {method} {url} (status: {status_code})",
            status_code,
        )
        self.method = method
        self.url = url


class GraphQLHTTPError(StatusCodeError):
    """Raised when the GraphQL endpoint answers with a non-200 status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"returned error {status_code}: {body}", status_code)
        self.body = body


class ResponseReadError(BuildkiteError):
    """Raised when a response body cannot be read."""


class ResponseDecodeError(BuildkiteError):
    """Raised when a response body is not the JSON that was expected."""


class GraphQLResponseError(BuildkiteError):
    """Raised when a GraphQL response contains an ``errors`` array."""

    def __init__(self, errors: list):
        self.messages = [
            error.get("message", str(error)) if isinstance(error, dict) else str(error)
            for error in errors
        ]
        super().__init__(f"GraphQL request failed: {'; '.join(self.messages)}")


class OrganizationNotFoundError(BuildkiteError):
    """Raised when an organization slug does not resolve to an organization."""

    def __init__(self, slug: str):
        super().__init__(f"Organization not found: {slug!r}")
        self.slug = slug


class ErrorClass(enum.Enum):
    """Retry classification of an error."""

    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    FATAL = "fatal"

    @property
    def retryable(self) -> bool:
        return self is not ErrorClass.FATAL


def status_code_from_error(err: BaseException) -> int | None:
    """Extract the HTTP status code an error reports.

    Structured codes on :class:`GraphQLHTTPError` take precedence. Other
    errors, including REST :class:`ApiRequestError`, are searched for the
    ``returned error NNN:`` pattern.

    Returns:
        The status code, or None if the error does not carry one.
    """
    if isinstance(err, GraphQLHTTPError):
        return err.status_code
    match = _STATUS_PATTERN.search(str(err))
    if match is None:
        return None
    return int(match.group(1))


def classify_error(err: BaseException) -> ErrorClass:
    """Classify an error as rate limited, a transient server error, or fatal."""
    status = status_code_from_error(err)
    if status == HTTP_TOO_MANY_REQUESTS:
        return ErrorClass.RATE_LIMITED
    if status is not None and HTTP_BAD_GATEWAY <= status <= HTTP_GATEWAY_TIMEOUT:
        return ErrorClass.SERVER_ERROR
    return ErrorClass.FATAL


def is_rate_limited(err: BaseException) -> bool:
    return classify_error(err) is ErrorClass.RATE_LIMITED


def is_server_error(err: BaseException) -> bool:
    return classify_error(err) is ErrorClass.SERVER_ERROR


def is_retryable_error(err: BaseException) -> bool:
    """Return True if the operation that raised ``err`` may be re-issued."""
    return classify_error(err).retryable
