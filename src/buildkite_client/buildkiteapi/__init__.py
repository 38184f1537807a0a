"""Buildkite API client package.

Provides an authenticated client for the Buildkite REST and GraphQL APIs
together with the errors it raises and the helpers used to classify and
retry them.

Exports:
    BuildkiteClient: Client holding the REST and GraphQL handles.
    ClientConfig, Timeouts: Client configuration models.
    errors: Module containing the exception hierarchy and classifier.
    retry_on_retryable: Timeout-bounded retry helper.
    types: Module containing Pydantic models for API responses.
"""

from . import errors, types
from .client import BuildkiteClient
from .config import (
    DEFAULT_GRAPHQL_URL,
    DEFAULT_REST_URL,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    ClientConfig,
    Timeouts,
)
from .errors import (
    BuildkiteError,
    ErrorClass,
    classify_error,
    is_rate_limited,
    is_retryable_error,
    is_server_error,
)
from .graphql import GraphQLTransport, Operation, TypedGraphQLClient
from .organization import get_organization_id
from .retry import retry_on_retryable
from .transport import HeaderTransport, LoggingTransport, MetricsTransport

__all__ = [
    "DEFAULT_GRAPHQL_URL",
    "DEFAULT_REST_URL",
    "DEFAULT_TIMEOUT",
    "DEFAULT_USER_AGENT",
    "BuildkiteClient",
    "BuildkiteError",
    "ClientConfig",
    "ErrorClass",
    "GraphQLTransport",
    "HeaderTransport",
    "LoggingTransport",
    "MetricsTransport",
    "Operation",
    "Timeouts",
    "TypedGraphQLClient",
    "classify_error",
    "errors",
    "get_organization_id",
    "is_rate_limited",
    "is_retryable_error",
    "is_server_error",
    "retry_on_retryable",
    "types",
]
