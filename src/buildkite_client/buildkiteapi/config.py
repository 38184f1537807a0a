"""Configuration values consumed by the Buildkite API client.

Pydantic models describing how to reach and authenticate against the
Buildkite API. Values are frozen: they are built once by a loader and never
mutated after the client has been constructed.
"""

import pydantic

from .. import __version__

DEFAULT_GRAPHQL_URL = "https://graphql.buildkite.com/v1"

DEFAULT_REST_URL = "https://api.buildkite.com"

DEFAULT_USER_AGENT = f"buildkite-api-client/{__version__}"

DEFAULT_TIMEOUT = 30.0


class Timeouts(pydantic.BaseModel):
    """Per-operation timeouts in seconds.

    Stored on the client for callers that bound their own retry loops. The
    client itself never reads them.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    create: float | None = pydantic.Field(None, gt=0)
    read: float | None = pydantic.Field(None, gt=0)
    update: float | None = pydantic.Field(None, gt=0)
    delete: float | None = pydantic.Field(None, gt=0)

    def resolve(self, operation: str, default: float) -> float:
        """Return the timeout configured for an operation, or the default.

        Args:
            operation: One of "create", "read", "update" or "delete".
            default: Value returned when the operation has no timeout set.

        Raises:
            ValueError: If the operation name is unknown.
        """
        if operation not in ("create", "read", "update", "delete"):
            msg = f"Unknown operation: {operation}"
            raise ValueError(msg)
        value = getattr(self, operation)
        return default if value is None else value


class ClientConfig(pydantic.BaseModel):
    """Settings for a single Buildkite API client."""

    model_config = pydantic.ConfigDict(frozen=True)

    org: str = pydantic.Field(min_length=1, description="Organization slug")
    api_token: str = pydantic.Field(
        min_length=1,
        repr=False,
        description="API access token sent as a bearer credential",
    )
    graphql_url: str = pydantic.Field(
        DEFAULT_GRAPHQL_URL,
        description="GraphQL endpoint URL",
    )
    rest_url: str = pydantic.Field(
        DEFAULT_REST_URL,
        description="REST base URL, used as a literal prefix",
    )
    user_agent: str = pydantic.Field(
        DEFAULT_USER_AGENT,
        description="User-Agent header value",
    )
    timeouts: Timeouts = pydantic.Field(default_factory=Timeouts)
    request_timeout: float = pydantic.Field(
        DEFAULT_TIMEOUT,
        description="HTTP request timeout in seconds",
        gt=0,
    )
