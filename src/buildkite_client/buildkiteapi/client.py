"""Buildkite API client.

Provides a client that authenticates every REST and GraphQL request through
a shared header-injecting transport and resolves the configured organization
when it is constructed.
"""

import json
import time
from typing import Any, TypeVar

import httpx
import pydantic
import structlog

from ..metrics import RequestMetrics
from .config import ClientConfig, Timeouts
from .errors import (
    ApiRequestError,
    NetworkError,
    RequestBuildError,
    RequestEncodingError,
    ResponseDecodeError,
    ResponseReadError,
)
from .graphql import GraphQLTransport, TypedGraphQLClient
from .organization import get_organization_id
from .transport import HeaderTransport, LoggingTransport, MetricsTransport

logger = structlog.get_logger(__name__)

T = TypeVar("T")

HTTP_NO_CONTENT = 204
HTTP_BAD_REQUEST = 400


def _encode_payload(payload: Any) -> bytes:
    """Serialize a request payload to JSON bytes.

    Raises:
        RequestEncodingError: If the payload cannot be serialized.
    """
    try:
        if isinstance(payload, pydantic.BaseModel):
            return payload.model_dump_json(by_alias=True).encode()
        return json.dumps(payload).encode()
    except (TypeError, ValueError) as exc:
        msg = f"failed to marshal request: {exc}"
        raise RequestEncodingError(msg) from exc


class BuildkiteClient:
    """Client for the Buildkite REST and GraphQL APIs.

    A single ``httpx.Client`` is shared by REST calls, the GraphQL transport
    and the typed GraphQL client. Its transport chain sets the
    ``Authorization`` and ``User-Agent`` headers on every request.

    Construction resolves the configured organization and raises if that
    fails, so an instance always holds a valid organization id. All state is
    fixed after construction, making instances safe to share between
    threads. Can be used as a context manager for automatic cleanup.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.BaseTransport | None = None,
        metrics: RequestMetrics | None = None,
    ):
        """Initialize the client and resolve the organization.

        Args:
            config: Client configuration.
            transport: Innermost transport that sends requests
                (default: httpx.HTTPTransport).
            metrics: Optional request metrics to record into.

        Raises:
            OrganizationNotFoundError: If the organization slug does not
                resolve.
            BuildkiteError: If the organization lookup fails.
        """
        inner = transport if transport is not None else httpx.HTTPTransport()
        if metrics is not None:
            inner = MetricsTransport(metrics, next=inner)
        headers = {
            "Authorization": f"Bearer {config.api_token}",
            "User-Agent": config.user_agent,
        }
        self._http = httpx.Client(
            transport=HeaderTransport(headers, next=LoggingTransport(next=inner)),
            timeout=config.request_timeout,
        )
        self._graphql = GraphQLTransport(config.graphql_url, self._http)
        self._typed_graphql = TypedGraphQLClient(self._graphql)

        try:
            organization_id = get_organization_id(config.org, self._graphql)
        except Exception:
            self._http.close()
            raise

        self._organization = config.org
        self._organization_id = organization_id
        self._rest_url = config.rest_url
        self._timeouts = config.timeouts
        logger.info(
            "Created Buildkite client",
            organization=config.org,
            graphql_url=config.graphql_url,
            rest_url=config.rest_url,
        )

    @property
    def http(self) -> httpx.Client:
        """Authenticated HTTP client shared by all requests."""
        return self._http

    @property
    def graphql(self) -> GraphQLTransport:
        return self._graphql

    @property
    def typed_graphql(self) -> TypedGraphQLClient:
        return self._typed_graphql

    @property
    def organization(self) -> str:
        return self._organization

    @property
    def organization_id(self) -> str:
        return self._organization_id

    @property
    def rest_url(self) -> str:
        return self._rest_url

    @property
    def timeouts(self) -> Timeouts:
        return self._timeouts

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and cleanup resources."""
        self.close()

    def close(self):
        """Close the HTTP client and its transports."""
        self._http.close()

    def make_request(
        self,
        method: str,
        path: str,
        payload: Any = None,
        response_type: type[T] | None = None,
        *,
        timeout: Any = httpx.USE_CLIENT_DEFAULT,
    ) -> T | Any | None:
        """Make a request to the Buildkite REST API.

        The URL is the configured REST base URL followed by ``path``, joined
        literally: ``path`` must match the base URL's trailing slash
        convention.

        Args:
            method: HTTP method.
            path: Path appended to the REST base URL.
            payload: Optional JSON-serializable body or pydantic model.
            response_type: Type to decode the response body into. Plain JSON
                is returned when omitted.
            timeout: Timeout for this request (default: client timeout).

        Returns:
            The decoded response body, or None for 204 No Content.

        Raises:
            RequestEncodingError: If the payload cannot be serialized.
            RequestBuildError: If the request cannot be constructed.
            NetworkError: If the request cannot be sent or times out.
            ApiRequestError: If the API answers with status >= 400.
            ResponseReadError: If the response body cannot be read.
            ResponseDecodeError: If the response body cannot be decoded.
        """
        content = _encode_payload(payload) if payload is not None else None
        headers = {"Content-Type": "application/json"} if content is not None else None
        url = f"{self._rest_url}{path}"

        try:
            request = self._http.build_request(
                method,
                url,
                content=content,
                headers=headers,
                timeout=timeout,
            )
        except httpx.InvalidURL as exc:
            msg = f"failed to create request: {exc}"
            raise RequestBuildError(msg) from exc

        start_time = time.time()
        try:
            response = self._http.send(request, stream=True)
        except httpx.HTTPError as exc:
            logger.exception(
                "API request failed",
                method=method,
                url=url,
                duration_seconds=round(time.time() - start_time, 3),
            )
            msg = f"failed to send request: {exc}"
            raise NetworkError(msg) from exc

        try:
            if response.status_code >= HTTP_BAD_REQUEST:
                logger.error(
                    "API request returned error status",
                    method=method,
                    url=url,
                    status=response.status_code,
                )
                raise ApiRequestError(method, url, response.status_code)
            if response.status_code == HTTP_NO_CONTENT:
                return None

            try:
                body = response.read()
            except httpx.HTTPError as exc:
                msg = f"failed to read response: {exc}"
                raise ResponseReadError(msg) from exc
        finally:
            response.close()

        return self._decode(body, response_type)

    @staticmethod
    def _decode(body: bytes, response_type: type[T] | None) -> T | Any:
        try:
            if response_type is None:
                return json.loads(body)
            return pydantic.TypeAdapter(response_type).validate_json(body)
        except (ValueError, pydantic.ValidationError) as exc:
            msg = f"failed to unmarshal response: {exc}"
            raise ResponseDecodeError(msg) from exc
