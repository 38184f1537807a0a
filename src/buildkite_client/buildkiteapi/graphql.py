"""GraphQL transport and typed operation client for the Buildkite API.

:class:`GraphQLTransport` posts query documents over the shared, already
authenticated ``httpx.Client``. :class:`TypedGraphQLClient` runs
:class:`Operation` values on top of it and validates the result into the
operation's pydantic response model.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import httpx
import pydantic
import structlog

from .errors import (
    GraphQLHTTPError,
    GraphQLResponseError,
    NetworkError,
    ResponseDecodeError,
)

logger = structlog.get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=pydantic.BaseModel)

HTTP_OK = 200


@dataclass(frozen=True)
class Operation(Generic[ResponseT]):
    """A named GraphQL document with its variables and response model."""

    name: str
    document: str
    response_model: type[ResponseT]
    variables: dict[str, Any] = field(default_factory=dict)


class GraphQLTransport:
    """Executes GraphQL documents against a single endpoint."""

    def __init__(self, url: str, http: httpx.Client):
        """Initialize the transport.

        Args:
            url: GraphQL endpoint URL.
            http: HTTP client used to send requests. Authentication headers
                are expected to be applied by its transport.
        """
        self.url = url
        self._http = http

    def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> dict[str, Any]:
        """Execute a GraphQL document and return its ``data`` object.

        Args:
            query: GraphQL query or mutation document.
            variables: Variables for the document.
            operation_name: Name of the operation to run.

        Returns:
            The ``data`` object of the response, or an empty dict if null.

        Raises:
            NetworkError: If the request cannot be sent.
            GraphQLHTTPError: If the endpoint answers with a non-200 status.
            ResponseDecodeError: If the response is not a JSON object.
            GraphQLResponseError: If the response contains errors.
        """
        payload: dict[str, Any] = {"query": query, "variables": variables or {}}
        if operation_name:
            payload["operationName"] = operation_name

        try:
            response = self._http.post(self.url, json=payload)
        except httpx.HTTPError as exc:
            logger.exception(
                "GraphQL request failed",
                url=self.url,
                operation=operation_name,
            )
            msg = f"failed to send GraphQL request: {exc}"
            raise NetworkError(msg) from exc

        if response.status_code != HTTP_OK:
            logger.error(
                "GraphQL request returned error status",
                url=self.url,
                operation=operation_name,
                status=response.status_code,
            )
            raise GraphQLHTTPError(response.status_code, response.text)

        try:
            body = response.json()
        except ValueError as exc:
            msg = f"failed to decode GraphQL response: {exc}"
            raise ResponseDecodeError(msg) from exc
        if not isinstance(body, dict):
            msg = "GraphQL response was not a JSON object"
            raise ResponseDecodeError(msg)

        if errors := body.get("errors"):
            error = GraphQLResponseError(errors if isinstance(errors, list) else [errors])
            for message in error.messages:
                logger.error(
                    "GraphQL error response",
                    operation=operation_name,
                    error_message=message,
                )
            raise error

        return body.get("data") or {}


class TypedGraphQLClient:
    """Runs :class:`Operation` values and validates their responses."""

    def __init__(self, transport: GraphQLTransport):
        self.transport = transport

    def execute(self, operation: Operation[ResponseT]) -> ResponseT:
        """Execute an operation and validate its data.

        Raises:
            ResponseDecodeError: If the data does not match the operation's
                response model.
            BuildkiteError: Any error raised by the transport.
        """
        data = self.transport.execute(
            operation.document,
            operation.variables,
            operation_name=operation.name,
        )
        try:
            return operation.response_model.model_validate(data)
        except pydantic.ValidationError as exc:
            msg = f"failed to decode {operation.name} response: {exc}"
            raise ResponseDecodeError(msg) from exc
