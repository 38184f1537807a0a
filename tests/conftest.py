"""Shared fixtures: an in-memory Buildkite API served through httpx.MockTransport."""

from typing import Any

import httpx
import pytest

from buildkite_client.buildkiteapi import BuildkiteClient, ClientConfig

GRAPHQL_URL = "https://graphql.example.test/v1"
REST_URL = "https://api.example.test"
ORG_SLUG = "acme"
ORG_ID = "T3JnYW5pemF0aW9uLS0tYWNtZQ=="
API_TOKEN = "bkua_test_token"
USER_AGENT = "buildkite-api-client-tests/1.0"


class FakeBuildkite(httpx.MockTransport):
    """Mock transport answering GraphQL and REST requests with canned data.

    GraphQL requests get ``graphql_status``/``graphql_body``. REST requests
    are matched on (method, full URL); unknown routes return 404. Fresh
    responses are built for every request.
    """

    def __init__(self):
        super().__init__(self._handle)
        self.graphql_url = GRAPHQL_URL
        self.rest_url = REST_URL
        self.organization_id = ORG_ID
        self.requests: list[httpx.Request] = []
        self.graphql_status = 200
        self.graphql_body: Any = {
            "data": {"organization": {"id": ORG_ID, "uuid": "0b9c-acme"}},
        }
        self.routes: dict[tuple[str, str], dict[str, Any]] = {}
        self.closed = False

    def add_route(self, method: str, path: str, status: int = 200, **response_kwargs):
        self.routes[(method, f"{REST_URL}{path}")] = {"status_code": status, **response_kwargs}

    @property
    def rest_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url) != GRAPHQL_URL]

    @property
    def graphql_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url) == GRAPHQL_URL]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url) == GRAPHQL_URL:
            if isinstance(self.graphql_body, str):
                return httpx.Response(self.graphql_status, text=self.graphql_body)
            return httpx.Response(self.graphql_status, json=self.graphql_body)
        route = self.routes.get((request.method, str(request.url)))
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        return httpx.Response(**route)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_api() -> FakeBuildkite:
    return FakeBuildkite()


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(
        org=ORG_SLUG,
        api_token=API_TOKEN,
        graphql_url=GRAPHQL_URL,
        rest_url=REST_URL,
        user_agent=USER_AGENT,
    )


@pytest.fixture
def bk_client(config: ClientConfig, fake_api: FakeBuildkite):
    """Client constructed against the fake API (organization resolved)."""
    with BuildkiteClient(config, transport=fake_api) as client:
        yield client
