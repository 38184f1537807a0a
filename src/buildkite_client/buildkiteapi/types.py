"""Response types for the Buildkite GraphQL API.

Pydantic models for the parts of the GraphQL schema the client itself
queries. Unknown fields are ignored.
"""

from pydantic import BaseModel


class Organization(BaseModel):
    """Organization node as returned by the ``organization`` query."""

    # GraphQL node id, used as the durable identifier
    id: str = ""
    uuid: str = ""


class GetOrganizationResponse(BaseModel):
    """Data returned by the GetOrganization query."""

    organization: Organization | None = None
