"""Organization slug resolution."""

import structlog

from .errors import OrganizationNotFoundError
from .graphql import GraphQLTransport, Operation, TypedGraphQLClient
from .types import GetOrganizationResponse

logger = structlog.get_logger(__name__)

GET_ORGANIZATION_QUERY = """
query GetOrganization($slug: ID!) {
  organization(slug: $slug) {
    id
    uuid
  }
}
"""


def get_organization(slug: str) -> Operation[GetOrganizationResponse]:
    return Operation(
        name="GetOrganization",
        document=GET_ORGANIZATION_QUERY,
        response_model=GetOrganizationResponse,
        variables={"slug": slug},
    )


def get_organization_id(slug: str, graphql: GraphQLTransport) -> str:
    """Resolve an organization slug to its GraphQL node id.

    Args:
        slug: Organization slug.
        graphql: Authenticated GraphQL transport.

    Returns:
        The organization's durable identifier.

    Raises:
        OrganizationNotFoundError: If no organization with this slug is
            visible to the token.
        BuildkiteError: If the lookup itself fails.
    """
    response = TypedGraphQLClient(graphql).execute(get_organization(slug))
    if response.organization is None or not response.organization.id:
        raise OrganizationNotFoundError(slug)

    logger.info("Resolved organization", slug=slug, organization_id=response.organization.id)
    return response.organization.id
