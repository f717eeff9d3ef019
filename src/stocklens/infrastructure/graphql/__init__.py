"""GraphQL transport for the inventory backend."""

from stocklens.infrastructure.graphql.client import GraphQLPageSource

__all__ = ["GraphQLPageSource"]
