"""Query engine collaborators consumed by the batch pipeline."""

from .base import QueryHandler
from .base import QueryResolver
from .base import SchemaProvider
from .persisted import PersistedQueryResolver
from .query_handler import GraphQLQueryHandler
from .schema import SchemaRegistry

__all__ = [
    # Interfaces
    "QueryHandler",
    "QueryResolver",
    "SchemaProvider",
    # graphql-core implementations
    "GraphQLQueryHandler",
    "PersistedQueryResolver",
    "SchemaRegistry",
]
