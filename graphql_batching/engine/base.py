"""Abstract interfaces for the query engine collaborators.

The batch pipeline only talks to the engine through these classes: a schema
provider resolving schemas by key, a query handler executing operation text,
and a resolver extracting a single operation from non-JSON requests.
"""
from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import Any

from graphql import DocumentNode
from graphql import GraphQLSchema
from graphql import OperationDefinitionNode
from graphql import OperationType

from ..models import GatewayRequest
from ..models import RequestContext


class SchemaProvider(ABC):
    """Resolves engine schemas by key."""

    @abstractmethod
    def get_schema(self, schema_key: str) -> GraphQLSchema | None:
        """Return the already-built schema for ``schema_key``, or None."""
        pass

    @abstractmethod
    def build_by_name(self, schema_key: str, force: bool = False) -> GraphQLSchema:
        """Build the schema registered under ``schema_key``.

        Args:
            schema_key: Schema identifier
            force: Rebuild even when a built schema is cached

        Raises:
            SchemaNotFoundError: If nothing is registered under the key
            SchemaBuildError: If the schema cannot be built
        """
        pass


class QueryHandler(ABC):
    """Executes operation text against a schema.

    A handler may be shared across the operations of a batch, so callers must
    re-apply the request context before every operation.
    """

    @abstractmethod
    def query(self, schema: GraphQLSchema, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute ``query`` and return the engine's ``data``/``errors`` envelope."""
        pass

    @abstractmethod
    def get_context(self) -> dict[str, Any]:
        """Return the context the next operation will run with."""
        pass

    @abstractmethod
    def apply_context(self, context: RequestContext) -> None:
        """Replace the handler context with the request-scoped one."""
        pass

    @staticmethod
    def first_operation(document: DocumentNode) -> OperationDefinitionNode | None:
        for definition in document.definitions:
            if isinstance(definition, OperationDefinitionNode):
                return definition
        return None

    @staticmethod
    def is_mutation(document: DocumentNode) -> bool:
        """Check whether the document starts with a mutation definition."""
        operation = QueryHandler.first_operation(document)
        return operation is not None and operation.operation == OperationType.MUTATION

    @staticmethod
    def get_operation_name(document: DocumentNode) -> str | None:
        """Return the declared name of the first operation, if any."""
        operation = QueryHandler.first_operation(document)
        if operation is None or operation.name is None:
            return None
        return operation.name.value


class QueryResolver(ABC):
    """Extracts a single operation from a request that is not JSON encoded."""

    @abstractmethod
    def get_request_query_variables(self, request: GatewayRequest) -> tuple[str | None, Any]:
        """Return ``(query_text, variables)``; query_text is None when nothing resolves."""
        pass
