"""graphql-core backed query handler."""

from __future__ import annotations

import threading
from typing import Any

from graphql import GraphQLSchema
from graphql import graphql_sync

from ..models import RequestContext
from .base import QueryHandler


class GraphQLQueryHandler(QueryHandler):
    """Runs operations synchronously with ``graphql_sync``.

    The handler context is handed to resolvers as ``info.context``; its
    ``stage`` entry carries the active versioning stage. Context is kept per
    thread so one handler can serve concurrent requests.
    """

    def __init__(self, root_value: Any = None, base_context: dict[str, Any] | None = None) -> None:
        self.root_value = root_value
        self._base_context = dict(base_context or {})
        self._local = threading.local()

    def apply_context(self, context: RequestContext) -> None:
        self._local.context = {**self._base_context, **context.as_dict()}

    def get_context(self) -> dict[str, Any]:
        return dict(getattr(self._local, "context", self._base_context))

    def query(self, schema: GraphQLSchema, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        result = graphql_sync(
            schema,
            query,
            root_value=self.root_value,
            context_value=self.get_context(),
            variable_values=variables or None,
        )
        return result.formatted
