"""Batch orchestration.

Parses a request into operations, enforces the batch ceiling, resolves the
schema once, and executes every operation in submission order.
"""

import time

from graphql import GraphQLSchema

from ..engine.base import SchemaProvider
from ..exceptions import GatewayError
from ..exceptions import SchemaBuildError
from ..metrics_config import record_batch
from ..models import BatchResponse
from ..models import GatewayRequest
from ..observability import get_logger
from .executor import OperationExecutor
from .guard import BatchGuard
from .parser import RequestParser


class BatchCoordinator:
    """Sequential executor for the operations of one request."""

    def __init__(
        self,
        parser: RequestParser,
        guard: BatchGuard,
        executor: OperationExecutor,
        schema_provider: SchemaProvider,
        schema_key: str,
        autobuild: bool = True,
    ):
        self.parser = parser
        self.guard = guard
        self.executor = executor
        self.schema_provider = schema_provider
        self.schema_key = schema_key
        self.autobuild = autobuild
        self._logger = get_logger()

    def handle(self, request: GatewayRequest) -> BatchResponse:
        """Execute the operations carried by ``request``.

        Raises:
            MissingQueryError: If the request carries no operation
            BatchLimitExceededError: If it carries more than the ceiling
            SchemaBuildError: If the schema cannot be resolved
        """
        start_time = time.time()
        batch = self.parser.parse(request)

        try:
            self.guard.check(len(batch))
            schema = self.resolve_schema()
        except GatewayError:
            record_batch(len(batch), "rejected")
            raise

        context = request.to_context()
        results = [self.executor.execute(operation, schema, context) for operation in batch]

        failed = sum(1 for result in results if not result.succeeded)
        self._logger.info(
            f"Executed {len(results) - failed}/{len(results)} operations successfully "
            f"({(time.time() - start_time) * 1000:.1f}ms)"
        )
        record_batch(len(results), "completed")

        # A single operation is answered with a bare object, never a one-element list
        if len(results) == 1:
            payload = results[0].to_payload()
        else:
            payload = [result.to_payload() for result in results]
        return BatchResponse(payload=payload, operation_count=len(results))

    def resolve_schema(self) -> GraphQLSchema:
        schema = self.schema_provider.get_schema(self.schema_key)
        if schema is None and self.autobuild:
            schema = self.schema_provider.build_by_name(self.schema_key, force=True)
        elif schema is None:
            raise SchemaBuildError(f"Schema {self.schema_key} has not been built.", schema_key=self.schema_key)
        return schema
