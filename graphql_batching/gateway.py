"""HTTP-neutral GraphQL batching gateway.

The gateway owns the configuration of one endpoint (schema key, query handler,
batch ceiling) and turns a ``GatewayRequest`` into a ``GatewayResponse``.
Request-level failures are raised as ``GatewayError``; the web layer maps them
to HTTP error responses.
"""

from __future__ import annotations

from .batch import BatchCoordinator
from .batch import BatchGuard
from .batch import OperationExecutor
from .batch import RequestParser
from .batch.guard import DEFAULT_BATCH_MAX
from .config import Settings
from .cors import CorsPolicy
from .engine import GraphQLQueryHandler
from .engine import PersistedQueryResolver
from .engine import SchemaRegistry
from .engine.base import QueryHandler
from .engine.base import QueryResolver
from .engine.base import SchemaProvider
from .events import EventDispatcher
from .exceptions import ConfigurationError
from .logger_config import log_gateway_call
from .models import GatewayRequest
from .models import GatewayResponse


class GraphQLBatchGateway:
    """Serves single and batched GraphQL operations for one schema."""

    def __init__(
        self,
        schema_key: str | None = None,
        query_handler: QueryHandler | None = None,
        batch_max: int | None = None,
        schema_provider: SchemaProvider | None = None,
        query_resolver: QueryResolver | None = None,
        dispatcher: EventDispatcher | None = None,
        cors: CorsPolicy | None = None,
        debug: bool = False,
        autobuild: bool = True,
    ):
        self.schema_key = schema_key
        self.query_handler = query_handler or GraphQLQueryHandler()
        self.schema_provider = schema_provider or SchemaRegistry()
        self.query_resolver = query_resolver or PersistedQueryResolver()
        self.dispatcher = dispatcher or EventDispatcher()
        self.cors = cors or CorsPolicy()
        self.debug = debug
        self.autobuild = autobuild
        self._guard = BatchGuard(DEFAULT_BATCH_MAX if batch_max is None else batch_max)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        schema_provider: SchemaProvider | None = None,
        query_handler: QueryHandler | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> "GraphQLBatchGateway":
        """Build a gateway from settings, loading SDL and persisted queries if configured."""
        if schema_provider is None:
            schema_provider = SchemaRegistry()
            if settings.schema_sdl_file is not None:
                schema_provider.register_sdl_file(settings.schema_key, settings.schema_sdl_file)

        query_resolver = (
            PersistedQueryResolver.from_file(settings.persisted_queries_file)
            if settings.persisted_queries_file is not None
            else PersistedQueryResolver()
        )

        return cls(
            schema_key=settings.schema_key,
            query_handler=query_handler,
            batch_max=settings.batch_max,
            schema_provider=schema_provider,
            query_resolver=query_resolver,
            dispatcher=dispatcher,
            cors=CorsPolicy.from_settings(settings),
            debug=settings.debug,
            autobuild=settings.autobuild,
        )

    @property
    def batch_max(self) -> int:
        return self._guard.limit

    def build_coordinator(self) -> BatchCoordinator:
        """Assemble the pipeline for one request from the current configuration."""
        executor = OperationExecutor(
            query_handler=self.query_handler,
            dispatcher=self.dispatcher,
            schema_key=self.schema_key,
            debug=self.debug,
        )
        return BatchCoordinator(
            parser=RequestParser(self.query_resolver),
            guard=self._guard,
            executor=executor,
            schema_provider=self.schema_provider,
            schema_key=self.schema_key,
            autobuild=self.autobuild,
        )

    @log_gateway_call
    def handle(self, request: GatewayRequest) -> GatewayResponse:
        if not self.schema_key:
            raise ConfigurationError("Cannot query the controller without a schema key defined")

        # CORS preflight requests never reach the pipeline
        if request.method.upper() == "OPTIONS":
            return self.cors.handle_options(request)

        batch_response = self.build_coordinator().handle(request)
        response = GatewayResponse(
            status_code=200,
            headers={"Content-Type": "application/json"},
            body=batch_response.payload,
        )
        return self.cors.add_cors_headers(request, response)
