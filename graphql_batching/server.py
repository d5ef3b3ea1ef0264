"""FastAPI application serving the GraphQL batching gateway.

Architecture:
- FastAPI provides HTTP routing and error responses
- GraphQLBatchGateway turns each request into ordered operation results
- /health and /metrics expose liveness and Prometheus metrics
"""

import argparse
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi import HTTPException
from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from fastapi.responses import Response

from .batch import detect_content_kind
from .config import Settings
from .config import get_settings
from .exceptions import GatewayError
from .gateway import GraphQLBatchGateway
from .metrics_config import ensure_metrics_initialized
from .metrics_config import get_metrics_export
from .metrics_config import shutdown_metrics
from .models import ContentKind
from .models import GatewayRequest
from .observability import setup_logging

logger = logging.getLogger("graphql_batching.server")

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def to_gateway_request(request: Request, stage: str | None = None) -> GatewayRequest:
    """Convert a Starlette request into the gateway's request model."""
    content_type = request.headers.get("content-type")
    body = await request.body()

    form: dict[str, str] = {}
    if (
        detect_content_kind(content_type) is ContentKind.OTHER
        and content_type
        and content_type.lower().startswith(_FORM_CONTENT_TYPES)
    ):
        form_data = await request.form()
        form = {key: value for key, value in form_data.items() if isinstance(value, str)}

    return GatewayRequest(
        method=request.method,
        content_type=content_type,
        body=body,
        query_params=dict(request.query_params),
        form=form,
        headers=dict(request.headers),
        stage=stage,
    )


def create_app(settings: Settings | None = None, gateway: GraphQLBatchGateway | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Configuration, defaults to the global settings
        gateway: Preconfigured gateway, built from settings when omitted
    """
    settings = settings or get_settings()
    gateway = gateway or GraphQLBatchGateway.from_settings(settings)
    setup_logging(settings.log_level, settings.structured_logging)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        ensure_metrics_initialized(settings.enable_metrics)
        logger.info(f"Serving schema '{gateway.schema_key}' on {settings.graphql_path} (batch max {gateway.batch_max})")
        yield
        logger.info("Shutting down GraphQL batching gateway...")
        shutdown_metrics()

    app = FastAPI(
        title="GraphQL Batching Gateway",
        description="Executes single and batched GraphQL operations in one request.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.gateway = gateway
    app.state.settings = settings

    async def graphql_endpoint(request: Request, stage: str | None = None) -> Response:
        gateway_request = await to_gateway_request(request, stage)
        try:
            response = await run_in_threadpool(gateway.handle, gateway_request)
        except GatewayError as e:
            raise HTTPException(
                status_code=e.http_status,
                detail=e.user_message,
                headers=gateway.cors.cors_headers(gateway_request) or None,
            ) from e

        if response.body is None:
            return Response(status_code=response.status_code, headers=response.headers)
        return JSONResponse(response.body, status_code=response.status_code, headers=response.headers)

    methods = ["GET", "POST", "OPTIONS"]
    app.add_api_route(settings.graphql_path, graphql_endpoint, methods=methods)
    app.add_api_route(settings.graphql_path.rstrip("/") + "/{stage}", graphql_endpoint, methods=methods)

    @app.get("/health")
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "version": app.version,
            "schema_key": gateway.schema_key,
            "batch_max": gateway.batch_max,
        }

    @app.get("/metrics")
    async def metrics_endpoint():
        content, media_type = get_metrics_export()
        return Response(content=content, media_type=media_type)

    return app


def main():
    """Run the gateway with uvicorn."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description="GraphQL Batching Gateway")
    parser.add_argument("--host", default=settings.host, help=f"Host to bind to (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Auto-reload during development")
    args = parser.parse_args()

    import uvicorn

    uvicorn.run(
        "graphql_batching.server:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
