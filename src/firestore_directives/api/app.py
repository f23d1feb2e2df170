"""
FastAPI transport serving a directive-driven schema
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from graphql import ExecutionResult, GraphQLError, GraphQLSchema, graphql
from pydantic import BaseModel

from .. import __version__
from ..config import Settings
from ..exceptions import DirectiveError
from ..logging import get_logger
from ..store.base import DocumentStore, StoreProvider
from .middleware import LoggingContextMiddleware

logger = get_logger(__name__)


class GraphQLRequest(BaseModel):
    """Standard GraphQL-over-HTTP request body."""

    query: str
    variables: dict[str, Any] | None = None
    operationName: str | None = None


def format_error(error: GraphQLError) -> dict[str, Any]:
    """Formatted GraphQL error with the directive error code in extensions."""
    formatted = dict(error.formatted)
    original = error.original_error
    if isinstance(original, DirectiveError):
        extensions = dict(formatted.get("extensions") or {})
        extensions["code"] = original.code
        formatted["extensions"] = extensions
    return formatted


def format_result(result: ExecutionResult) -> dict[str, Any]:
    payload: dict[str, Any] = {"data": result.data}
    if result.errors:
        payload["errors"] = [format_error(error) for error in result.errors]
    return payload


def create_app(
    schema: GraphQLSchema,
    store: DocumentStore,
    settings: Settings | None = None,
) -> FastAPI:
    """Create a FastAPI application exposing ``schema`` at ``/graphql``.

    Every request context carries a provider entry, named after
    ``settings.provider_name``, whose ``app`` is ``store``.
    """
    if settings is None:
        from ..config import settings as default_settings

        settings = default_settings

    provider = StoreProvider(name=settings.provider_name, app=store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting firestore-directives API", provider=provider.name)
        yield
        logger.info("Shutting down firestore-directives API")

    app = FastAPI(
        title="firestore-directives",
        description="GraphQL fields resolved from a document store via schema directives",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.add_middleware(LoggingContextMiddleware)

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    @app.post("/graphql")
    async def graphql_endpoint(  # pyright: ignore [reportUnusedFunction]
        body: GraphQLRequest, request: Request
    ) -> dict[str, Any]:
        """Execute a GraphQL operation against the store."""
        result = await graphql(
            schema,
            body.query,
            variable_values=body.variables,
            operation_name=body.operationName,
            context_value={"request": request, "providers": [provider]},
        )
        return format_result(result)

    return app
