"""In-memory schema registry backed by graphql-core."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from graphql import GraphQLError
from graphql import GraphQLSchema
from graphql import build_schema

from ..exceptions import SchemaBuildError
from ..exceptions import SchemaNotFoundError
from ..observability import get_logger
from .base import SchemaProvider

SchemaBuilder = Callable[[], GraphQLSchema]


class SchemaRegistry(SchemaProvider):
    """Keeps schema builders by key and caches what they build."""

    def __init__(self) -> None:
        self._builders: dict[str, SchemaBuilder] = {}
        self._schemas: dict[str, GraphQLSchema] = {}

    def register(self, schema_key: str, builder: SchemaBuilder) -> None:
        """Register a builder; any schema cached under the key is discarded."""
        self._builders[schema_key] = builder
        self._schemas.pop(schema_key, None)

    def register_schema(self, schema_key: str, schema: GraphQLSchema) -> None:
        """Register an already-built schema."""
        self.register(schema_key, lambda: schema)
        self._schemas[schema_key] = schema

    def register_sdl(self, schema_key: str, sdl: str) -> None:
        """Register a schema described in SDL, built lazily."""
        self.register(schema_key, lambda: build_schema(sdl))

    def register_sdl_file(self, schema_key: str, path: str | Path) -> None:
        self.register_sdl(schema_key, Path(path).read_text(encoding="utf-8"))

    def has_builder(self, schema_key: str) -> bool:
        return schema_key in self._builders

    def get_schema(self, schema_key: str) -> GraphQLSchema | None:
        return self._schemas.get(schema_key)

    def build_by_name(self, schema_key: str, force: bool = False) -> GraphQLSchema:
        if not force and schema_key in self._schemas:
            return self._schemas[schema_key]

        builder = self._builders.get(schema_key)
        if builder is None:
            raise SchemaNotFoundError(f"Schema {schema_key} not found.", schema_key=schema_key)

        try:
            schema = builder()
        except (GraphQLError, TypeError) as e:
            raise SchemaBuildError(f"Schema {schema_key} could not be built: {e}", schema_key=schema_key) from e

        if not isinstance(schema, GraphQLSchema):
            raise SchemaBuildError(f"Schema {schema_key} builder returned no schema.", schema_key=schema_key)

        get_logger().info(f"Built schema {schema_key}")
        self._schemas[schema_key] = schema
        return schema
