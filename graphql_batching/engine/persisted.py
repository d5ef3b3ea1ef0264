"""Resolution of operations sent as form fields, query parameters or persisted ids."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..models import GatewayRequest
from .base import QueryResolver


class PersistedQueryResolver(QueryResolver):
    """Resolve the operation of a non-JSON request.

    An ``id`` parameter selects a registered persisted query; without one the
    raw ``query`` parameter is used. ``variables`` may be sent JSON encoded.
    """

    def __init__(self, queries: Mapping[str, str] | None = None) -> None:
        self._queries = dict(queries or {})

    @classmethod
    def from_file(cls, path: str | Path) -> "PersistedQueryResolver":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Persisted query file {path} must contain a JSON object")
        return cls({str(key): value for key, value in data.items() if isinstance(value, str)})

    def register(self, query_id: str, query: str) -> None:
        self._queries[query_id] = query

    def get_query_from_persisted_id(self, query_id: str) -> str | None:
        return self._queries.get(query_id)

    def get_request_query_variables(self, request: GatewayRequest) -> tuple[str | None, Any]:
        query_id = request.param("id")
        if query_id:
            query = self.get_query_from_persisted_id(query_id)
        else:
            query = request.param("query")

        variables = request.param("variables")
        if isinstance(variables, str):
            try:
                variables = json.loads(variables) if variables.strip() else {}
            except json.JSONDecodeError:
                variables = {}

        return query or None, variables
