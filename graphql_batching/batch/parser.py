"""Extraction of operations from raw requests.

JSON requests may carry a single operation object or an array of them;
any other content type carries exactly one operation, resolved by the
query resolver. Malformed input yields an empty batch rather than an error so
the caller can report the missing query uniformly.
"""

import json
import re
from typing import Any

from ..engine.base import QueryResolver
from ..models import ContentKind
from ..models import GatewayRequest
from ..models import Operation
from ..models import OperationBatch

_JSON_CONTENT_TYPE = re.compile(r"^application/json\b", re.IGNORECASE)


def detect_content_kind(content_type: str | None) -> ContentKind:
    """Classify a Content-Type header value."""
    if content_type and _JSON_CONTENT_TYPE.match(content_type.strip()):
        return ContentKind.JSON
    return ContentKind.OTHER


def _coerce_variables(variables: Any) -> dict[str, Any]:
    return variables if isinstance(variables, dict) else {}


def _to_operation(data: Any) -> Operation:
    if not isinstance(data, dict):
        return Operation()
    query = data.get("query")
    return Operation(
        text=query if isinstance(query, str) else None,
        variables=_coerce_variables(data.get("variables")),
    )


class RequestParser:
    """Turns a request into an ordered batch of operations."""

    def __init__(self, query_resolver: QueryResolver):
        self.query_resolver = query_resolver

    def parse(self, request: GatewayRequest) -> OperationBatch:
        if detect_content_kind(request.content_type) is ContentKind.JSON:
            return self.parse_json(request.body)
        return self.parse_other(request)

    def parse_other(self, request: GatewayRequest) -> OperationBatch:
        query, variables = self.query_resolver.get_request_query_variables(request)
        if not query:
            return []
        return [Operation(text=query, variables=_coerce_variables(variables))]

    def parse_json(self, body: bytes | str | None) -> OperationBatch:
        try:
            data = json.loads(body or "")
        except (ValueError, TypeError, RecursionError):
            return []

        # An object is a single operation
        if isinstance(data, dict):
            return [_to_operation(data)]

        # A list is a batch, kept in submission order
        if isinstance(data, list):
            return [_to_operation(item) for item in data]

        return []
