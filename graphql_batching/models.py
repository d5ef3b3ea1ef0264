"""Pydantic models for the GraphQL batching gateway.

This module contains the request-scoped data structures that flow through the
batch pipeline: parsed operations, per-operation results, the request context
re-applied to the query handler, and the framework-neutral request/response
envelopes used by the gateway.
"""

import json
from enum import Enum
from typing import Annotated
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

# === Operation Models ===


class Operation(BaseModel):
    """A single query or mutation submitted by the client."""

    model_config = ConfigDict(frozen=True)

    text: str | None = Field(default=None, description="Operation text, None when the client sent none")
    variables: dict[str, Any] = Field(default_factory=dict, description="Variables for the operation")


OperationBatch = list[Operation]


class ContentKind(str, Enum):
    """How the request body should be interpreted."""

    JSON = "json"
    OTHER = "other"


# === Result Models ===


class ErrorDetail(BaseModel):
    """One structured error reported for a failed operation.

    Only ``message`` is populated outside debug mode.
    """

    message: str
    code: str | int | None = None
    file: str | None = None
    line: int | None = None
    trace: list[dict[str, Any]] | None = None


class OperationSuccess(BaseModel):
    """Engine result for an operation that executed without raising."""

    kind: Literal["success"] = "success"
    payload: dict[str, Any]

    @property
    def succeeded(self) -> bool:
        return True

    def to_payload(self) -> dict[str, Any]:
        return self.payload


class OperationFailure(BaseModel):
    """Errors captured while parsing or executing an operation."""

    kind: Literal["failure"] = "failure"
    errors: list[ErrorDetail]

    @property
    def succeeded(self) -> bool:
        return False

    def to_payload(self) -> dict[str, Any]:
        return {"errors": [error.model_dump(exclude_none=True) for error in self.errors]}


OperationResult = Annotated[OperationSuccess | OperationFailure, Field(discriminator="kind")]


# === Request Models ===


class RequestContext(BaseModel):
    """Request-scoped context applied to the query handler before each operation."""

    model_config = ConfigDict(frozen=True)

    stage: str | None = None
    values: dict[str, Any] = Field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        context = dict(self.values)
        if self.stage:
            context["stage"] = self.stage
        return context


class GatewayRequest(BaseModel):
    """Framework-neutral view of an incoming HTTP request."""

    method: str = "POST"
    content_type: str | None = None
    body: bytes = b""
    query_params: dict[str, str] = Field(default_factory=dict)
    form: dict[str, str] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)
    stage: str | None = None

    def header(self, name: str, default: str | None = None) -> str | None:
        """Look up a header case-insensitively."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return default

    def param(self, name: str) -> str | None:
        """Look up a request parameter, form fields taking precedence."""
        if name in self.form:
            return self.form[name]
        return self.query_params.get(name)

    def to_context(self) -> RequestContext:
        return RequestContext(stage=self.stage or self.query_params.get("stage"))


class GatewayResponse(BaseModel):
    """Framework-neutral HTTP response produced by the gateway."""

    status_code: int = 200
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None


class BatchResponse(BaseModel):
    """Aggregated results for one request.

    ``payload`` is a bare result object when exactly one operation was
    submitted and an ordered list of result objects otherwise.
    """

    payload: dict[str, Any] | list[dict[str, Any]]
    operation_count: int

    @property
    def is_batch(self) -> bool:
        return isinstance(self.payload, list)

    def to_json(self) -> str:
        return json.dumps(self.payload, default=str)
