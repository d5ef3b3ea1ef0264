"""Execution of a single operation.

The executor never raises: anything thrown while parsing or executing an
operation is turned into an ``OperationFailure`` so that sibling operations in
the same batch still run.
"""

import traceback
from typing import Any

from graphql import Source
from graphql import parse

from ..engine.base import QueryHandler
from ..events import GRAPHQL_MUTATION
from ..events import GRAPHQL_QUERY
from ..events import EventDispatcher
from ..events import OperationEvent
from ..exceptions import MissingQueryError
from ..logger_config import ErrorCategory
from ..logger_config import log_structured_error
from ..metrics_config import record_operation
from ..models import ErrorDetail
from ..models import Operation
from ..models import OperationFailure
from ..models import OperationResult
from ..models import OperationSuccess
from ..models import RequestContext
from ..observability import trace_operation


def build_error_detail(exception: BaseException, debug: bool = False) -> ErrorDetail:
    """Describe an exception; location and trace are only included in debug mode."""
    message = getattr(exception, "message", None)
    detail = ErrorDetail(message=message if isinstance(message, str) else str(exception))
    if not debug:
        return detail

    frames = traceback.extract_tb(exception.__traceback__)
    detail.code = getattr(exception, "error_code", None) or type(exception).__name__
    if frames:
        detail.file = frames[-1].filename
        detail.line = frames[-1].lineno
    detail.trace = [
        {"file": frame.filename, "line": frame.lineno, "function": frame.name} for frame in frames
    ]
    return detail


class OperationExecutor:
    """Runs operations against the query handler and publishes their events."""

    def __init__(
        self,
        query_handler: QueryHandler,
        dispatcher: EventDispatcher,
        schema_key: str,
        debug: bool = False,
    ):
        self.query_handler = query_handler
        self.dispatcher = dispatcher
        self.schema_key = schema_key
        self.debug = debug

    def execute(self, operation: Operation, schema: Any, context: RequestContext) -> OperationResult:
        try:
            with trace_operation("operation", schema_key=self.schema_key):
                if not operation.text:
                    raise MissingQueryError("Operation is missing a query")

                handler = self.query_handler
                handler.apply_context(context)
                document = parse(Source(operation.text))
                handler_context = handler.get_context()
                result = handler.query(schema, operation.text, operation.variables)
                is_mutation = handler.is_mutation(document)
                event = OperationEvent(
                    name=handler.get_operation_name(document),
                    schema_key=self.schema_key,
                    query=operation.text,
                    context=handler_context,
                    variables=operation.variables,
                    result=result,
                    graphql_schema=schema,
                )
                success = OperationSuccess(payload=result)
        except Exception as exc:
            log_structured_error(
                category=ErrorCategory.ERROR,
                message=f"Operation failed: {exc}",
                exception=exc,
                operation="execute_operation",
                schema_key=self.schema_key,
            )
            record_operation("unknown", "error")
            return OperationFailure(errors=[build_error_detail(exc, self.debug)])

        self.dispatcher.trigger(GRAPHQL_MUTATION if is_mutation else GRAPHQL_QUERY, event)
        record_operation("mutation" if is_mutation else "query", "success")
        return success
