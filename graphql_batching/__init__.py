"""GraphQL batching gateway.

Accepts a single GraphQL operation or an array of operations per HTTP request,
executes them in order and answers with a bare result or an ordered list of
results.
"""

from .batch import BatchCoordinator
from .batch import BatchGuard
from .batch import OperationExecutor
from .batch import RequestParser
from .events import GRAPHQL_MUTATION
from .events import GRAPHQL_QUERY
from .events import EventDispatcher
from .events import OperationEvent
from .gateway import GraphQLBatchGateway
from .models import GatewayRequest
from .models import GatewayResponse
from .models import Operation
from .models import OperationFailure
from .models import OperationSuccess

__all__ = [
    "BatchCoordinator",
    "BatchGuard",
    "EventDispatcher",
    "GRAPHQL_MUTATION",
    "GRAPHQL_QUERY",
    "GatewayRequest",
    "GatewayResponse",
    "GraphQLBatchGateway",
    "Operation",
    "OperationEvent",
    "OperationExecutor",
    "OperationFailure",
    "OperationSuccess",
    "RequestParser",
]

__version__ = "0.1.0"
