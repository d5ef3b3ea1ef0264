"""Batch processing for GraphQL requests.

This module turns one HTTP request into an ordered list of operations and
executes them one at a time.

Key Components:
- RequestParser: Extracts operations from JSON bodies or resolved parameters
- BatchGuard: Rejects empty and oversized batches
- OperationExecutor: Runs one operation, capturing failures as data
- BatchCoordinator: Ties the above together and aggregates results

The system focuses on:
- Sequential execution in submission order
- Per-operation error isolation
- A bare result for one operation, a list for several
"""

from .coordinator import BatchCoordinator
from .executor import OperationExecutor
from .executor import build_error_detail
from .guard import DEFAULT_BATCH_MAX
from .guard import BatchGuard
from .parser import RequestParser
from .parser import detect_content_kind

__all__ = [
    # Core Components
    "BatchCoordinator",
    "BatchGuard",
    "OperationExecutor",
    "RequestParser",
    # Utilities
    "DEFAULT_BATCH_MAX",
    "build_error_detail",
    "detect_content_kind",
]
