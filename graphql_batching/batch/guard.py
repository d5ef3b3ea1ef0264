"""Batch size policy."""

from ..exceptions import BatchLimitExceededError
from ..exceptions import ConfigurationError
from ..exceptions import MissingQueryError

DEFAULT_BATCH_MAX = 10


class BatchGuard:
    """Rejects empty and oversized batches before anything executes."""

    def __init__(self, limit: int = DEFAULT_BATCH_MAX):
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ConfigurationError(f"Batch limit must be a positive integer, got {limit!r}")
        self._limit = limit

    @property
    def limit(self) -> int:
        return self._limit

    def check(self, size: int) -> None:
        if size == 0:
            raise MissingQueryError()
        if size > self._limit:
            raise BatchLimitExceededError(size=size, limit=self._limit)
