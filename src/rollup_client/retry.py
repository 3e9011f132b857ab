"""Exponential backoff for retry-safe rollup reads."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ApiError, TransportError
from .transport import RequestCall

RETRYABLE_STATUSES = frozenset({429, 502, 503, 504})


@dataclass(frozen=True, slots=True)
class BackoffRetry:
    max_attempts: int = 3
    base_delay_seconds: float = 0.25
    max_delay_seconds: float = 5.0
    retry_statuses: frozenset[int] = RETRYABLE_STATUSES

    def next_delay(self, call: RequestCall, attempt: int, error: Exception) -> float | None:
        if attempt >= self.max_attempts:
            return None
        if isinstance(error, ApiError):
            if error.details.status_code not in self.retry_statuses:
                return None
        elif not isinstance(error, TransportError):
            return None
        return min(self.max_delay_seconds, self.base_delay_seconds * 2 ** (attempt - 1))
