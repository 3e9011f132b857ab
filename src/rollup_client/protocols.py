"""Protocol contracts for rollup client extension points."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .transport import RequestCall


@runtime_checkable
class SyncRequestExecutor(Protocol):
    def request(self, call: RequestCall) -> Any: ...


@runtime_checkable
class AsyncRequestExecutor(Protocol):
    async def request(self, call: RequestCall) -> Any: ...


@runtime_checkable
class RetryPolicy(Protocol):
    """Decides whether a failed call is attempted again.

    The client only consults the policy for calls whose endpoint is retry-safe
    and for transport or API errors. ``attempt`` counts from 1.
    """

    def next_delay(self, call: RequestCall, attempt: int, error: Exception) -> float | None:
        """Return seconds to wait before the next attempt, or ``None`` to give up."""
        ...
