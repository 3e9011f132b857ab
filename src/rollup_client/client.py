"""Top-level rollup clients (sync + async)."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, ClassVar, Iterable, TypeVar

import httpx

from .api import RawApi, RollupApi
from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS, ClientConfig
from .errors import ApiError, TransportError
from .hooks import HookRegistry
from .protocols import AsyncRequestExecutor, RetryPolicy, SyncRequestExecutor
from .request_parameters import RequestParameters
from .transport import AsyncTransport, RequestCall, SyncTransport

logger = logging.getLogger(__name__)

C = TypeVar("C", bound="_BaseClient")
F = TypeVar("F", bound=Callable[..., Any])


class _BaseClient:
    _http_client_type: ClassVar[type[httpx.Client] | type[httpx.AsyncClient]]
    _transport_type: ClassVar[type[SyncTransport] | type[AsyncTransport]]

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        path_prefix: str = "",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        headers: dict[str, str] | None = None,
        http_client: httpx.Client | httpx.AsyncClient | None = None,
        request_executor: SyncRequestExecutor | AsyncRequestExecutor | None = None,
        retry_policy: RetryPolicy | None = None,
        hook_registry: HookRegistry | None = None,
    ) -> None:
        self.client_config = config = ClientConfig(
            base_url=base_url,
            path_prefix=path_prefix,
            timeout_seconds=timeout_seconds,
            headers=dict(headers or {}),
        )
        self._client = http_client or self._http_client_type(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            headers=config.headers,
        )
        self._executor = request_executor or self._transport_type(self._client, config.path_prefix)
        self._retry_policy = retry_policy
        self._hooks = hook_registry or HookRegistry()

        self.rollup = RollupApi(self._request)
        self.raw = RawApi(self._request)

    @classmethod
    def from_config(cls: type[C], config: ClientConfig, **kwargs: Any) -> C:
        return cls(
            base_url=config.base_url,
            path_prefix=config.path_prefix,
            timeout_seconds=config.timeout_seconds,
            headers=config.headers,
            **kwargs,
        )

    @classmethod
    def from_env(cls: type[C], **kwargs: Any) -> C:
        return cls.from_config(ClientConfig.from_env(), **kwargs)

    @classmethod
    def from_profile(cls: type[C], profile: str | None = None, **kwargs: Any) -> C:
        return cls.from_config(ClientConfig.from_profile(profile), **kwargs)

    def before(self, operation: str = "*") -> Callable[[F], F]:
        return self._register("before", operation)

    def after(self, operation: str = "*") -> Callable[[F], F]:
        return self._register("after", operation)

    def on_error(self, operation: str = "*") -> Callable[[F], F]:
        return self._register("error", operation)

    def _register(self, stage: str, operation: str) -> Callable[[F], F]:
        def decorator(func: F) -> F:
            self._hooks.add(stage, operation, func)
            return func

        return decorator

    def _request(self, params: RequestParameters, path: str, **kwargs: Any) -> Any:
        raise NotImplementedError

    def _new_call(
        self,
        params: RequestParameters,
        path: str,
        *,
        json_body: Any | None,
        headers: dict[str, str] | None,
        allow_statuses: Iterable[int] | None,
    ) -> RequestCall:
        return RequestCall.from_params(
            params,
            path,
            path_prefix=self.client_config.path_prefix,
            json_body=json_body,
            headers=headers,
            allow_statuses=allow_statuses,
        )

    def _retry_delay(self, call: RequestCall, attempt: int, error: Exception) -> float | None:
        if self._retry_policy is None or not call.retry_safe:
            return None
        if not isinstance(error, (ApiError, TransportError)):
            return None
        delay = self._retry_policy.next_delay(call, attempt, error)
        if delay is not None:
            logger.debug("retrying %s after attempt %d in %.2fs: %s", call.operation, attempt, delay, error)
        return delay


class RollupClient(_BaseClient):
    """Synchronous rollup API client."""

    _http_client_type = httpx.Client
    _transport_type = SyncTransport

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RollupClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _request(
        self,
        params: RequestParameters,
        path: str,
        *,
        json_body: Any | None = None,
        headers: dict[str, str] | None = None,
        allow_statuses: Iterable[int] | None = None,
    ) -> Any:
        call = self._new_call(params, path, json_body=json_body, headers=headers, allow_statuses=allow_statuses)
        self._hooks.run("before", call)

        attempt = 1
        while True:
            try:
                # Checked here as well as in the transport: custom executors
                # must never see a body the endpoint cannot take.
                call.check_body()
                response = self._executor.request(call)
            except Exception as error:
                delay = self._retry_delay(call, attempt, error)
                if delay is None:
                    self._hooks.run("error", call, error)
                    raise
                if delay > 0:
                    time.sleep(delay)
                attempt += 1
                continue

            self._hooks.run("after", call, response)
            return response


class AsyncRollupClient(_BaseClient):
    """Asynchronous rollup API client."""

    _http_client_type = httpx.AsyncClient
    _transport_type = AsyncTransport

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncRollupClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _request(
        self,
        params: RequestParameters,
        path: str,
        *,
        json_body: Any | None = None,
        headers: dict[str, str] | None = None,
        allow_statuses: Iterable[int] | None = None,
    ) -> Any:
        call = self._new_call(params, path, json_body=json_body, headers=headers, allow_statuses=allow_statuses)
        await self._hooks.run_async("before", call)

        attempt = 1
        while True:
            try:
                call.check_body()
                response = await self._executor.request(call)
            except Exception as error:
                delay = self._retry_delay(call, attempt, error)
                if delay is None:
                    await self._hooks.run_async("error", call, error)
                    raise
                if delay > 0:
                    await asyncio.sleep(delay)
                attempt += 1
                continue

            await self._hooks.run_async("after", call, response)
            return response
