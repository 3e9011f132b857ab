"""HTTP transport for the rollup client.

A ``RequestCall`` is the frozen record of one dispatch: it is built from a
request descriptor when the call starts and is what hooks, retry policies and
executors see. The httpx transports turn it into a request and classify the
response.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from json import JSONDecodeError
from typing import Any
from urllib.parse import urlencode

import httpx

from .errors import (
    BodyNotSupportedError,
    ClientTimeoutError,
    RequestDetails,
    TransportError,
    classify_api_error,
)
from .request_parameters import EndpointSpec, RequestParameters

logger = logging.getLogger(__name__)


def _normalize_path(path: str, path_prefix: str) -> str:
    if not path:
        return ""

    normalized = path if path.startswith("/") else f"/{path}"
    # Callers may pass paths that already carry the configured prefix.
    prefix = path_prefix.rstrip("/")
    if prefix and normalized.startswith(prefix + "/"):
        return normalized[len(prefix) :]
    if prefix and normalized == prefix:
        return ""
    return normalized


@dataclass(slots=True)
class RequestCall:
    endpoint: EndpointSpec
    path: str
    query: dict[str, str] = field(default_factory=dict)
    json_body: Any | None = None
    headers: dict[str, str] = field(default_factory=dict)
    allow_statuses: frozenset[int] = frozenset()

    @classmethod
    def from_params(
        cls,
        params: RequestParameters,
        path: str,
        *,
        path_prefix: str = "",
        json_body: Any | None = None,
        headers: dict[str, str] | None = None,
        allow_statuses: Iterable[int] | None = None,
    ) -> RequestCall:
        if not isinstance(params, RequestParameters):
            raise TypeError(f"expected RequestParameters, got {type(params).__name__}")
        # The descriptor is read once here; later changes by the caller do not
        # reach the request in flight.
        return cls(
            endpoint=params.endpoint,
            path=_normalize_path(path, path_prefix),
            query=params.query_params(),
            json_body=json_body,
            headers=dict(headers or {}),
            allow_statuses=frozenset(allow_statuses or ()),
        )

    @property
    def operation(self) -> str:
        return self.endpoint.name

    @property
    def method(self) -> str:
        return self.endpoint.method.value

    @property
    def supports_body(self) -> bool:
        return self.endpoint.supports_body

    @property
    def retry_safe(self) -> bool:
        return self.endpoint.retry_safe

    def check_body(self) -> None:
        if self.json_body is not None and not self.supports_body:
            raise BodyNotSupportedError(self.operation, self.method)

    def target(self, path_prefix: str = "") -> str:
        return path_prefix.rstrip("/") + self.path + encode_query(self.query)


def encode_query(query: dict[str, str] | None) -> str:
    # Store tokens are already canonical; commas and wildcards stay readable.
    if not query:
        return ""
    return "?" + urlencode(query, safe=",*")


def parse_response_body(response: httpx.Response) -> Any:
    if not response.content:
        return None

    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type:
        return response.text

    try:
        return response.json()
    except JSONDecodeError:
        return response.text


def validate_status(response: httpx.Response, call: RequestCall) -> None:
    # Lookups of missing jobs answer 404; callers that treat that as a normal
    # state pass it in allow_statuses.
    if response.status_code in call.allow_statuses or response.is_success:
        return

    details = RequestDetails(
        operation=call.operation,
        method=call.method,
        path=call.path,
        status_code=response.status_code,
        response_body=parse_response_body(response),
    )
    raise classify_api_error(details)


@contextmanager
def _translate_errors(call: RequestCall) -> Iterator[None]:
    try:
        yield
    except httpx.TimeoutException as error:
        raise ClientTimeoutError(f"{call.operation} timed out: {error}") from error
    except httpx.HTTPError as error:
        raise TransportError(f"{call.operation} failed: {error}") from error


class _Transport:
    def __init__(self, path_prefix: str = "") -> None:
        self._path_prefix = path_prefix

    def _prepare(self, call: RequestCall) -> str:
        call.check_body()
        target = call.target(self._path_prefix)
        logger.debug("%s %s %s", call.operation, call.method, target)
        return target

    def _finish(self, call: RequestCall, response: httpx.Response) -> Any:
        logger.debug("%s responded %s", call.operation, response.status_code)
        validate_status(response, call)
        return parse_response_body(response)


class SyncTransport(_Transport):
    def __init__(self, client: httpx.Client, path_prefix: str = "") -> None:
        super().__init__(path_prefix)
        self._client = client

    def request(self, call: RequestCall) -> Any:
        target = self._prepare(call)
        with _translate_errors(call):
            response = self._client.request(call.method, target, json=call.json_body, headers=call.headers or None)
        return self._finish(call, response)


class AsyncTransport(_Transport):
    def __init__(self, client: httpx.AsyncClient, path_prefix: str = "") -> None:
        super().__init__(path_prefix)
        self._client = client

    async def request(self, call: RequestCall) -> Any:
        target = self._prepare(call)
        with _translate_errors(call):
            response = await self._client.request(call.method, target, json=call.json_body, headers=call.headers or None)
        return self._finish(call, response)
