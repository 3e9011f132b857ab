"""Python client for the rollup job and rollup search APIs.

This module uses lazy exports so the request descriptors and the parameter
store can be imported without immediately importing transport dependencies.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "ApiError",
    "AsyncRollupClient",
    "AuthError",
    "BackoffRetry",
    "BodyNotSupportedError",
    "ClientConfig",
    "ClientTimeoutError",
    "ConflictError",
    "CreateRollupJobRequestParameters",
    "DeleteRollupJobRequestParameters",
    "EndpointSpec",
    "GetRollupCapabilitiesRequestParameters",
    "GetRollupIndexCapabilitiesRequestParameters",
    "GetRollupJobRequestParameters",
    "HookRegistry",
    "HttpMethod",
    "NotFoundError",
    "ParameterStore",
    "ParameterTypeError",
    "QueryParam",
    "ROLLUP_ENDPOINTS",
    "RequestCall",
    "RequestParameters",
    "RetryPolicy",
    "RollupClient",
    "RollupClientError",
    "RollupSearchRequestParameters",
    "ServerError",
    "StartRollupJobRequestParameters",
    "StopRollupJobRequestParameters",
    "TransportError",
    "ValidationError",
    "format_duration",
    "parse_duration",
]

_EXPORTS: dict[str, tuple[str, str]] = {
    "AsyncRollupClient": (".client", "AsyncRollupClient"),
    "RollupClient": (".client", "RollupClient"),
    "ClientConfig": (".config", "ClientConfig"),
    "format_duration": (".duration", "format_duration"),
    "parse_duration": (".duration", "parse_duration"),
    "ApiError": (".errors", "ApiError"),
    "AuthError": (".errors", "AuthError"),
    "BodyNotSupportedError": (".errors", "BodyNotSupportedError"),
    "ClientTimeoutError": (".errors", "ClientTimeoutError"),
    "ConflictError": (".errors", "ConflictError"),
    "NotFoundError": (".errors", "NotFoundError"),
    "ParameterTypeError": (".errors", "ParameterTypeError"),
    "RollupClientError": (".errors", "RollupClientError"),
    "ServerError": (".errors", "ServerError"),
    "TransportError": (".errors", "TransportError"),
    "ValidationError": (".errors", "ValidationError"),
    "HookRegistry": (".hooks", "HookRegistry"),
    "ParameterStore": (".params", "ParameterStore"),
    "QueryParam": (".params", "QueryParam"),
    "RetryPolicy": (".protocols", "RetryPolicy"),
    "BackoffRetry": (".retry", "BackoffRetry"),
    "EndpointSpec": (".request_parameters", "EndpointSpec"),
    "HttpMethod": (".request_parameters", "HttpMethod"),
    "RequestParameters": (".request_parameters", "RequestParameters"),
    "ROLLUP_ENDPOINTS": (".rollup", "ROLLUP_ENDPOINTS"),
    "CreateRollupJobRequestParameters": (".rollup", "CreateRollupJobRequestParameters"),
    "DeleteRollupJobRequestParameters": (".rollup", "DeleteRollupJobRequestParameters"),
    "GetRollupCapabilitiesRequestParameters": (".rollup", "GetRollupCapabilitiesRequestParameters"),
    "GetRollupIndexCapabilitiesRequestParameters": (".rollup", "GetRollupIndexCapabilitiesRequestParameters"),
    "GetRollupJobRequestParameters": (".rollup", "GetRollupJobRequestParameters"),
    "RollupSearchRequestParameters": (".rollup", "RollupSearchRequestParameters"),
    "StartRollupJobRequestParameters": (".rollup", "StartRollupJobRequestParameters"),
    "StopRollupJobRequestParameters": (".rollup", "StopRollupJobRequestParameters"),
    "RequestCall": (".transport", "RequestCall"),
}

if TYPE_CHECKING:
    from .client import AsyncRollupClient, RollupClient
    from .config import ClientConfig
    from .duration import format_duration, parse_duration
    from .errors import (
        ApiError,
        AuthError,
        BodyNotSupportedError,
        ClientTimeoutError,
        ConflictError,
        NotFoundError,
        ParameterTypeError,
        RollupClientError,
        ServerError,
        TransportError,
        ValidationError,
    )
    from .hooks import HookRegistry
    from .params import ParameterStore, QueryParam
    from .protocols import RetryPolicy
    from .retry import BackoffRetry
    from .request_parameters import EndpointSpec, HttpMethod, RequestParameters
    from .rollup import (
        ROLLUP_ENDPOINTS,
        CreateRollupJobRequestParameters,
        DeleteRollupJobRequestParameters,
        GetRollupCapabilitiesRequestParameters,
        GetRollupIndexCapabilitiesRequestParameters,
        GetRollupJobRequestParameters,
        RollupSearchRequestParameters,
        StartRollupJobRequestParameters,
        StopRollupJobRequestParameters,
    )
    from .transport import RequestCall


def __getattr__(name: str) -> Any:
    module_info = _EXPORTS.get(name)
    if module_info is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attribute = module_info
    module = import_module(module_name, __name__)
    value = getattr(module, attribute)
    globals()[name] = value
    return value
