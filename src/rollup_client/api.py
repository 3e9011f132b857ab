"""Rollup API namespace and raw descriptor dispatch.

The same classes serve the sync and async clients: each method returns
whatever the bound request function returns (a value or an awaitable).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Callable, TypeVar
from urllib.parse import quote

from .request_parameters import RequestParameters
from .rollup import (
    CreateRollupJobRequestParameters,
    DeleteRollupJobRequestParameters,
    GetRollupCapabilitiesRequestParameters,
    GetRollupIndexCapabilitiesRequestParameters,
    GetRollupJobRequestParameters,
    RollupSearchRequestParameters,
    StartRollupJobRequestParameters,
    StopRollupJobRequestParameters,
)

RequestFn = Callable[..., Any]
IndexName = str | Sequence[str]
P = TypeVar("P", bound=RequestParameters)


def _segment(value: str, *, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    return quote(value.strip(), safe="")


def _index_segment(index: IndexName, *, field_name: str = "index") -> str:
    names = [index] if isinstance(index, str) else list(index)
    cleaned = [name.strip() for name in names if isinstance(name, str) and name.strip()]
    if not cleaned:
        raise ValueError(f"{field_name} must name at least one index")
    return quote(",".join(cleaned), safe=",*")


def _resolve_params(params_type: type[P], params: RequestParameters | None, values: dict[str, Any]) -> P:
    if params is None:
        return params_type(**values)
    if values:
        raise ValueError(f"{params_type.endpoint.name} accepts either `params` or keyword parameters, not both")
    if not isinstance(params, params_type):
        raise TypeError(f"{params_type.endpoint.name} expects {params_type.__name__}, got {type(params).__name__}")
    return params


class RawApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def request(
        self,
        params: RequestParameters,
        path: str,
        *,
        body: Any | None = None,
        headers: dict[str, str] | None = None,
        allow_statuses: tuple[int, ...] | None = None,
    ) -> Any:
        return self._request(
            params,
            path,
            json_body=body,
            headers=headers,
            allow_statuses=allow_statuses,
        )


class RollupApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def delete_job(
        self,
        job_id: str,
        *,
        params: DeleteRollupJobRequestParameters | None = None,
        headers: dict[str, str] | None = None,
        **values: Any,
    ) -> Any:
        resolved = _resolve_params(DeleteRollupJobRequestParameters, params, values)
        return self._request(resolved, f"/_rollup/job/{_segment(job_id, field_name='job_id')}", headers=headers)

    def get_jobs(
        self,
        job_id: str | None = None,
        *,
        params: GetRollupJobRequestParameters | None = None,
        headers: dict[str, str] | None = None,
        **values: Any,
    ) -> Any:
        resolved = _resolve_params(GetRollupJobRequestParameters, params, values)
        path = "/_rollup/job/" if job_id is None else f"/_rollup/job/{_segment(job_id, field_name='job_id')}"
        return self._request(resolved, path, headers=headers)

    def get_capabilities(
        self,
        index: IndexName | None = None,
        *,
        params: GetRollupCapabilitiesRequestParameters | None = None,
        headers: dict[str, str] | None = None,
        **values: Any,
    ) -> Any:
        resolved = _resolve_params(GetRollupCapabilitiesRequestParameters, params, values)
        path = "/_rollup/data/" if index is None else f"/_rollup/data/{_index_segment(index)}"
        return self._request(resolved, path, headers=headers)

    def get_index_capabilities(
        self,
        index: IndexName,
        *,
        params: GetRollupIndexCapabilitiesRequestParameters | None = None,
        headers: dict[str, str] | None = None,
        **values: Any,
    ) -> Any:
        resolved = _resolve_params(GetRollupIndexCapabilitiesRequestParameters, params, values)
        return self._request(resolved, f"/{_index_segment(index)}/_rollup/data", headers=headers)

    def create_job(
        self,
        job_id: str,
        body: dict[str, Any],
        *,
        params: CreateRollupJobRequestParameters | None = None,
        headers: dict[str, str] | None = None,
        **values: Any,
    ) -> Any:
        resolved = _resolve_params(CreateRollupJobRequestParameters, params, values)
        return self._request(
            resolved,
            f"/_rollup/job/{_segment(job_id, field_name='job_id')}",
            json_body=body,
            headers=headers,
        )

    def search(
        self,
        index: IndexName,
        body: dict[str, Any],
        *,
        params: RollupSearchRequestParameters | None = None,
        headers: dict[str, str] | None = None,
        **values: Any,
    ) -> Any:
        resolved = _resolve_params(RollupSearchRequestParameters, params, values)
        return self._request(resolved, f"/{_index_segment(index)}/_rollup_search", json_body=body, headers=headers)

    def start_job(
        self,
        job_id: str,
        *,
        params: StartRollupJobRequestParameters | None = None,
        headers: dict[str, str] | None = None,
        **values: Any,
    ) -> Any:
        resolved = _resolve_params(StartRollupJobRequestParameters, params, values)
        return self._request(resolved, f"/_rollup/job/{_segment(job_id, field_name='job_id')}/_start", headers=headers)

    def stop_job(
        self,
        job_id: str,
        *,
        params: StopRollupJobRequestParameters | None = None,
        headers: dict[str, str] | None = None,
        **values: Any,
    ) -> Any:
        resolved = _resolve_params(StopRollupJobRequestParameters, params, values)
        return self._request(resolved, f"/_rollup/job/{_segment(job_id, field_name='job_id')}/_stop", headers=headers)
