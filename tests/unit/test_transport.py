from __future__ import annotations

import json
from datetime import timedelta
from typing import Any, Callable

import httpx
import pytest

from rollup_client import AsyncRollupClient, RollupClient
from rollup_client.errors import (
    BodyNotSupportedError,
    ClientTimeoutError,
    NotFoundError,
    ServerError,
    TransportError,
)
from rollup_client.retry import BackoffRetry
from rollup_client.rollup import (
    DeleteRollupJobRequestParameters,
    GetRollupJobRequestParameters,
    StartRollupJobRequestParameters,
    StopRollupJobRequestParameters,
)
from rollup_client.transport import RequestCall, SyncTransport, encode_query

Handler = Callable[[httpx.Request], httpx.Response]


def _client(handler: Handler, **kwargs: Any) -> tuple[RollupClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http_client = httpx.Client(base_url="http://rollup.test", transport=httpx.MockTransport(record))
    return RollupClient(http_client=http_client, **kwargs), seen


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"acknowledged": True})


def test_encode_query_keeps_commas_and_wildcards_readable() -> None:
    assert encode_query({"filter_path": "jobs.config,jobs.status", "index": "sensor-*"}) == (
        "?filter_path=jobs.config,jobs.status&index=sensor-*"
    )
    assert encode_query({"source": "a b&c"}) == "?source=a+b%26c"
    assert encode_query({}) == ""
    assert encode_query(None) == ""


def test_stop_job_puts_typed_parameters_on_the_wire() -> None:
    client, seen = _client(_ok)
    try:
        response = client.rollup.stop_job("sensor", wait_for_completion=True, timeout=timedelta(seconds=10))
    finally:
        client.close()

    assert response == {"acknowledged": True}
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/_rollup/job/sensor/_stop"
    assert dict(request.url.params) == {"wait_for_completion": "true", "timeout": "10s"}
    assert request.content == b""


def test_unset_parameters_never_reach_the_wire() -> None:
    client, seen = _client(_ok)
    try:
        client.rollup.stop_job("sensor")
    finally:
        client.close()

    assert seen[0].url.query == b""


def test_create_job_sends_json_body() -> None:
    client, seen = _client(_ok)
    body = {"index_pattern": "sensor-*", "rollup_index": "sensor_rollup"}
    try:
        client.rollup.create_job("sensor", body)
    finally:
        client.close()

    assert seen[0].method == "PUT"
    assert json.loads(seen[0].content) == body


def test_body_on_body_less_endpoint_is_rejected_before_dispatch() -> None:
    client, seen = _client(_ok)
    try:
        with pytest.raises(BodyNotSupportedError) as info:
            client.raw.request(DeleteRollupJobRequestParameters(), "/_rollup/job/sensor", body={"force": True})
    finally:
        client.close()

    assert seen == []
    assert isinstance(info.value, ValueError)
    assert info.value.operation == "rollup.delete_job"
    assert info.value.method == "DELETE"


def test_sync_transport_enforces_body_flag_directly() -> None:
    http_client = httpx.Client(base_url="http://rollup.test", transport=httpx.MockTransport(_ok))
    transport = SyncTransport(http_client)
    call = RequestCall.from_params(StartRollupJobRequestParameters(), "/_rollup/job/sensor/_start", json_body={})
    try:
        with pytest.raises(BodyNotSupportedError):
            transport.request(call)
    finally:
        http_client.close()


def test_body_rejection_is_not_retried() -> None:
    class CountingPolicy:
        calls = 0

        def next_delay(self, call: RequestCall, attempt: int, error: Exception) -> float | None:
            self.calls += 1
            return 0.0

    policy = CountingPolicy()
    client, seen = _client(_ok, retry_policy=policy)
    try:
        with pytest.raises(BodyNotSupportedError):
            client.raw.request(GetRollupJobRequestParameters(), "/_rollup/job/sensor", body={"size": 1})
    finally:
        client.close()

    assert seen == []
    assert policy.calls == 0


def test_backoff_retries_unavailable_reads_over_http() -> None:
    answers = [httpx.Response(503, json={"error": "busy"}), httpx.Response(200, json={"jobs": []})]

    client, seen = _client(lambda request: answers.pop(0), retry_policy=BackoffRetry(base_delay_seconds=0))
    try:
        response = client.rollup.get_jobs()
    finally:
        client.close()

    assert response == {"jobs": []}
    assert len(seen) == 2



def test_missing_job_maps_to_not_found() -> None:
    body = {"error": {"type": "resource_not_found_exception", "reason": "the task with id [missing] doesn't exist"}}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json=body)

    client, _ = _client(handler)
    try:
        with pytest.raises(NotFoundError) as info:
            client.rollup.delete_job("missing")
    finally:
        client.close()

    details = info.value.details
    assert details.operation == "rollup.delete_job"
    assert details.method == "DELETE"
    assert details.status_code == 404
    assert details.response_body == body
    assert info.value.reason == "resource_not_found_exception: the task with id [missing] doesn't exist"
    assert str(info.value).startswith("rollup.delete_job (DELETE /_rollup/job/missing) failed with status 404: ")


def test_allow_statuses_returns_body_instead_of_raising() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"jobs": []})

    client, _ = _client(handler)
    try:
        response = client.raw.request(GetRollupJobRequestParameters(), "/_rollup/job/missing", allow_statuses=(404,))
    finally:
        client.close()

    assert response == {"jobs": []}


def test_server_errors_and_text_bodies() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable", headers={"content-type": "text/plain"})

    client, _ = _client(handler)
    try:
        with pytest.raises(ServerError) as info:
            client.rollup.get_jobs()
    finally:
        client.close()

    assert info.value.details.response_body == "unavailable"


def test_timeouts_and_connection_failures_map_to_transport_errors() -> None:
    def timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    def refused(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client, _ = _client(timeout)
    try:
        with pytest.raises(ClientTimeoutError):
            client.rollup.get_jobs()
    finally:
        client.close()

    client, _ = _client(refused)
    try:
        with pytest.raises(TransportError):
            client.rollup.get_jobs()
    finally:
        client.close()


def test_path_prefix_is_applied_once() -> None:
    client, seen = _client(_ok, path_prefix="/search")
    try:
        client.rollup.start_job("sensor")
        client.raw.request(StopRollupJobRequestParameters(), "/search/_rollup/job/sensor/_stop")
    finally:
        client.close()

    assert [request.url.path for request in seen] == [
        "/search/_rollup/job/sensor/_start",
        "/search/_rollup/job/sensor/_stop",
    ]


@pytest.mark.asyncio
async def test_async_client_rejects_body_and_sends_queries() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"stopped": True})

    http_client = httpx.AsyncClient(base_url="http://rollup.test", transport=httpx.MockTransport(handler))
    client = AsyncRollupClient(http_client=http_client)
    try:
        with pytest.raises(BodyNotSupportedError):
            await client.raw.request(DeleteRollupJobRequestParameters(), "/_rollup/job/sensor", body={"x": 1})
        response = await client.rollup.stop_job("sensor", wait_for_completion=True)
    finally:
        await client.close()

    assert response == {"stopped": True}
    assert len(seen) == 1
    assert dict(seen[0].url.params) == {"wait_for_completion": "true"}
