from __future__ import annotations

import asyncio

import pytest

from rollup_client.hooks import HookRegistry
from rollup_client.rollup import (
    DeleteRollupJobRequestParameters,
    GetRollupJobRequestParameters,
    StopRollupJobRequestParameters,
)
from rollup_client.transport import RequestCall


def _call(params_type=GetRollupJobRequestParameters, path: str = "/_rollup/job/") -> RequestCall:
    return RequestCall.from_params(params_type(), path)


def test_namespace_patterns_run_between_wildcard_and_exact_hooks() -> None:
    registry = HookRegistry()
    events: list[str] = []

    registry.add("before", "rollup.stop_job", lambda _call: events.append("exact"))
    registry.add("before", "rollup.*", lambda _call: events.append("namespace"))
    registry.add("before", "*", lambda _call: events.append("wildcard"))
    registry.add("before", "other.*", lambda _call: events.append("other"))

    registry.run("before", _call(StopRollupJobRequestParameters, "/_rollup/job/a/_stop"))

    assert events == ["wildcard", "namespace", "exact"]


def test_stages_are_kept_apart() -> None:
    registry = HookRegistry()
    registry.add("before", "*", lambda _call: None)
    registry.add("after", "rollup.*", lambda _call, _response: None)

    assert len(registry.matching("before", "rollup.get_jobs")) == 1
    assert len(registry.matching("after", "rollup.get_jobs")) == 1
    assert registry.matching("error", "rollup.get_jobs") == []


def test_error_hooks_only_fire_for_their_operation() -> None:
    registry = HookRegistry()
    received: list[Exception] = []

    registry.add("error", "rollup.delete_job", lambda _call, error: received.append(error))
    failure = RuntimeError("boom")
    registry.run("error", _call(DeleteRollupJobRequestParameters, "/_rollup/job/a"), failure)
    registry.run("error", _call(), failure)

    assert received == [failure]


def test_unknown_stage_and_non_callables_are_rejected() -> None:
    registry = HookRegistry()
    with pytest.raises(ValueError, match="unknown hook stage"):
        registry.add("during", "*", lambda _call: None)
    with pytest.raises(TypeError):
        registry.add("before", "*", "not a hook")  # type: ignore[arg-type]


def test_sync_run_rejects_async_hooks() -> None:
    registry = HookRegistry()

    async def before(_call: RequestCall) -> None:
        return None

    registry.add("before", "*", before)
    with pytest.raises(TypeError, match="rollup.get_jobs"):
        registry.run("before", _call())


@pytest.mark.asyncio
async def test_async_run_awaits_async_hooks_and_calls_plain_ones() -> None:
    registry = HookRegistry()
    events: list[str] = []

    async def before(_call: RequestCall) -> None:
        await asyncio.sleep(0)
        events.append("before")

    def after(_call: RequestCall, response: object) -> None:
        events.append(f"after {response}")

    registry.add("before", "rollup.*", before)
    registry.add("after", "*", after)

    call = _call()
    await registry.run_async("before", call)
    await registry.run_async("after", call, {"jobs": []})

    assert events == ["before", "after {'jobs': []}"]
