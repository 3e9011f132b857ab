"""Request hook registry for the rollup client.

Hooks are registered per stage (``before``, ``after``, ``error``) under an
operation pattern: an exact name (``rollup.stop_job``), a namespace ending in
``.*`` (``rollup.*``) or ``*`` for every request. Wildcards run first, then
namespace patterns, then exact matches.

Before hooks receive the ``RequestCall`` and may edit its headers. After hooks
also receive the response, error hooks the exception.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from .transport import RequestCall

STAGES = ("before", "after", "error")

Hook = Callable[..., Any]


class HookRegistry:
    def __init__(self) -> None:
        self._hooks: dict[str, dict[str, list[Hook]]] = {stage: {} for stage in STAGES}

    def add(self, stage: str, pattern: str, hook: Hook) -> None:
        if stage not in self._hooks:
            raise ValueError(f"unknown hook stage {stage!r}; expected one of {', '.join(STAGES)}")
        if not callable(hook):
            raise TypeError(f"{stage} hook for {pattern!r} is not callable")
        self._hooks[stage].setdefault(pattern, []).append(hook)

    def matching(self, stage: str, operation: str) -> list[Hook]:
        registry = self._hooks[stage]
        namespaced = [
            hook
            for pattern, hooks in registry.items()
            if pattern.endswith(".*") and operation.startswith(pattern[:-1])
            for hook in hooks
        ]
        return [*registry.get("*", []), *namespaced, *registry.get(operation, [])]

    def run(self, stage: str, call: RequestCall, *args: Any) -> None:
        for hook in self.matching(stage, call.operation):
            result = hook(call, *args)
            if inspect.isawaitable(result):
                # Close the coroutine so it is not reported as never awaited.
                close = getattr(result, "close", None)
                if callable(close):
                    close()
                raise TypeError(f"sync clients cannot run async {stage} hooks ({call.operation})")

    async def run_async(self, stage: str, call: RequestCall, *args: Any) -> None:
        for hook in self.matching(stage, call.operation):
            result = hook(call, *args)
            if inspect.isawaitable(result):
                await result
