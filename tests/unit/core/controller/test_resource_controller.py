from __future__ import annotations

"""
Unit tests for the Resource Request Controller.

Verifies:
1. Last-issued-wins when calls overlap, in both settlement orders.
2. Error capture that keeps the previous data.
3. Dependency key diffing on tick.
4. refetch parameter handling and state listeners.
"""

import asyncio
from typing import Any, Dict, List

from assetlib.core.controller.resource import ResourceController, use_resource
from assetlib.domain.errors import ServerError
from assetlib.domain.models import STATUS_ERROR, STATUS_LOADING, STATUS_SUCCESS, RequestState


def test_last_issued_wins_when_latest_settles_first() -> None:
    """TC-01: The older call settling last must not overwrite newer data."""
    async def scenario() -> ResourceController:
        gates: Dict[str, asyncio.Event] = {"a": asyncio.Event(), "b": asyncio.Event()}

        async def fetch(params: str) -> str:
            await gates[params].wait()
            return f"result-{params}"

        controller = ResourceController(fetch, "a")
        first = asyncio.create_task(controller.activate())
        await asyncio.sleep(0)
        second = asyncio.create_task(controller.refetch("b"))
        await asyncio.sleep(0)

        gates["b"].set()
        await second
        assert controller.data == "result-b"

        gates["a"].set()
        stale = await first
        assert stale == "result-a"
        return controller

    controller = asyncio.run(scenario())

    assert controller.data == "result-b"
    assert controller.loading is False
    assert controller.state.sequence == 2


def test_last_issued_wins_when_oldest_settles_first() -> None:
    """TC-01: A stale result arriving first is ignored; loading stays on."""
    async def scenario() -> None:
        gates = {"a": asyncio.Event(), "b": asyncio.Event()}

        async def fetch(params: str) -> str:
            await gates[params].wait()
            return params

        controller = ResourceController(fetch, "a", initial_data="initial")
        first = asyncio.create_task(controller.activate())
        await asyncio.sleep(0)
        second = asyncio.create_task(controller.refetch("b"))
        await asyncio.sleep(0)

        gates["a"].set()
        await first
        assert controller.data == "initial"
        assert controller.loading is True

        gates["b"].set()
        await second
        assert controller.data == "b"
        assert controller.loading is False

    asyncio.run(scenario())


def test_stale_failure_is_ignored() -> None:
    async def scenario() -> ResourceController:
        gates = {"a": asyncio.Event(), "b": asyncio.Event()}

        async def fetch(params: str) -> str:
            await gates[params].wait()
            if params == "a":
                raise ServerError("late failure")
            return params

        controller = ResourceController(fetch, "a")
        first = asyncio.create_task(controller.activate())
        await asyncio.sleep(0)
        second = asyncio.create_task(controller.refetch("b"))
        await asyncio.sleep(0)
        gates["b"].set()
        await second
        gates["a"].set()
        await first
        return controller

    controller = asyncio.run(scenario())

    assert controller.error is None
    assert controller.data == "b"


def test_error_keeps_previous_data() -> None:
    """TC-02: A failed call stores the error and keeps the last data."""
    responses: List[Any] = ["first", ServerError("down")]

    async def fetch(_: Any) -> Any:
        value = responses.pop(0)
        if isinstance(value, Exception):
            raise value
        return value

    controller = use_resource(fetch)

    async def scenario() -> Any:
        await controller.activate()
        return await controller.refetch()

    result = asyncio.run(scenario())

    assert result is None
    assert controller.data == "first"
    assert isinstance(controller.error, ServerError)
    assert controller.state.status == STATUS_ERROR
    assert controller.loading is False


def test_success_clears_error() -> None:
    responses: List[Any] = [ServerError("down"), "ok"]

    def fetch(_: Any) -> Any:
        value = responses.pop(0)
        if isinstance(value, Exception):
            raise value
        return value

    controller = use_resource(fetch)

    async def scenario() -> None:
        await controller.activate()
        assert controller.error is not None
        await controller.refetch()

    asyncio.run(scenario())

    assert controller.error is None
    assert controller.data == "ok"


def test_reissue_clears_error_while_loading() -> None:
    """A retry after a failure is never 'loading' and 'error' at once."""
    states: List[RequestState] = []
    responses: List[Any] = ["first", ServerError("down"), "again"]

    async def fetch(_: Any) -> Any:
        value = responses.pop(0)
        if isinstance(value, Exception):
            raise value
        return value

    controller = use_resource(fetch)
    controller.subscribe(states.append)

    async def scenario() -> None:
        await controller.activate()
        await controller.refetch()
        await controller.refetch()

    asyncio.run(scenario())

    assert [s.status for s in states] == [
        STATUS_LOADING, STATUS_SUCCESS, STATUS_LOADING, STATUS_ERROR, STATUS_LOADING, STATUS_SUCCESS,
    ]
    retry = states[4]
    assert retry.loading is True
    assert retry.error is None
    assert retry.data == "first"


def test_tick_reissues_only_on_key_change() -> None:
    """TC-03: Element-wise comparison of the dependency key."""
    calls: List[Any] = []

    async def fetch(params: Any) -> int:
        calls.append(params)
        return len(calls)

    controller = use_resource(fetch, dependency_key=("folder", "1"))

    async def scenario() -> None:
        await controller.tick(("folder", "1"))
        await controller.tick(("folder", "1"))
        await controller.tick(["folder", "1"])
        await controller.tick(("folder", "2"))

    asyncio.run(scenario())

    assert len(calls) == 2
    assert controller.dependency_key == ("folder", "2")
    assert controller.data == 2


def test_refetch_replaces_params_only_when_given() -> None:
    """TC-04: None replays, a value replaces."""
    seen: List[Any] = []

    async def fetch(params: Any) -> Any:
        seen.append(params)
        return params

    controller = use_resource(fetch, initial_params={"page": 1})

    async def scenario() -> None:
        await controller.activate()
        await controller.refetch()
        assert await controller.refetch({"page": 2}) == {"page": 2}
        await controller.refetch()

    asyncio.run(scenario())

    assert seen == [{"page": 1}, {"page": 1}, {"page": 2}, {"page": 2}]
    assert controller.params == {"page": 2}


def test_listeners_receive_transitions() -> None:
    states: List[RequestState] = []

    async def fetch(_: Any) -> str:
        return "data"

    controller = use_resource(fetch, initial_data=[])
    unsubscribe = controller.subscribe(states.append)

    asyncio.run(controller.activate())
    unsubscribe()
    asyncio.run(controller.refetch())

    assert [s.status for s in states] == [STATUS_LOADING, STATUS_SUCCESS]
    assert states[0].data == []
    assert states[1].data == "data"


def test_initial_state() -> None:
    controller = use_resource(lambda _: None, initial_data={"items": []})

    assert controller.data == {"items": []}
    assert controller.loading is False
    assert controller.error is None
    assert controller.issued == 0


def test_descriptor_tracks_params_and_key() -> None:
    """TC-05: A key change or new params yields a new descriptor with the same function."""
    def fetch(params: Any) -> Any:
        return params

    controller = ResourceController(fetch, {"page": 1}, dependency_key=("folder", "1"))
    original = controller.descriptor

    asyncio.run(controller.tick(("folder", "2")))
    asyncio.run(controller.refetch({"page": 3}))

    assert original.dependency_key == ("folder", "1")
    assert controller.descriptor.fn is fetch
    assert controller.descriptor.params == {"page": 3}
    assert controller.descriptor.dependency_key == ("folder", "2")
