from __future__ import annotations

import asyncio
import logging
from typing import Any

import pytest

from core.errors import RequestFailedError
from core.services.door import DoorOpener, DoorOpenerWorker


class FakeHass:
    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: list[tuple[str, str, Any]] = []
        self._fail_on = fail_on

    async def execute(self, request: Any) -> Any:
        path = request.path_and_query()
        self.calls.append((str(request.method()), path, request.payload()))
        if self._fail_on and path.endswith(self._fail_on):
            raise RequestFailedError("boom", status_code=500)
        return []


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.mark.asyncio
async def test_switch_pulse_turns_on_waits_and_turns_off() -> None:
    hass = FakeHass()
    sleep = RecordingSleep()
    opener = DoorOpener(hass, "switch.open_ring_one_door", pulse_seconds=5.0, sleep=sleep)  # type: ignore[arg-type]

    await opener.pulse()

    assert hass.calls == [
        ("POST", "/api/services/switch/turn_on", {"entity_id": "switch.open_ring_one_door"}),
        ("POST", "/api/services/switch/turn_off", {"entity_id": "switch.open_ring_one_door"}),
    ]
    assert sleep.delays == [5.0]


@pytest.mark.asyncio
async def test_button_pulse_is_a_single_press() -> None:
    hass = FakeHass()
    sleep = RecordingSleep()
    opener = DoorOpener(hass, "button.open_ring_1", sleep=sleep)  # type: ignore[arg-type]

    await opener.pulse()

    assert hass.calls == [("POST", "/api/services/button/press", {"entity_id": "button.open_ring_1"})]
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_failed_turn_on_skips_turn_off() -> None:
    hass = FakeHass(fail_on="turn_on")
    opener = DoorOpener(hass, "switch.door", sleep=RecordingSleep())  # type: ignore[arg-type]

    with pytest.raises(RequestFailedError):
        await opener.pulse()

    assert [path for _, path, _ in hass.calls] == ["/api/services/switch/turn_on"]


def test_unsupported_entity_domain() -> None:
    with pytest.raises(ValueError):
        DoorOpener(FakeHass(), "light.kitchen")  # type: ignore[arg-type]


class BlockingOpener:
    entity_id = "button.open_ring_1"

    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.pulses = 0

    async def pulse(self) -> None:
        self.pulses += 1
        await self.release.wait()


async def _yield(times: int = 5) -> None:
    for _ in range(times):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_worker_allows_one_running_and_one_pending() -> None:
    opener = BlockingOpener()
    worker = DoorOpenerWorker(opener)  # type: ignore[arg-type]
    worker.start()
    try:
        assert worker.try_request() is True
        await _yield()
        assert opener.pulses == 1

        assert worker.try_request() is True
        assert worker.try_request() is False

        opener.release.set()
        await asyncio.wait_for(worker.join(), timeout=1)
        assert opener.pulses == 2
    finally:
        await worker.stop()


@pytest.mark.asyncio
async def test_worker_logs_failures_and_keeps_running(caplog: pytest.LogCaptureFixture) -> None:
    hass = FakeHass(fail_on="press")
    worker = DoorOpenerWorker(DoorOpener(hass, "button.open_ring_1"))  # type: ignore[arg-type]
    worker.start()
    try:
        with caplog.at_level(logging.WARNING, logger="core.services.door"):
            assert worker.try_request()
            await asyncio.wait_for(worker.join(), timeout=1)
            assert worker.try_request()
            await asyncio.wait_for(worker.join(), timeout=1)
    finally:
        await worker.stop()

    assert len(hass.calls) == 2
    assert "Error while opening door button.open_ring_1" in caplog.text


class FlakyOpener:
    entity_id = "button.open_ring_1"

    def __init__(self) -> None:
        self.pulses = 0

    async def pulse(self) -> None:
        self.pulses += 1
        if self.pulses == 1:
            raise RuntimeError("unexpected")


@pytest.mark.asyncio
async def test_worker_survives_unexpected_errors(caplog: pytest.LogCaptureFixture) -> None:
    opener = FlakyOpener()
    worker = DoorOpenerWorker(opener)  # type: ignore[arg-type]
    worker.start()
    try:
        with caplog.at_level(logging.ERROR, logger="core.services.door"):
            assert worker.try_request()
            await asyncio.wait_for(worker.join(), timeout=1)
            assert worker.try_request()
            await asyncio.wait_for(worker.join(), timeout=1)
    finally:
        await worker.stop()

    assert opener.pulses == 2
    records = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(records) == 1
    assert "Unexpected error while opening door button.open_ring_1" in records[0].getMessage()
    assert records[0].exc_info is not None
