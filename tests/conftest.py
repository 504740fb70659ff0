"""Fixtures compartidas."""

from __future__ import annotations

from typing import Any

import pytest

from core.config import AppSettings


def state_payload(entity_id: str = "sun.sun", state: str = "below_horizon") -> dict[str, Any]:
    return {
        "attributes": {},
        "entity_id": entity_id,
        "last_changed": "2016-05-30T21:43:32.418320+00:00",
        "last_updated": "2016-05-30T21:43:32.418320+00:00",
        "state": state,
        "context": {"id": "", "parent_id": None, "user_id": None},
    }


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> AppSettings:
    for name in ("DOORBOT_HASS_TOKEN", "DOORBOT_HASS_AUTHORITY", "DOORBOT_DOOR_ENTITY_ID"):
        monkeypatch.delenv(name, raising=False)
    return AppSettings(
        _env_file=None,
        hass_token="secret-token",
        hass_authority="hass.local:8123",
        telegram_token="123:abc",
        control_chat_id=-1001,
        door_entity_id="button.open_ring_1",
        pulse_seconds=0.01,
    )
