"""Shared fixtures for autosig tests."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from autosig.services.host import Banner, ComposeEvent, HostResult
from autosig.utils.enums import ItemKind


class FakeAppointment:
    """Compose item without a compose-kind query, like an appointment.

    Every host call is appended to ``calls`` so tests can assert ordering.
    """

    item_kind = ItemKind.APPOINTMENT

    def __init__(
        self,
        attach_result: HostResult | None = None,
        insert_result: HostResult | None = None,
    ) -> None:
        self.calls: list[tuple] = []
        self.banners: list[tuple[str, Banner]] = []
        self.attach_result = attach_result or HostResult.ok()
        self.insert_result = insert_result or HostResult.ok()

    async def attach_inline_image(self, data: bytes, file_name: str) -> HostResult:
        self.calls.append(("attach", file_name, data))
        return self.attach_result

    async def set_signature_html(self, markup: str) -> HostResult:
        self.calls.append(("insert", markup))
        return self.insert_result

    def show_actionable_banner(self, banner_id: str, banner: Banner) -> None:
        self.calls.append(("banner", banner_id))
        self.banners.append((banner_id, banner))

    @property
    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]

    @property
    def inserted_markup(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == "insert"]


class FakeMessage(FakeAppointment):
    """Message compose item; answers the compose-kind query."""

    item_kind = ItemKind.MESSAGE

    def __init__(self, compose_kind: str = "newMail", compose_result: HostResult | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.compose_result = compose_result or HostResult.ok(compose_kind)

    async def get_compose_kind(self) -> HostResult:
        self.calls.append(("compose_kind",))
        return self.compose_result


@pytest.fixture
def make_message():
    return FakeMessage


@pytest.fixture
def make_appointment():
    return FakeAppointment


@pytest.fixture
def make_event():
    """Factory for a ComposeEvent whose completion is a MagicMock."""

    def _make(item, user_id: str = "user@example.com"):
        done = MagicMock()
        event = ComposeEvent(user_id=user_id, item=item, on_completed=done)
        event.done_mock = done  # type: ignore[attr-defined]
        return event

    return _make


@pytest.fixture
def fake_redis():
    """In-memory mock that behaves like redis.asyncio.Redis for the hash commands we use."""

    store: dict[str, dict[str, str]] = {}

    redis = AsyncMock()

    async def _hget(key, field):
        return store.get(key, {}).get(field)

    async def _hset(key, field, value):
        created = field not in store.setdefault(key, {})
        store[key][field] = value
        return 1 if created else 0

    async def _hdel(key, *fields):
        bucket = store.get(key, {})
        count = 0
        for f in fields:
            if f in bucket:
                del bucket[f]
                count += 1
        return count

    async def _ping():
        return True

    redis.hget = AsyncMock(side_effect=_hget)
    redis.hset = AsyncMock(side_effect=_hset)
    redis.hdel = AsyncMock(side_effect=_hdel)
    redis.ping = AsyncMock(side_effect=_ping)

    redis._store = store  # Expose for assertions
    return redis


@pytest.fixture
def memory_store():
    """Dict-backed PreferenceStore with a helper to seed a user."""

    class _MemoryStore:
        def __init__(self) -> None:
            self.data: dict[tuple[str, str], str] = {}

        async def get(self, user_id, key):
            return self.data.get((user_id, key))

        async def set(self, user_id, key, value):
            self.data[(user_id, key)] = value

        async def delete(self, user_id, key):
            self.data.pop((user_id, key), None)

        def seed(self, user_id, user_info=None, **slots):
            if user_info is not None:
                self.data[(user_id, "user_info")] = json.dumps(user_info)
            for key, value in slots.items():
                self.data[(user_id, key)] = value

    return _MemoryStore()
