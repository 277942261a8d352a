"""Tests for the preference gate and command-id resolution."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, patch

import pytest

from autosig.config import settings
from autosig.services.gate import (
    build_setup_banner,
    display_setup_banner,
    handle_compose_begin,
    resolve_command_id,
)
from autosig.utils.enums import ItemKind

USER = "user@example.com"
PROFILE = {"name": "A. Lee", "email": "a@x.com"}


class TestResolveCommandId:
    def test_appointment(self):
        assert resolve_command_id(ItemKind.APPOINTMENT) == "MRCS_TpBtn1"

    def test_appointment_string(self):
        assert resolve_command_id("appointment") == settings.APPOINTMENT_COMMAND_ID

    def test_message(self):
        assert resolve_command_id(ItemKind.MESSAGE) == "MRCS_TpBtn0"

    def test_anything_else_is_message(self):
        assert resolve_command_id("note") == settings.MESSAGE_COMMAND_ID


class TestSetupBanner:
    def test_banner_fields(self):
        banner = build_setup_banner(ItemKind.MESSAGE)
        assert banner.message == settings.SETUP_BANNER_MESSAGE
        assert banner.action_text == "Set signatures"
        assert banner.command_id == settings.MESSAGE_COMMAND_ID
        assert banner.kind == "insightMessage"
        assert banner.action_type == "showTaskPane"

    def test_display_uses_item_kind(self, make_appointment):
        item = make_appointment()
        display_setup_banner(item)
        banner_id, banner = item.banners[0]
        assert banner_id == settings.SETUP_BANNER_ID
        assert banner.command_id == settings.APPOINTMENT_COMMAND_ID


@pytest.mark.asyncio
async def test_missing_preferences_show_banner(memory_store, make_message, make_event):
    item = make_message()
    event = make_event(item)

    with patch("autosig.services.gate.compose", new_callable=AsyncMock) as compose:
        await handle_compose_begin(event, memory_store)

    compose.assert_not_called()
    assert item.call_names == ["banner"]
    assert item.banners[0][1].command_id == settings.MESSAGE_COMMAND_ID
    event.done_mock.assert_called_once()


@pytest.mark.asyncio
async def test_slots_without_user_info_count_as_missing(memory_store, make_message, make_event):
    memory_store.seed(USER, newMail="templateB")
    item = make_message()
    event = make_event(item)

    await handle_compose_begin(event, memory_store)

    assert item.call_names == ["banner"]


@pytest.mark.asyncio
async def test_malformed_user_info_shows_banner(memory_store, make_message, make_event):
    memory_store.data[(USER, "user_info")] = "{not json"
    item = make_message()
    event = make_event(item)

    await handle_compose_begin(event, memory_store)

    assert item.call_names == ["banner"]
    event.done_mock.assert_called_once()


@pytest.mark.asyncio
async def test_present_preferences_compose(memory_store, make_message, make_event):
    memory_store.seed(USER, PROFILE, forward="templateC")
    item = make_message("forward")
    event = make_event(item)

    await handle_compose_begin(event, memory_store)

    assert item.call_names == ["compose_kind", "insert"]
    assert item.inserted_markup == ["A. Lee"]
    event.done_mock.assert_called_once()


@pytest.mark.asyncio
async def test_appointment_skips_compose_kind_query(memory_store, make_appointment, make_event):
    memory_store.seed(USER, PROFILE, newMail="templateB", reply="templateC")
    item = make_appointment()
    event = make_event(item)

    await handle_compose_begin(event, memory_store)

    assert item.call_names == ["insert"]
    assert "<strong>A. Lee</strong>" in item.inserted_markup[0]


@pytest.mark.asyncio
async def test_store_failure_completes_without_composing(make_message, make_event):
    store = AsyncMock()
    store.get = AsyncMock(side_effect=ConnectionError("redis down"))
    item = make_message()
    event = make_event(item)

    await handle_compose_begin(event, store)

    assert item.calls == []
    event.done_mock.assert_called_once()


@pytest.mark.asyncio
async def test_banner_failure_still_completes(memory_store, make_message, make_event, caplog):
    item = make_message()

    def _raise(banner_id, banner):
        raise ConnectionError("notification bridge closed")

    item.show_actionable_banner = _raise
    event = make_event(item)

    with caplog.at_level(logging.ERROR, logger="autosig.services.gate"):
        await handle_compose_begin(event, memory_store)

    assert event.is_completed
    event.done_mock.assert_called_once()
    assert "Failed to show setup banner" in caplog.text


@pytest.mark.asyncio
async def test_compose_kind_raise_still_completes(memory_store, make_message, make_event):
    memory_store.seed(USER, PROFILE, newMail="templateB", reply="templateC")
    item = make_message("reply")

    def _raise():
        raise RuntimeError("bridge rejected call")

    item.get_compose_kind = _raise
    event = make_event(item)

    await handle_compose_begin(event, memory_store)

    # newMail slot wins when the compose kind is unknown
    assert item.call_names == ["insert"]
    assert "<strong>A. Lee</strong>" in item.inserted_markup[0]
    event.done_mock.assert_called_once()
