"""Preference gate – compose when preferences exist, otherwise prompt for setup."""

from __future__ import annotations

import logging

from autosig.config import settings
from autosig.services.composer import compose
from autosig.services.host import Banner, ComposeEvent, ComposeItem
from autosig.services.preferences import PreferenceStore, load_preferences
from autosig.utils.enums import ItemKind

logger = logging.getLogger(__name__)


def resolve_command_id(item_kind: ItemKind | str) -> str:
    """Task pane command that the setup banner action should open."""
    if item_kind == ItemKind.APPOINTMENT:
        return settings.APPOINTMENT_COMMAND_ID
    return settings.MESSAGE_COMMAND_ID


def build_setup_banner(item_kind: ItemKind | str) -> Banner:
    return Banner(
        message=settings.SETUP_BANNER_MESSAGE,
        action_text=settings.SETUP_BANNER_ACTION_TEXT,
        command_id=resolve_command_id(item_kind),
        icon=settings.SETUP_BANNER_ICON,
    )


def display_setup_banner(item: ComposeItem) -> None:
    """Show the 'set your signature' information bar (fire-and-forget)."""
    banner = build_setup_banner(item.item_kind)
    item.show_actionable_banner(settings.SETUP_BANNER_ID, banner)


async def handle_compose_begin(event: ComposeEvent, store: PreferenceStore) -> None:
    """Entry logic for a compose-begin activation.

    No stored preferences → setup banner, nothing composed.
    Otherwise the compose kind is resolved from the host and the signature
    composed. The event is completed exactly once either way.
    """
    try:
        preferences = await load_preferences(store, event.user_id)
    except Exception as e:
        logger.error("Failed to read preferences for user=%s: %s", event.user_id, e)
        event.completed()
        return

    if preferences is None:
        logger.info("No signature preferences for user=%s, showing setup banner", event.user_id)
        try:
            display_setup_banner(event.item)
        except Exception as e:
            logger.error("Failed to show setup banner for user=%s: %s", event.user_id, e)
        finally:
            event.completed()
        return

    # compose kind is resolved by the request itself
    await compose(event, None, preferences)
