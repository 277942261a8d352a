"""Compose lifecycle actions exposed to the host."""

from __future__ import annotations

from typing import Any

from autosig.actions import ActionRegistry
from autosig.services.gate import handle_compose_begin
from autosig.services.host import ComposeEvent

CHECK_SIGNATURE_ACTION = "checkSignature"


async def check_signature(event: ComposeEvent, data: dict[str, Any]) -> None:
    """Insert the configured signature into a new item, or prompt for setup."""
    await handle_compose_begin(event, data["store"])


def register_compose_actions(registry: ActionRegistry) -> None:
    registry.associate(CHECK_SIGNATURE_ACTION, check_signature)
