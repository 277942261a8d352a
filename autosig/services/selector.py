"""Template selector – compose kind + stored slot → renderer id."""

from __future__ import annotations

import logging
from typing import Any

from autosig.services.preferences import PreferenceSnapshot
from autosig.utils.enums import ComposeKind, PreferenceSlot, TemplateId

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = TemplateId.TEMPLATE_A


def resolve_slot(compose_kind: ComposeKind | str) -> PreferenceSlot:
    """Replies and forwards have their own slot; everything else uses newMail."""
    if compose_kind == ComposeKind.REPLY:
        return PreferenceSlot.REPLY
    if compose_kind == ComposeKind.FORWARD:
        return PreferenceSlot.FORWARD
    return PreferenceSlot.NEW_MAIL


def _parse_template_id(raw: Any) -> TemplateId | None:
    if not isinstance(raw, str) or not raw:
        return None
    try:
        return TemplateId(raw)
    except ValueError:
        return None


def select_template(
    compose_kind: ComposeKind | str,
    preferences: PreferenceSnapshot,
) -> TemplateId:
    """Pick the template for *compose_kind*; unrecognised ids fall back to A."""
    slot = resolve_slot(compose_kind)
    raw = preferences.slot(slot)
    template = _parse_template_id(raw)
    if template is None:
        if raw:
            logger.debug("Unknown template id %r in slot %s, using default", raw, slot.value)
        return DEFAULT_TEMPLATE
    return template
