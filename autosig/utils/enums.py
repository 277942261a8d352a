"""Enums used across the service."""

from __future__ import annotations

from enum import Enum


class ComposeKind(str, Enum):
    NEW_MAIL = "newMail"
    REPLY = "reply"
    FORWARD = "forward"
    APPOINTMENT = "appointment"


class PreferenceSlot(str, Enum):
    NEW_MAIL = "newMail"
    REPLY = "reply"
    FORWARD = "forward"


class TemplateId(str, Enum):
    TEMPLATE_A = "templateA"
    TEMPLATE_B = "templateB"
    TEMPLATE_C = "templateC"


class ItemKind(str, Enum):
    MESSAGE = "message"
    APPOINTMENT = "appointment"


class AsyncStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ComposeState(str, Enum):
    IDLE = "IDLE"
    RESOLVING_COMPOSE_KIND = "RESOLVING_COMPOSE_KIND"
    SELECTING = "SELECTING"
    RENDERING = "RENDERING"
    ATTACHING_IMAGE = "ATTACHING_IMAGE"
    INSERTING = "INSERTING"
    COMPLETED = "COMPLETED"
