"""Per-user signature preferences – profile, template slots and their stores.

Storage layout (identical for every backend), keyed by user id:

- ``user_info`` – JSON object with the profile fields
- ``newMail`` / ``reply`` / ``forward`` – template id chosen for that compose kind
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Protocol

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession

from autosig.db.repositories.setting_repo import SettingRepo
from autosig.utils.enums import PreferenceSlot, TemplateId
from autosig.utils.text import is_present

logger = logging.getLogger(__name__)

USER_INFO_KEY = "user_info"
SLOT_KEYS = tuple(slot.value for slot in PreferenceSlot)
PROFILE_FIELDS = ("greeting", "name", "pronoun", "job", "email", "phone")


class PreferenceError(ValueError):
    """Raised when preferences being saved are incomplete or invalid."""


@dataclass(frozen=True)
class UserProfile:
    name: str
    email: str
    greeting: str | None = None
    pronoun: str | None = None
    job: str | None = None
    phone: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UserProfile:
        """Build a profile from the stored ``user_info`` object (values kept verbatim)."""
        return cls(
            name=data.get("name") or "",
            email=data.get("email") or "",
            greeting=data.get("greeting"),
            pronoun=data.get("pronoun"),
            job=data.get("job"),
            phone=data.get("phone"),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            key: getattr(self, key)
            for key in PROFILE_FIELDS
            if getattr(self, key) is not None
        }


@dataclass(frozen=True)
class PreferenceSnapshot:
    """Read-only view of one user's preferences, taken at request start."""

    profile: UserProfile
    new_mail: str | None = None
    reply: str | None = None
    forward: str | None = None

    def slot(self, slot: PreferenceSlot) -> str | None:
        match slot:
            case PreferenceSlot.REPLY:
                return self.reply
            case PreferenceSlot.FORWARD:
                return self.forward
            case _:
                return self.new_mail

    def templates(self) -> dict[str, str | None]:
        return {
            PreferenceSlot.NEW_MAIL.value: self.new_mail,
            PreferenceSlot.REPLY.value: self.reply,
            PreferenceSlot.FORWARD.value: self.forward,
        }


# ── Stores ───────────────────────────────────────────────────────────


class PreferenceStore(Protocol):
    async def get(self, user_id: str, key: str) -> str | None: ...

    async def set(self, user_id: str, key: str, value: str) -> None: ...

    async def delete(self, user_id: str, key: str) -> None: ...


class RedisPreferenceStore:
    """One Redis hash per user: ``prefs:{user_id}``."""

    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    @staticmethod
    def _key(user_id: str) -> str:
        return f"prefs:{user_id}"

    async def get(self, user_id: str, key: str) -> str | None:
        value = await self._redis.hget(self._key(user_id), key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, user_id: str, key: str, value: str) -> None:
        await self._redis.hset(self._key(user_id), key, value)

    async def delete(self, user_id: str, key: str) -> None:
        await self._redis.hdel(self._key(user_id), key)


class SqlPreferenceStore:
    """Preferences persisted in the ``user_settings`` table."""

    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, user_id: str, key: str) -> str | None:
        async with self._session_factory() as session:
            return await SettingRepo(session).get_value(user_id, key)

    async def set(self, user_id: str, key: str, value: str) -> None:
        async with self._session_factory() as session:
            await SettingRepo(session).set_value(user_id, key, value)

    async def delete(self, user_id: str, key: str) -> None:
        async with self._session_factory() as session:
            await SettingRepo(session).delete_value(user_id, key)


# ── Read / write ─────────────────────────────────────────────────────


def _parse_user_info(raw: str, user_id: str) -> dict[str, Any] | None:
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Stored user_info for %s is not valid JSON", user_id)
        return None
    if not isinstance(data, dict):
        logger.warning("Stored user_info for %s is not an object", user_id)
        return None
    return data


async def load_preferences(store: PreferenceStore, user_id: str) -> PreferenceSnapshot | None:
    """Snapshot the stored preferences for *user_id*.

    Returns None when no usable ``user_info`` blob is stored. A missing
    template slot is not an error; it is left as None.
    """
    raw = await store.get(user_id, USER_INFO_KEY)
    if not raw:
        return None

    data = _parse_user_info(raw, user_id)
    if data is None:
        return None

    slots = {key: await store.get(user_id, key) for key in SLOT_KEYS}
    return PreferenceSnapshot(
        profile=UserProfile.from_dict(data),
        new_mail=slots[PreferenceSlot.NEW_MAIL.value],
        reply=slots[PreferenceSlot.REPLY.value],
        forward=slots[PreferenceSlot.FORWARD.value],
    )


def validate_user_info(user_info: Any) -> dict[str, str]:
    """Check required profile fields and drop unknown keys."""
    if not isinstance(user_info, Mapping):
        raise PreferenceError("user_info must be an object")
    missing = [key for key in ("name", "email") if not is_present(user_info.get(key))]
    if missing:
        raise PreferenceError(f"user_info is missing required field(s): {', '.join(missing)}")
    return {
        key: str(user_info[key])
        for key in PROFILE_FIELDS
        if is_present(user_info.get(key))
    }


def validate_templates(templates: Mapping[str, Any]) -> dict[str, str | None]:
    """Check that every given slot names a known template (None clears the slot)."""
    known = {t.value for t in TemplateId}
    result: dict[str, str | None] = {}
    for key, value in templates.items():
        if key not in SLOT_KEYS:
            raise PreferenceError(f"Unknown template slot: {key!r}")
        if value is None or value == "":
            result[key] = None
            continue
        if value not in known:
            raise PreferenceError(f"Unknown template id for {key}: {value!r}")
        result[key] = value
    return result


async def save_preferences(
    store: PreferenceStore,
    user_id: str,
    user_info: Mapping[str, Any],
    templates: Mapping[str, Any] | None = None,
) -> None:
    """Validate and persist a profile plus any template slots given."""
    profile = validate_user_info(user_info)
    slots = validate_templates(templates or {})

    await store.set(user_id, USER_INFO_KEY, json.dumps(profile))
    for key, value in slots.items():
        if value is None:
            await store.delete(user_id, key)
        else:
            await store.set(user_id, key, value)

    logger.info("Preferences saved for %s (slots=%s)", user_id, sorted(slots))
