"""Logging middleware – one log line per dispatched action."""

from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable

from autosig.services.host import ComposeEvent

logger = logging.getLogger("autosig.actions")


class ActionLoggingMiddleware:
    """Log each action with timing, user and item kind."""

    async def __call__(
        self,
        handler: Callable[[ComposeEvent, dict[str, Any]], Awaitable[Any]],
        event: ComposeEvent,
        data: dict[str, Any],
    ) -> Any:
        start = time.perf_counter()
        action = data.get("action", "unknown")
        item_kind = getattr(event.item, "item_kind", None)
        item_kind = getattr(item_kind, "value", item_kind)

        try:
            result = await handler(event, data)
            elapsed = (time.perf_counter() - start) * 1000
            logger.info(
                "action=%s user=%s item=%s completed=%s elapsed=%.1fms",
                action,
                event.user_id,
                item_kind,
                event.is_completed,
                elapsed,
            )
            return result
        except Exception as e:
            elapsed = (time.perf_counter() - start) * 1000
            logger.error(
                "action=%s user=%s item=%s elapsed=%.1fms error=%s",
                action,
                event.user_id,
                item_kind,
                elapsed,
                e,
            )
            raise
