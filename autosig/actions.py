"""Action registry – named entry points the host invokes on lifecycle events.

Handlers and middleware follow the ``(handler, event, data)`` convention:
``data`` carries the registry's workflow data (the preference store, ...).
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Awaitable, Callable

from autosig.services.host import ComposeEvent

logger = logging.getLogger(__name__)

Handler = Callable[[ComposeEvent, dict[str, Any]], Awaitable[Any]]
Middleware = Callable[[Handler, ComposeEvent, dict[str, Any]], Awaitable[Any]]


class UnknownActionError(LookupError):
    """Raised when dispatching an action name nobody associated."""


class ActionRegistry:
    def __init__(self) -> None:
        self._actions: dict[str, Handler] = {}
        self._middleware: list[Middleware] = []
        self._data: dict[str, Any] = {}

    # ── Workflow data ─────────────────────────────────────────────────
    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    # ── Registration ──────────────────────────────────────────────────
    def associate(self, name: str, handler: Handler) -> None:
        if name in self._actions:
            logger.warning("Action %s re-associated", name)
        self._actions[name] = handler

    def middleware(self, middleware: Middleware) -> None:
        self._middleware.append(middleware)

    @property
    def names(self) -> list[str]:
        return sorted(self._actions)

    # ── Dispatch ──────────────────────────────────────────────────────
    async def dispatch(self, name: str, event: ComposeEvent) -> Any:
        try:
            handler = self._actions[name]
        except KeyError:
            raise UnknownActionError(name) from None

        data = {**self._data, "action": name}
        wrapped: Handler = handler
        for mw in reversed(self._middleware):
            wrapped = partial(mw, wrapped)
        return await wrapped(event, data)
