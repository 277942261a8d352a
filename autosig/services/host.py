"""Host-facing types – the compose item, its async results and the event handle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from autosig.utils.enums import AsyncStatus, ItemKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostResult:
    """Outcome of one asynchronous host call."""

    status: AsyncStatus
    value: Any = None
    error: Any = None

    @property
    def succeeded(self) -> bool:
        return self.status == AsyncStatus.SUCCEEDED

    @classmethod
    def ok(cls, value: Any = None) -> HostResult:
        return cls(status=AsyncStatus.SUCCEEDED, value=value)

    @classmethod
    def failed(cls, error: Any = None) -> HostResult:
        return cls(status=AsyncStatus.FAILED, error=error)


@dataclass(frozen=True)
class Banner:
    """Actionable information bar shown when no signature is configured."""

    message: str
    action_text: str
    command_id: str
    icon: str
    kind: str = "insightMessage"
    action_type: str = "showTaskPane"


class ComposeItem(Protocol):
    """The item being composed, as exposed by the host.

    Message items additionally provide ``async get_compose_kind() -> HostResult``;
    appointment items do not, which is how the compose kind capability is detected.
    """

    item_kind: ItemKind | str

    async def attach_inline_image(self, data: bytes, file_name: str) -> HostResult: ...

    async def set_signature_html(self, markup: str) -> HostResult: ...

    def show_actionable_banner(self, banner_id: str, banner: Banner) -> None: ...


class ComposeEvent:
    """Handle for one compose-begin activation.

    The host waits until :meth:`completed` is signalled; it must happen
    exactly once per activation.
    """

    def __init__(
        self,
        user_id: str,
        item: ComposeItem,
        on_completed: Callable[[], None] | None = None,
    ) -> None:
        self.user_id = user_id
        self.item = item
        self._on_completed = on_completed
        self._completed = False

    @property
    def is_completed(self) -> bool:
        return self._completed

    def completed(self) -> None:
        if self._completed:
            logger.warning("Completion already signalled for user %s, ignoring", self.user_id)
            return
        self._completed = True
        if self._on_completed is not None:
            self._on_completed()

    def __repr__(self) -> str:
        return f"<ComposeEvent user={self.user_id!r} completed={self._completed}>"
