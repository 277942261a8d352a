"""Composition orchestrator – select, render, attach (if needed), insert, complete.

Every host call is awaited in turn, so the inline logo attachment always
exists before markup referencing it via ``cid:`` is inserted. Host failures
never abort a composition: they are logged and the sequence continues, and
the event's completion is signalled exactly once on every path.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from autosig.services.host import ComposeEvent, ComposeItem, HostResult
from autosig.services.preferences import PreferenceSnapshot
from autosig.services.selector import select_template
from autosig.services.templates import SignatureArtifact, render_signature
from autosig.utils.enums import ComposeKind, ComposeState

logger = logging.getLogger(__name__)


async def call_host(
    operation: str,
    call: Callable[..., Awaitable[HostResult]],
    *args: Any,
) -> HostResult:
    """Invoke and await a host call, turning exceptions into a failed result."""
    try:
        result = await call(*args)
    except Exception as e:
        logger.warning("host call %s failed: %s", operation, e)
        return HostResult.failed(e)

    if not result.succeeded:
        logger.warning("host call %s failed: %s", operation, result.error)
    return result


async def resolve_compose_kind(item: ComposeItem) -> ComposeKind:
    """Ask the host what is being composed; items without the query are appointments."""
    get_compose_kind = getattr(item, "get_compose_kind", None)
    if get_compose_kind is None:
        return ComposeKind.NEW_MAIL

    result = await call_host("get_compose_kind", get_compose_kind)
    if not result.succeeded:
        return ComposeKind.NEW_MAIL

    try:
        return ComposeKind(result.value)
    except ValueError:
        logger.warning("Unrecognised compose kind %r, treating as newMail", result.value)
        return ComposeKind.NEW_MAIL


class CompositionRequest:
    """One signature composition for one compose event."""

    def __init__(self, event: ComposeEvent, preferences: PreferenceSnapshot) -> None:
        self.event = event
        self.preferences = preferences
        self.state = ComposeState.IDLE

    def _advance(self, state: ComposeState) -> None:
        logger.debug("compose user=%s %s -> %s", self.event.user_id, self.state.value, state.value)
        self.state = state

    async def run(self, compose_kind: ComposeKind | str | None = None) -> SignatureArtifact | None:
        artifact: SignatureArtifact | None = None
        item = self.event.item
        try:
            if compose_kind is None:
                self._advance(ComposeState.RESOLVING_COMPOSE_KIND)
                compose_kind = await resolve_compose_kind(item)

            self._advance(ComposeState.SELECTING)
            template = select_template(compose_kind, self.preferences)

            self._advance(ComposeState.RENDERING)
            artifact = render_signature(template, self.preferences.profile)

            if artifact.has_image:
                self._advance(ComposeState.ATTACHING_IMAGE)
                await call_host(
                    "attach_inline_image",
                    item.attach_inline_image,
                    artifact.image_data,
                    artifact.image_name,
                )

            self._advance(ComposeState.INSERTING)
            await call_host("set_signature_html", item.set_signature_html, artifact.markup)

            logger.info(
                "Signature %s inserted for user=%s compose=%s image=%s",
                template.value,
                self.event.user_id,
                getattr(compose_kind, "value", compose_kind),
                artifact.image_name,
            )
        except Exception as e:
            logger.error("Composition failed for user=%s: %s", self.event.user_id, e)
        finally:
            self._advance(ComposeState.COMPLETED)
            self.event.completed()
        return artifact


async def compose(
    event: ComposeEvent,
    compose_kind: ComposeKind | str | None,
    preferences: PreferenceSnapshot,
) -> SignatureArtifact | None:
    """Compose and insert the signature for *event*, then signal completion."""
    return await CompositionRequest(event, preferences).run(compose_kind)
