"""Signature templates – three renderers, one per logo shipping strategy.

- Template A embeds the logo: the bytes are attached inline and the markup
  references them through a ``cid:`` token equal to the attachment name.
- Template B references a remotely hosted logo, nothing is attached.
- Template C is text only.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable

from autosig.config import settings
from autosig.services.preferences import UserProfile
from autosig.utils.enums import TemplateId
from autosig.utils.text import is_present, render_field

_ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"

_LOGO_CELL_STYLE = "border-right: 1px solid #000000; padding-right: 5px;"
_DETAILS_CELL_STYLE = "padding-left: 5px;"


@dataclass(frozen=True)
class SignatureArtifact:
    """Rendered signature plus the inline image it depends on, if any."""

    markup: str
    image_data: bytes | None = None
    image_name: str | None = None

    def __post_init__(self) -> None:
        if (self.image_data is None) != (self.image_name is None):
            raise ValueError("image_data and image_name must be set together")

    @property
    def has_image(self) -> bool:
        return self.image_data is not None


class MarkupBuilder:
    """Accumulates signature markup; user fields go through :func:`render_field`."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def raw(self, markup: str) -> MarkupBuilder:
        self._parts.append(markup)
        return self

    def field(self, value: str | None) -> MarkupBuilder:
        self._parts.append(render_field(value))
        return self

    def br(self) -> MarkupBuilder:
        self._parts.append("<br/>")
        return self

    def line(self, value: str | None) -> MarkupBuilder:
        return self.field(value).br()

    def optional_line(self, value: str | None) -> MarkupBuilder:
        if is_present(value):
            self.line(value)
        return self

    def build(self) -> str:
        return "".join(self._parts)


@lru_cache(maxsize=4)
def _read_logo(path: str) -> bytes:
    return Path(path).read_bytes()


def load_logo_bytes() -> bytes:
    """Return the logo embedded by template A (bundled asset unless LOGO_PATH is set)."""
    path = settings.LOGO_PATH or str(_ASSETS_DIR / "sample-logo.png")
    return _read_logo(path)


def _greeting(builder: MarkupBuilder, profile: UserProfile) -> None:
    builder.optional_line(profile.greeting)


def _contact_cell(builder: MarkupBuilder, profile: UserProfile, *, include_job: bool) -> None:
    """Right-hand cell: name, pronoun, [job], email, phone – in that order."""
    builder.raw(f"<td style='{_DETAILS_CELL_STYLE}'>")
    builder.raw("<strong>").field(profile.name).raw("</strong>")
    if is_present(profile.pronoun):
        builder.raw("&nbsp;").field(profile.pronoun)
    builder.br()
    if include_job:
        builder.optional_line(profile.job)
    builder.line(profile.email)
    builder.optional_line(profile.phone)
    builder.raw("</td>")


def render_template_a(profile: UserProfile) -> SignatureArtifact:
    """Logo attached inline and referenced by ``cid:``."""
    logo_name = settings.LOGO_FILE_NAME
    builder = MarkupBuilder()
    _greeting(builder, profile)

    builder.raw("<table><tr>")
    builder.raw(
        f"<td style='{_LOGO_CELL_STYLE}'><img src='cid:{logo_name}' "
        f"alt='{settings.LOGO_ALT_TEXT}' width='{settings.LOGO_WIDTH}' "
        f"height='{settings.LOGO_HEIGHT}' /></td>"
    )
    _contact_cell(builder, profile, include_job=True)
    builder.raw("</tr></table>")

    return SignatureArtifact(
        markup=builder.build(),
        image_data=load_logo_bytes(),
        image_name=logo_name,
    )


def render_template_b(profile: UserProfile) -> SignatureArtifact:
    """Logo referenced by absolute URL; nothing to attach."""
    builder = MarkupBuilder()
    _greeting(builder, profile)

    builder.raw("<table><tr>")
    builder.raw(
        f"<td style='{_LOGO_CELL_STYLE}'><img src='{settings.REMOTE_LOGO_URL}' alt='Logo' /></td>"
    )
    _contact_cell(builder, profile, include_job=False)
    builder.raw("</tr></table>")

    return SignatureArtifact(markup=builder.build())


def render_template_c(profile: UserProfile) -> SignatureArtifact:
    """Greeting and bare name, no image."""
    builder = MarkupBuilder()
    _greeting(builder, profile)
    builder.field(profile.name)
    return SignatureArtifact(markup=builder.build())


RENDERERS: dict[TemplateId, Callable[[UserProfile], SignatureArtifact]] = {
    TemplateId.TEMPLATE_A: render_template_a,
    TemplateId.TEMPLATE_B: render_template_b,
    TemplateId.TEMPLATE_C: render_template_c,
}


def render_signature(template_id: TemplateId, profile: UserProfile) -> SignatureArtifact:
    return RENDERERS[template_id](profile)
