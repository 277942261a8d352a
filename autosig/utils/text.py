"""Text utilities – presence checks and the user-field escaping policy."""

from __future__ import annotations

import html
from typing import Any

from autosig.config import settings


def is_present(value: Any) -> bool:
    """Return True unless *value* is None or an empty string."""
    return value is not None and value != ""


def render_field(value: Any) -> str:
    """Render a user-supplied field for insertion into signature markup.

    Fields are inserted verbatim unless ``ESCAPE_USER_FIELDS`` is enabled.
    """
    if value is None:
        return ""
    text = str(value)
    if settings.ESCAPE_USER_FIELDS:
        return html.escape(text, quote=True)
    return text
