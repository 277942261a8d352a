"""Tests for text utilities."""

from __future__ import annotations

import pytest

from autosig.config import settings
from autosig.utils.text import is_present, render_field


class TestIsPresent:
    @pytest.mark.parametrize("value", [None, ""])
    def test_absent(self, value):
        assert is_present(value) is False

    @pytest.mark.parametrize("value", ["x", " ", "0", 0, False, []])
    def test_present(self, value):
        # only None and the empty string count as absent
        assert is_present(value) is True


class TestRenderField:
    def test_none_is_empty(self):
        assert render_field(None) == ""

    def test_verbatim_by_default(self):
        assert render_field("<i>x</i> & y") == "<i>x</i> & y"

    def test_escaped_when_enabled(self, monkeypatch):
        monkeypatch.setattr(settings, "ESCAPE_USER_FIELDS", True)
        assert render_field("<i>'x'</i> & y") == "&lt;i&gt;&#x27;x&#x27;&lt;/i&gt; &amp; y"
