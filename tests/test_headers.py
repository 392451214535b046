"""Tests for the case-insensitive header store."""

from __future__ import annotations

import pytest

from mimecraft.exceptions import MailValidationError
from mimecraft.headers import HeaderStore, canonical_name


class TestCanonicalName:
    """Canonical spelling of header names."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("to", "To"),
            ("CONTENT-TYPE", "Content-Type"),
            ("mime-version", "MIME-Version"),
            ("content-id", "Content-ID"),
            ("x-priority", "X-Priority"),
            ("reply-to", "Reply-To"),
            ("x-custom-thing", "X-Custom-Thing"),
            ("  subject ", "Subject"),
        ],
    )
    def test_canonical_name(self, name: str, expected: str) -> None:
        """Known names use their conventional spelling, others are title-cased."""
        assert canonical_name(name) == expected


class TestHeaderStore:
    """Behavioural coverage for ``HeaderStore``."""

    def test_set_and_get(self) -> None:
        """Values are retrievable with any casing."""
        store = HeaderStore()
        store.set("subject", "Hello")
        assert store.get("SUBJECT") == "Hello"
        assert store.get("Subject") == "Hello"
        assert store.get("From") is None

    def test_overwrite_keeps_first_key_and_position(self) -> None:
        """Case variants overwrite in place."""
        store = HeaderStore()
        store.set("mime-version", "1.0")
        store.set("to", "a@b")
        store.set("MIME-VERSION", "2.0")

        assert store.as_dict() == {"MIME-Version": "2.0", "To": "a@b"}
        assert len(store) == 2

    def test_render(self) -> None:
        """Headers render as CRLF terminated lines in order."""
        store = HeaderStore()
        store.set("MIME-Version", "1.0")
        store.set("to", "foo@bar")
        assert store.render() == "MIME-Version: 1.0\r\nTo: foo@bar\r\n"

    def test_render_empty(self) -> None:
        """An empty store renders nothing."""
        assert HeaderStore().render() == ""

    def test_as_dict_is_a_copy(self) -> None:
        """Changing the returned dict does not affect the store."""
        store = HeaderStore()
        store.set("To", "a@b")
        store.as_dict()["To"] = "evil"
        assert store.get("to") == "a@b"

    @pytest.mark.parametrize("value", ["Hi\r\nBcc: hidden@x", "Hi\nBcc: hidden@x", "Hi\rthere"])
    def test_line_breaks_in_value_are_rejected(self, value: str) -> None:
        """Values with CR or LF cannot add header lines."""
        store = HeaderStore()
        with pytest.raises(MailValidationError, match="line breaks"):
            store.set("Subject", value)
        assert store.as_dict() == {}

    @pytest.mark.parametrize("name", ["X-Evil\r\nBcc", "Subject:", "X\nY"])
    def test_invalid_names_are_rejected(self, name: str) -> None:
        """Names with line breaks or colons are refused."""
        with pytest.raises(MailValidationError, match="Invalid header name"):
            HeaderStore().set(name, "value")
