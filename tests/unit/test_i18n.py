"""Unit tests for the chat widget's interface strings."""

from unittest.mock import patch

import pytest

from assistant_gateway.ui.i18n import MESSAGES, default_locale, text_direction, translate


class TestTranslate:
    """Tests for string lookup and fallback."""

    def test_locales_share_keys(self) -> None:
        """Both locales define the same strings."""
        assert MESSAGES["en"].keys() == MESSAGES["fa"].keys()

    def test_english_lookup(self) -> None:
        """English strings are returned for en."""
        assert translate("new_chat", "en") == "New chat"

    def test_unknown_locale_falls_back_to_persian(self) -> None:
        """Unsupported locales fall back to Persian."""
        assert translate("title", "de") == MESSAGES["fa"]["title"]

    def test_unknown_key_is_returned(self) -> None:
        """A missing key is returned as-is."""
        assert translate("no_such_key", "en") == "no_such_key"


class TestLocale:
    """Tests for locale selection and text direction."""

    @pytest.mark.parametrize(
        ("locale", "direction"), [("fa", "rtl"), ("ar", "rtl"), ("ur", "rtl"), ("en", "ltr")]
    )
    def test_text_direction(self, locale: str, direction: str) -> None:
        """Right-to-left scripts get rtl."""
        assert text_direction(locale) == direction

    def test_default_locale_is_persian(self) -> None:
        """Without UI_LOCALE the widget is Persian."""
        with patch.dict("os.environ", {}, clear=True):
            assert default_locale() == "fa"

    def test_unsupported_locale_env_falls_back(self) -> None:
        """An unsupported UI_LOCALE falls back to Persian."""
        with patch.dict("os.environ", {"UI_LOCALE": "de"}, clear=True):
            assert default_locale() == "fa"

    def test_locale_env_is_case_insensitive(self) -> None:
        """UI_LOCALE is matched case-insensitively."""
        with patch.dict("os.environ", {"UI_LOCALE": "EN"}, clear=True):
            assert default_locale() == "en"
