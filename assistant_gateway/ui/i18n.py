"""Interface strings for the chat widget.

Persian is the default and fallback locale. Right-to-left locales switch the
page direction.
"""

import os

RTL_LOCALES = frozenset({"fa", "ar", "he", "ur"})

FALLBACK_LOCALE = "fa"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "title": "Assistant",
        "placeholder": "Type a message...",
        "empty": "Start a conversation",
        "thinking": "Thinking...",
        "new_chat": "New chat",
        "search_title": "PDF search",
        "search_placeholder": "Search for PDF documents...",
        "search_empty": "No PDF documents found",
        "previous": "Previous",
        "next": "Next",
        "page": "Page",
        "error": "Error",
    },
    "fa": {
        "title": "دستیار",
        "placeholder": "پیام خود را بنویسید...",
        "empty": "گفتگو را شروع کنید",
        "thinking": "در حال فکر کردن...",
        "new_chat": "گفتگوی جدید",
        "search_title": "جستجوی PDF",
        "search_placeholder": "جستجوی اسناد PDF...",
        "search_empty": "هیچ سند PDF پیدا نشد",
        "previous": "قبلی",
        "next": "بعدی",
        "page": "صفحه",
        "error": "خطا",
    },
}


def default_locale() -> str:
    locale = os.getenv("UI_LOCALE", FALLBACK_LOCALE).lower()
    return locale if locale in MESSAGES else FALLBACK_LOCALE


def translate(key: str, locale: str) -> str:
    """Look up ``key`` in ``locale``, then the fallback locale, then return the key."""
    for candidate in (locale, FALLBACK_LOCALE):
        value = MESSAGES.get(candidate, {}).get(key)
        if value is not None:
            return value
    return key


def text_direction(locale: str) -> str:
    return "rtl" if locale in RTL_LOCALES else "ltr"
