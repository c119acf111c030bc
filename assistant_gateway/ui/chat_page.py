"""NiceGUI chat widget with a PDF search panel."""

import os
import re
from datetime import datetime
from typing import Any

import httpx
from nicegui import ui

from assistant_gateway.ui.i18n import default_locale, text_direction, translate

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

# Runs can take a while; the server gives up after ASSISTANT_MAX_WAIT.
CHAT_TIMEOUT = 180.0

_INLINE_RULES: list[tuple[str, str]] = [
    (
        r"```(\w*)\n?([\s\S]*?)```",
        r'<pre class="bg-slate-800 text-slate-100 rounded-lg p-3 my-2 overflow-x-auto '
        r'text-xs" dir="ltr"><code>\2</code></pre>',
    ),
    (r"`([^`]+)`", r'<code class="bg-slate-200 px-1 rounded text-xs">\1</code>'),
    (r"\*\*(.+?)\*\*", r"<strong>\1</strong>"),
    (r"\*([^*]+)\*", r"<em>\1</em>"),
    (r"\[([^\]]+)\]\(([^)]+)\)", r'<a href="\2" class="underline" target="_blank">\1</a>'),
    # Assistant file citations look like 【4:0†source】.
    (r"【[^】]*】", ""),
]

_LIST_PATTERNS = {
    "ul": re.compile(r"^[-*]\s+"),
    "ol": re.compile(r"^\d+\.\s+"),
}


def markdown_to_html(text: str) -> str:
    """Render the small markdown subset assistant replies use."""
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    for pattern, replacement in _INLINE_RULES:
        text = re.sub(pattern, replacement, text)

    out: list[str] = []
    open_list: str | None = None
    for line in text.split("\n"):
        stripped = line.strip()
        kind = next((k for k, p in _LIST_PATTERNS.items() if p.match(stripped)), None)
        if kind != open_list and open_list is not None:
            out.append(f"</{open_list}>")
            open_list = None
        if kind is None:
            out.append(line)
            continue
        if open_list is None:
            out.append(f'<{kind} class="list-inside my-2">')
            open_list = kind
        out.append(f"<li>{_LIST_PATTERNS[kind].sub('', stripped)}</li>")
    if open_list is not None:
        out.append(f"</{open_list}>")

    return "<br>".join(out)


CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Vazirmatn:wght@400;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Vazirmatn', sans-serif; }
    body { background: #eef2f7; }
    .widget { background: white; border-radius: 14px; box-shadow: 0 4px 16px rgba(0,0,0,.08); }
    .widget-header { background: #0f766e; }
    .bubble-user { background: #0f766e; color: white; border-radius: 16px 16px 4px 16px; }
    .bubble-assistant { background: #f1f5f9; color: #0f172a; border-radius: 16px 16px 16px 4px; }
    .search-hit { border-bottom: 1px solid #e2e8f0; }
</style>
"""


class ChatSession:
    """Widget state for one browser tab."""

    def __init__(self) -> None:
        self.thread_id: str | None = None
        self.messages: list[dict[str, Any]] = []
        self.is_waiting: bool = False
        self.search_query: str = ""
        self.search_page: int = 1

    def reset(self) -> None:
        self.thread_id = None
        self.messages = []


def _message_time(created_at: int) -> str:
    if not created_at:
        return ""
    return datetime.fromtimestamp(created_at).strftime("%H:%M")


async def post_chat(message: str, thread_id: str | None) -> dict[str, Any]:
    """Send one chat turn to the gateway API.

    Raises:
        httpx.HTTPError: On transport failure or an error status.
    """
    async with httpx.AsyncClient(timeout=CHAT_TIMEOUT) as client:
        response = await client.post(
            f"{API_BASE_URL}/chat",
            json={"message": message, "threadId": thread_id},
        )
        response.raise_for_status()
        return response.json()


async def post_search(query: str, page: int) -> dict[str, Any]:
    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.post(
            f"{API_BASE_URL}/api/search",
            json={"query": query, "page": page},
        )
        response.raise_for_status()
        return response.json()


def _error_text(error: httpx.HTTPError) -> str:
    if isinstance(error, httpx.HTTPStatusError):
        try:
            body = error.response.json()
        except ValueError:
            return f"HTTP {error.response.status_code}"
        detail = body.get("error") or body.get("detail")
        if isinstance(detail, dict):
            return detail.get("message", str(detail))
        return str(detail or f"HTTP {error.response.status_code}")
    return f"Connection failed: {error}"


@ui.page("/")
def chat_page() -> None:
    """Chat widget page."""
    locale = default_locale()

    def t(key: str) -> str:
        return translate(key, locale)

    ui.add_head_html(CUSTOM_CSS)
    ui.query("html").props(f'lang="{locale}" dir="{text_direction(locale)}"')
    session = ChatSession()

    messages_container: ui.column
    results_container: ui.column
    input_field: ui.textarea
    send_btn: ui.button

    def render_message(msg: dict[str, Any]) -> None:
        is_user = msg.get("role") == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "bubble-user" if is_user else "bubble-assistant"
        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[75%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if is_user:
                        content = msg.get("content", "").replace("\n", "<br>")
                    else:
                        content = markdown_to_html(msg.get("content", ""))
                    ui.html(content, sanitize=False).classes("text-sm leading-relaxed")
                ui.label(_message_time(msg.get("created_at", 0))).classes(
                    "text-[10px] text-gray-400"
                )

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not session.messages:
                with ui.column().classes("w-full h-48 items-center justify-center"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label(t("empty")).classes("text-gray-400")
            for msg in session.messages:
                render_message(msg)
            if session.is_waiting:
                with ui.row().classes("items-center gap-2"):
                    ui.spinner("dots", size="lg", color="teal")
                    ui.label(t("thinking")).classes("text-sm text-gray-500 italic")

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        if not text or session.is_waiting:
            return

        input_field.value = ""
        session.is_waiting = True
        send_btn.disable()
        session.messages.append({"role": "user", "content": text, "created_at": 0})
        refresh_messages()

        try:
            data = await post_chat(text, session.thread_id)
            session.thread_id = data["threadId"]
            session.messages = data["messages"]
        except httpx.HTTPError as e:
            ui.notify(f"{t('error')}: {_error_text(e)}", type="negative")
        finally:
            session.is_waiting = False
            send_btn.enable()
            refresh_messages()

    def new_chat() -> None:
        session.reset()
        refresh_messages()

    def render_results(data: dict[str, Any]) -> None:
        results_container.clear()
        with results_container:
            results = data.get("results", [])
            if not results:
                ui.label(t("search_empty")).classes("text-sm text-gray-400")
            for hit in results:
                with ui.column().classes("w-full search-hit py-2 gap-0"):
                    ui.link(hit["title"], hit["url"], new_tab=True).classes("font-semibold")
                    ui.label(hit.get("description", "")).classes("text-xs text-gray-600")
            with ui.row().classes("w-full justify-between items-center pt-2"):
                ui.button(t("previous"), on_click=lambda: run_search(session.search_page - 1)).props(
                    "flat dense"
                ).set_enabled(session.search_page > 1)
                ui.label(f"{t('page')} {data.get('page', session.search_page)}").classes("text-xs")
                ui.button(t("next"), on_click=lambda: run_search(session.search_page + 1)).props(
                    "flat dense"
                ).set_enabled(bool(results))

    async def run_search(page: int = 1) -> None:
        query = (search_field.value or "").strip()
        if not query:
            return
        try:
            data = await post_search(query, max(page, 1))
        except httpx.HTTPError as e:
            ui.notify(f"{t('error')}: {_error_text(e)}", type="negative")
            return
        session.search_query = query
        session.search_page = data.get("page", page)
        render_results(data)

    # === UI Layout ===
    with ui.row().classes("w-full max-w-6xl mx-auto p-4 gap-4 items-start no-wrap"):
        with ui.column().classes("flex-grow widget overflow-hidden").style(
            "height: calc(100vh - 2rem)"
        ):
            with ui.row().classes("w-full widget-header px-5 py-4 items-center justify-between"):
                ui.label(t("title")).classes("text-lg font-semibold text-white")
                ui.button(icon="add", on_click=new_chat).props("flat round color=white").tooltip(
                    t("new_chat")
                )

            with ui.scroll_area().classes("flex-grow w-full"):
                messages_container = ui.column().classes("w-full gap-3 p-4")
                refresh_messages()

            with ui.row().classes("w-full p-3 gap-2 items-end border-t"):
                input_field = (
                    ui.textarea(placeholder=t("placeholder"))
                    .props("autogrow outlined dense rows=1")
                    .classes("flex-grow")
                    .on("keydown.enter.prevent", send_message)
                )
                send_btn = ui.button(icon="send", on_click=send_message).props(
                    "round unelevated color=teal"
                )

        with ui.column().classes("w-80 widget p-4 gap-2"):
            ui.label(t("search_title")).classes("font-semibold")
            search_field = (
                ui.input(placeholder=t("search_placeholder"))
                .props("outlined dense clearable")
                .classes("w-full")
                .on("keydown.enter", lambda: run_search(1))
            )
            results_container = ui.column().classes("w-full gap-0")


def main() -> None:
    ui.run(title="Assistant", port=8080, reload=False)


if __name__ in {"__main__", "__mp_main__"}:
    main()
