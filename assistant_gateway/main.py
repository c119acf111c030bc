"""Gateway launcher.

Serves the chat API (``/chat``), the PDF search proxy (``/api/search``) and
the NiceGUI chat widget. ``RUN_MODE=integrated`` (the default) mounts the
widget at ``/`` of the API server; ``RUN_MODE=separate`` starts the widget as
its own process on port 8080, talking to the API through ``API_BASE_URL``.

Settings are read from the environment, after ``.env`` is loaded.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# OPENAI_API_KEY, ASSISTANT_ID and BRAVE_SEARCH_API_KEY may live in .env
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

UI_PORT = 8080


def _bind() -> tuple[str, int]:
    return os.getenv("HOST", "0.0.0.0"), int(os.getenv("PORT", "8000"))


def run_integrated() -> None:
    """Serve the gateway API with the chat widget mounted at ``/``."""
    import uvicorn
    from nicegui import ui

    from assistant_gateway.api.app import create_app
    from assistant_gateway.ui.chat_page import chat_page  # noqa: F401 - registers "/"

    gateway = create_app()
    ui.run_with(
        gateway,
        title="Assistant",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "assistant-gateway-secret"),
    )

    host, port = _bind()
    logger.info(f"Chat widget on http://localhost:{port}/")
    logger.info("Chat API on /chat, PDF search on /api/search, docs on /docs")

    uvicorn.run(gateway, host=host, port=port, log_level=os.getenv("LOG_LEVEL", "info").lower())


def run_separate() -> None:
    """Run the gateway API and the chat widget as two processes.

    Stops both when either exits or on Ctrl+C.
    """
    import subprocess
    import time

    host, port = _bind()
    api_cmd = [
        sys.executable, "-m", "uvicorn", "assistant_gateway.api.app:app",
        "--host", host, "--port", str(port),
    ]
    widget_cmd = [sys.executable, "-m", "assistant_gateway.ui.chat_page"]

    logger.info(f"Gateway API on http://localhost:{port}")
    api_base = os.getenv("API_BASE_URL", f"http://localhost:{port}")
    logger.info(f"Chat widget on http://localhost:{UI_PORT}, calling {api_base}")

    processes = [subprocess.Popen(api_cmd), subprocess.Popen(widget_cmd)]
    try:
        while all(proc.poll() is None for proc in processes):
            time.sleep(1)
        logger.warning("A gateway process exited, stopping the other")
    except KeyboardInterrupt:
        logger.info("Stopping gateway processes...")
    finally:
        for proc in processes:
            proc.terminate()
            proc.wait()


def main() -> None:
    """Start the gateway in the mode named by ``RUN_MODE``."""
    mode = os.getenv("RUN_MODE", "integrated").lower()
    if mode not in {"integrated", "separate"}:
        logger.warning(f"Unknown RUN_MODE {mode!r}, using integrated")
        mode = "integrated"

    logger.info(f"Assistant gateway starting ({mode})")
    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
