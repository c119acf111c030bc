"""FastAPI endpoints for the assistant gateway.

HTTP routes with async request handling.

Endpoints:
    - GET /health: Service health status
    - POST /chat: One chat turn against the assistant
    - GET /chat/threads/{id}/messages: Thread history
    - POST /api/search: PDF search proxy
"""

from assistant_gateway.api.app import app, create_app

__all__ = ["app", "create_app"]
