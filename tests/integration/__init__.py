"""Integration tests for the HTTP API.

Coverage:
    - POST /chat and thread history with a mocked Assistants client
    - Error rendering for failed, timed out and unavailable runs
    - POST/OPTIONS /api/search with Brave replaced by httpx.MockTransport
    - Origin checks and CORS headers

Requests go through the real app via httpx.ASGITransport; route
dependencies are swapped with FastAPI dependency overrides.
"""
