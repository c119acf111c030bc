"""Test package for Assistant Gateway.

Unit tests cover isolated logic and integration tests cover the HTTP API.

Structure:
    - unit/: Individual function and class tests
    - integration/: Endpoint tests through the ASGI app
    - helpers.py: SDK-shaped doubles and a deterministic clock

No test reaches the network. Leverages pytest with pytest-check for soft
assertions.
"""
