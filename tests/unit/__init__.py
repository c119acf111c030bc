"""Unit tests for individual components in isolation.

Coverage:
    - assistant/: configuration, thread resolution, run polling, messages
    - search/: page sanitizing, PDF detection, origin rules, Brave proxy

The Assistants client is a mock and time is a FakeClock, so polling bounds
are checked exactly. Leverages pytest-check for multiple assertions per test.
"""
