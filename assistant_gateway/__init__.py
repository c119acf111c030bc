"""Assistant Gateway - chat widget and proxy routes in front of an OpenAI assistant.

Combines FastAPI for the HTTP API, the OpenAI Assistants API for
conversation threads and runs, NiceGUI for the chat widget, and Pydantic
for configuration and data validation.

Components:
    - assistant: thread resolution, run orchestration, result collection
    - search: Brave Search proxy filtered to PDF documents
    - api: HTTP endpoints
    - ui: chat widget
    - models: request/response schemas
"""

__version__ = "0.1.0"
