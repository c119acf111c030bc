"""NiceGUI interface - thin presentation layer for the chat widget.

Responsibilities:
    - Conversation display with assistant markdown rendering
    - Thread continuity across turns and "new chat"
    - PDF search panel backed by the search proxy
    - Persian/English strings with right-to-left layout

Contains minimal business logic. Delegates all operations to the API.
"""
