"""ShopAssist: chat-style shopping assistant client and relay proxy.

This package provides a thin HTTP proxy in front of an external
chat/recommendation API, plus the client-side conversation and session
state used by the terminal front end.

Modules:
    api: FastAPI proxy application and relay endpoints
    assistant: Conversation state, session directory and product rendering
    config: Environment-driven settings shared by both halves
"""

__version__ = "0.1.0"
