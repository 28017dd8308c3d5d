"""Client-side assistant state for ShopAssist.

This module holds the conversation state machine, the session directory, the
identity context and the product/message renderers used by the terminal
front end.
"""
