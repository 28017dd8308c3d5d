"""FastAPI proxy module for ShopAssist.

This module contains the FastAPI application and the relay endpoints that
validate chat, session and feedback requests before forwarding them to the
remote assistant API.
"""
