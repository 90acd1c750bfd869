"""Integration helpers: logging setup, ambient current context, ASGI middleware."""
