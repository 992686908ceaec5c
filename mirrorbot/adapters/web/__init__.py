"""Keep-alive web surface."""

from mirrorbot.adapters.web.server import create_app, start_keep_alive

__all__ = ["create_app", "start_keep_alive"]
