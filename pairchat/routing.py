"""
Project-level Channels routing.

Keeping routing in the project package ensures `pairchat.asgi` can import it.
"""

from pairchat.realtime.routing import websocket_urlpatterns

__all__ = ["websocket_urlpatterns"]
