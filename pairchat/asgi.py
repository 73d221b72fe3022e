"""
ASGI config for the pairchat project.

It exposes the ASGI callable as a module-level variable named ``application``.
"""

import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "pairchat.settings")

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from channels.security.websocket import AllowedHostsOriginValidator  # noqa: E402
from django.conf import settings  # noqa: E402
from django.core.asgi import get_asgi_application  # noqa: E402

# Initialise Django before importing anything that touches models or settings.
django_asgi_app = get_asgi_application()

from pairchat.middleware import WebSocketApiKeyMiddleware  # noqa: E402
from pairchat.routing import websocket_urlpatterns  # noqa: E402

# Channels router for WebSockets.
#
# AllowedHostsOriginValidator (when DEBUG is False) rejects handshakes whose
# Origin host is not in DJANGO_ALLOWED_HOSTS.
websocket_app = WebSocketApiKeyMiddleware(URLRouter(websocket_urlpatterns))
if not settings.DEBUG:
    websocket_app = AllowedHostsOriginValidator(websocket_app)

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": websocket_app,
    }
)
