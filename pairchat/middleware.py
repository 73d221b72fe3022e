"""
API key authorization for HTTP and WebSocket requests.

- ApiKeyAuthMiddleware: Django middleware; requires the X-API-KEY header to
  match AUTH_API_KEY for every endpoint except /health/.
- WebSocketApiKeyMiddleware: Channels middleware; requires the key in the
  Authorization header or an `authorization` query parameter before the
  handshake reaches a consumer. Rejected sockets are closed with code 4401.

Both are no-ops when AUTH_API_KEY is not configured.
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional
from urllib.parse import parse_qs

from channels.middleware import BaseMiddleware
from django.conf import settings
from django.http import JsonResponse

logger = logging.getLogger(__name__)

WS_UNAUTHORIZED_CLOSE_CODE = 4401


def _configured_key() -> Optional[str]:
    return getattr(settings, "AUTH_API_KEY", None) or None


def _key_matches(provided: Optional[str], expected: str) -> bool:
    return bool(provided) and secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def _is_health_path(request) -> bool:
    path = (request.path or "").rstrip("/") or "/"
    return path == "/health"


class ApiKeyAuthMiddleware:
    """
    When AUTH_API_KEY is set, require X-API-KEY header to match for all requests
    except /health/. Returns 401 with JSON body if the key is missing or invalid.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if _is_health_path(request):
            return self.get_response(request)
        # Let OPTIONS (CORS preflight) through without API key so browser gets CORS headers.
        if request.method == "OPTIONS":
            return self.get_response(request)

        auth_key = _configured_key()
        if not auth_key:
            return self.get_response(request)

        provided = (request.headers.get("X-Api-Key") or "").strip()
        if not _key_matches(provided, auth_key):
            logger.warning("HTTP request rejected: missing or invalid API key (path=%s)", request.path)
            return JsonResponse(
                {"detail": "Missing or invalid API key. Use X-API-KEY header."},
                status=401,
            )
        return self.get_response(request)


class WebSocketApiKeyMiddleware(BaseMiddleware):
    """
    Channels middleware for WebSocket handshake authorization.
    """

    @staticmethod
    def _provided_key(scope) -> Optional[str]:
        for key, value in scope.get("headers") or []:
            if key.lower() == b"authorization":
                return value.decode("utf-8", errors="replace").strip()

        query_string = scope.get("query_string", b"").decode("utf-8", errors="replace")
        params = parse_qs(query_string)
        values = params.get("authorization") or params.get("auth")
        return values[0].strip() if values else None

    async def __call__(self, scope, receive, send):
        expected_key = _configured_key()
        if not expected_key:
            return await super().__call__(scope, receive, send)

        if _key_matches(self._provided_key(scope), expected_key):
            return await super().__call__(scope, receive, send)

        logger.warning("WebSocket handshake rejected: missing or invalid API key (path=%s)", scope.get("path"))
        # Consume the connect event, then refuse the handshake.
        await receive()
        await send({"type": "websocket.close", "code": WS_UNAUTHORIZED_CLOSE_CODE})
