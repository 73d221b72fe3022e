"""
CLI client for the pairchat WebSocket server.

Supports:
- Anonymous paired chat:   /ws/pair/
- HTTP health/lobby stats: GET /health/

WebSocket protocol (`PairChatConsumer`):
- Connect: /ws/pair/ (optionally pass ?authorization=<AUTH_API_KEY>)
- Client sends:
  - {"type": "user_info", "name": "...", "avatar": "<optional>"}
  - {"type": "encrypted_message", "room": "...", "encrypted": <opaque>, "timestamp": <optional>}
  - {"type": "seen", "room": "...", "sender_id": "..."}
  - {"type": "typing", "room": "...", "name": "..."}
  - {"type": "leave"}
- Server sends:
  - {"type":"connected","connection_id":...}
  - {"type":"waiting","position":1}
  - {"type":"room_created","room":...,"partner":{"name":...,"avatar":...}}
  - {"type":"receive_encrypted","encrypted":...,"from":...,"timestamp":...}
  - {"type":"delivered","from":...}
  - {"type":"seen_by_partner","sender_id":...}
  - {"type":"partner_typing","name":...}
  - {"type":"partner_disconnected","connection_id":...}
  - {"type":"session_ended","room":...}
  - {"type":"error","message":"..."}

The server never looks inside `encrypted`. Real clients encrypt end-to-end
before sending; this CLI only base64-encodes lines so the payload is opaque.
"""

from __future__ import annotations

import argparse
import asyncio
import base64
import inspect
import json
import sys
import time
import urllib.parse
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


def _rstrip_slash(s: str) -> str:
    return s[:-1] if s.endswith("/") else s


def _ws_pair_url(ws_base: str, api_key: Optional[str]) -> str:
    url = f"{_rstrip_slash(ws_base)}/ws/pair/"
    if api_key:
        # WebSocketApiKeyMiddleware supports query-string auth
        url += f"?authorization={urllib.parse.quote(api_key)}"
    return url


def _http_url(http_base: str, path: str) -> str:
    return f"{_rstrip_slash(http_base)}{path}"


def encode_payload(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_payload(payload: Any) -> str:
    if not isinstance(payload, str):
        return json.dumps(payload, ensure_ascii=False)
    try:
        return base64.b64decode(payload.encode("ascii"), validate=True).decode("utf-8")
    except (ValueError, UnicodeError):
        return payload


async def _stdin_lines() -> str:
    return await asyncio.to_thread(sys.stdin.readline)


def _dumps(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def _status(line: str) -> None:
    sys.stderr.write(f"[{line}]\n")
    sys.stderr.flush()


@dataclass
class ChatState:
    room: Optional[str] = None


async def _input_loop(ws: Any, state: ChatState, *, name: str, avatar: Optional[str], done: Callable[[], bool]) -> None:
    """Forward stdin lines until EOF or until `done()` reports the socket reader has stopped."""
    while not done():
        raw = await _stdin_lines()
        if raw == "":
            # EOF (Ctrl-D or exhausted pipe)
            return
        line = raw.rstrip("\n")
        if not line:
            continue
        if line == "/leave":
            await ws.send(_dumps({"type": "leave"}))
            continue
        if line == "/next":
            await ws.send(_dumps({"type": "leave"}))
            await ws.send(_dumps({"type": "user_info", "name": name, "avatar": avatar}))
            continue
        if state.room is None:
            _status("not paired yet")
            continue
        await ws.send(_dumps({"type": "typing", "room": state.room, "name": name}))
        await ws.send(
            _dumps(
                {
                    "type": "encrypted_message",
                    "room": state.room,
                    "encrypted": encode_payload(line),
                    "timestamp": int(time.time() * 1000),
                }
            )
        )


async def ws_pair_chat(
    *,
    ws_base: str,
    api_key: Optional[str],
    origin: Optional[str],
    name: str,
    avatar: Optional[str],
) -> int:
    import websockets

    ws_url = _ws_pair_url(ws_base, api_key)

    # Prefer Authorization header when possible (query-string auth is also supported).
    extra_headers = []
    if origin:
        extra_headers.append(("Origin", origin))
    if api_key:
        extra_headers.append(("Authorization", api_key))

    kwargs: Dict[str, Any] = {}
    if extra_headers:
        sig = inspect.signature(websockets.connect)
        if "additional_headers" in sig.parameters:
            kwargs["additional_headers"] = extra_headers
        elif "extra_headers" in sig.parameters:
            kwargs["extra_headers"] = extra_headers

    async with websockets.connect(ws_url, **kwargs) as ws:
        state = ChatState()

        await ws.send(_dumps({"type": "user_info", "name": name, "avatar": avatar}))

        async def _reader() -> None:
            async for raw in ws:
                msg = json.loads(raw)
                t = msg.get("type")
                if t == "connected":
                    _status(f"connection_id={msg.get('connection_id')}")
                elif t == "waiting":
                    _status(f"waiting for a partner (position {msg.get('position')})")
                elif t == "room_created":
                    state.room = msg.get("room")
                    partner = msg.get("partner") or {}
                    _status(f"paired with {partner.get('name', 'anonymous')}")
                elif t == "receive_encrypted":
                    sys.stdout.write(f"> {decode_payload(msg.get('encrypted'))}\n")
                    sys.stdout.flush()
                    await ws.send(_dumps({"type": "seen", "room": state.room, "sender_id": msg.get("from")}))
                elif t == "partner_typing":
                    _status(f"{msg.get('name') or 'partner'} is typing")
                elif t == "seen_by_partner":
                    _status("seen")
                elif t in ("partner_disconnected", "session_ended"):
                    state.room = None
                    _status("partner left; type /next to find someone new")
                elif t == "error":
                    _status(f"error {msg.get('message')}")
                # ignore unknown frames

        reader = asyncio.create_task(_reader())
        sys.stderr.write("Type a line and press Enter to send. /next finds a new partner, /leave ends the chat.\n")
        sys.stderr.flush()
        try:
            await _input_loop(ws, state, name=name, avatar=avatar, done=reader.done)
        finally:
            reader.cancel()
    return 0


async def http_health(*, http_base: str, api_key: Optional[str]) -> int:
    import aiohttp

    headers = {"X-API-KEY": api_key} if api_key else None
    async with aiohttp.ClientSession() as session:
        async with session.get(_http_url(http_base, "/health/"), headers=headers) as resp:
            data = await resp.json()
            print(json.dumps(data, indent=2, ensure_ascii=False))
            return 0 if resp.status == 200 else 1


async def main() -> int:
    parser = argparse.ArgumentParser(description="CLI client for the pairchat server")
    parser.add_argument("--http", default="http://localhost:8000", help="HTTP base, e.g. http://localhost:8000")
    parser.add_argument("--ws", default="ws://localhost:8000", help="WS base, e.g. ws://localhost:8000")
    parser.add_argument("--api-key", help="API key (must match AUTH_API_KEY)")
    parser.add_argument("--origin", help="Optional Origin header for WebSocket handshake")

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_chat = sub.add_parser("chat", help="Find a partner and chat over WebSocket")
    p_chat.add_argument("--name", required=True, help="Display name shown to the partner")
    p_chat.add_argument("--avatar", help="Optional avatar reference (URL or id)")

    sub.add_parser("health", help="Show server health and lobby stats (HTTP)")

    args = parser.parse_args()

    if args.cmd == "chat":
        return await ws_pair_chat(
            ws_base=args.ws,
            api_key=args.api_key,
            origin=args.origin,
            name=args.name,
            avatar=args.avatar,
        )
    if args.cmd == "health":
        return await http_health(http_base=args.http, api_key=args.api_key)
    return 2


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
