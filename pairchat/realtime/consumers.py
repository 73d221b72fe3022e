"""
WebSocket consumer for anonymous paired chat.

Key behavior:
- URL: /ws/pair/
- Each socket gets a server-assigned connection id and joins a personal group
  `conn.<id>`; every event the lobby produces is addressed to one of these.
- The lobby holds all pairing state; this consumer only parses frames,
  calls the lobby and delivers what it returns.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Optional

from channels.generic.websocket import AsyncWebsocketConsumer
from pydantic import ValidationError

from pairchat.config import config

from .events import INBOUND_TYPES, ConnectedEvent, ErrorEvent, Outbound, inbound_adapter, to_wire
from .identity import ConnectionId
from .lobby import lobby

logger = logging.getLogger(__name__)


def connection_group(conn: ConnectionId) -> str:
    return f"conn.{conn}"


class PairChatConsumer(AsyncWebsocketConsumer):

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.connection_id: ConnectionId = ConnectionId.new()
        self.group_name: Optional[str] = None

    async def connect(self) -> None:
        self.group_name = connection_group(self.connection_id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        logger.info("Connected: %s", self.connection_id)
        await self.send_json(to_wire(ConnectedEvent(connection_id=str(self.connection_id))))

    async def disconnect(self, close_code: int) -> None:
        await self.deliver(lobby.disconnect(self.connection_id))

        if self.group_name:
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
        logger.info("Disconnected: %s (code=%s)", self.connection_id, close_code)

    async def receive(self, text_data: Optional[str] = None, bytes_data: Optional[bytes] = None) -> None:
        if not text_data:
            return

        if len(text_data.encode("utf-8")) > config.MAX_FRAME_BYTES:
            await self.send_error("Frame too large")
            return

        try:
            msg = json.loads(text_data)
        except (ValueError, RecursionError):
            # JSONDecodeError is a ValueError; deep nesting exhausts the decoder's stack.
            await self.send_error("Invalid JSON")
            return

        msg_type = msg.get("type") if isinstance(msg, dict) else None
        if not isinstance(msg_type, str) or msg_type not in INBOUND_TYPES:
            await self.send_error(f"Unknown message type: {msg_type}")
            return

        try:
            message = inbound_adapter.validate_python(msg)
        except ValidationError as e:
            await self.send_error(f"Invalid {msg_type} message: {e.errors()[0]['msg']}")
            return

        await self.deliver(lobby.handle(self.connection_id, message))

    async def deliver(self, outbound: Iterable[Outbound]) -> None:
        for item in outbound:
            await self.channel_layer.group_send(
                connection_group(item.recipient),
                {"type": "chat.event", "event": item.as_wire()},
            )

    async def chat_event(self, event: Dict[str, Any]) -> None:
        """
        Handler for events addressed to this connection.
        """
        await self.send_json(event["event"])

    async def send_error(self, message: str) -> None:
        await self.send_json(to_wire(ErrorEvent(message=message)))

    async def send_json(self, payload: Dict[str, Any]) -> None:
        await self.send(text_data=json.dumps(payload, separators=(",", ":"), ensure_ascii=False))
