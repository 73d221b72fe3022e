"""
Pydantic models for the WebSocket protocol.

Inbound models validate client frames before they reach the lobby; outbound
models are what the lobby produces for the transport to deliver.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from pairchat.config import config

from .identity import ConnectionId


# --- Inbound ---------------------------------------------------------------

class UserInfoMessage(BaseModel):
    type: Literal["user_info"] = "user_info"
    name: str
    avatar: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name cannot be empty")
        if len(value) > config.MAX_NAME_LENGTH:
            raise ValueError(f"name longer than {config.MAX_NAME_LENGTH} characters")
        return value

    @field_validator("avatar")
    @classmethod
    def validate_avatar(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) > config.MAX_AVATAR_LENGTH:
            raise ValueError(f"avatar reference longer than {config.MAX_AVATAR_LENGTH} characters")
        return value


class EncryptedMessage(BaseModel):
    """Ciphertext relay request. `encrypted` and `timestamp` are passed through untouched."""
    type: Literal["encrypted_message"] = "encrypted_message"
    room: str
    encrypted: Any
    timestamp: Any = None


class SeenMessage(BaseModel):
    type: Literal["seen"] = "seen"
    room: str
    sender_id: str


class TypingMessage(BaseModel):
    type: Literal["typing"] = "typing"
    room: str
    name: str = ""


class LeaveMessage(BaseModel):
    type: Literal["leave"] = "leave"


InboundMessage = Annotated[
    Union[UserInfoMessage, EncryptedMessage, SeenMessage, TypingMessage, LeaveMessage],
    Field(discriminator="type"),
]

inbound_adapter: TypeAdapter = TypeAdapter(InboundMessage)

INBOUND_TYPES = frozenset({"user_info", "encrypted_message", "seen", "typing", "leave"})


# --- Outbound --------------------------------------------------------------

class PartnerProfile(BaseModel):
    name: str
    avatar: Optional[str] = None


class ConnectedEvent(BaseModel):
    type: Literal["connected"] = "connected"
    connection_id: str


class WaitingEvent(BaseModel):
    type: Literal["waiting"] = "waiting"
    position: int


class RoomCreatedEvent(BaseModel):
    type: Literal["room_created"] = "room_created"
    room: str
    partner: Optional[PartnerProfile] = None


class ReceiveEncryptedEvent(BaseModel):
    type: Literal["receive_encrypted"] = "receive_encrypted"
    encrypted: Any
    sender: str = Field(serialization_alias="from")
    timestamp: Any = None


class DeliveredEvent(BaseModel):
    type: Literal["delivered"] = "delivered"
    sender: str = Field(serialization_alias="from")


class SeenByPartnerEvent(BaseModel):
    type: Literal["seen_by_partner"] = "seen_by_partner"
    sender_id: str


class PartnerTypingEvent(BaseModel):
    type: Literal["partner_typing"] = "partner_typing"
    name: str


class PartnerDisconnectedEvent(BaseModel):
    type: Literal["partner_disconnected"] = "partner_disconnected"
    connection_id: str


class SessionEndedEvent(BaseModel):
    type: Literal["session_ended"] = "session_ended"
    room: Optional[str] = None


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str


def to_wire(event: BaseModel) -> Dict[str, Any]:
    return event.model_dump(by_alias=True)


@dataclass(frozen=True)
class Outbound:
    """One event for the transport to deliver to `recipient`."""

    recipient: ConnectionId
    event: BaseModel

    @property
    def type(self) -> str:
        return getattr(self.event, "type")

    def as_wire(self) -> Dict[str, Any]:
        return to_wire(self.event)
