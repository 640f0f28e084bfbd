"""Chat event payload schemas.

Client → server events carry ``*Event`` payloads, acknowledgment replies use
``*Ack`` schemas and server → client events use the remaining models.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

# =============================================================================
# Client → Server
# =============================================================================


class JoinRoomEvent(BaseModel):
    room_id: str = Field(..., min_length=1, max_length=100)
    user_id: UUID
    username: str = Field(..., min_length=1, max_length=50)


class LeaveRoomEvent(BaseModel):
    room_id: str = Field(..., min_length=1, max_length=100)


class SendMessageEvent(BaseModel):
    room_id: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1, max_length=1000)
    user_id: UUID
    username: str = Field(..., min_length=1, max_length=50)


class TypingEvent(BaseModel):
    room_id: str = Field(..., min_length=1, max_length=100)
    user_id: UUID
    username: str
    is_typing: bool


# =============================================================================
# Acknowledgments
# =============================================================================


class JoinRoomAck(BaseModel):
    success: bool
    users: list[str]
    error: str | None = None


class MessageAck(BaseModel):
    success: bool
    message_id: UUID | None = None
    error: str | None = None
    timestamp: datetime


# =============================================================================
# Server → Client
# =============================================================================


class NewMessage(BaseModel):
    message_id: UUID
    room_id: str
    user_id: str
    username: str
    message: str
    timestamp: datetime


class UserPresence(BaseModel):
    """Payload of ``chat:user-joined`` and ``chat:user-left``."""

    room_id: str
    user_id: str
    username: str
    timestamp: datetime


class UserTyping(BaseModel):
    room_id: str
    user_id: str
    username: str
    is_typing: bool
