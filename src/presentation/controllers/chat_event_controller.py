"""Chat WebSocket controller (namespace ``/chat``).

Client events:
    chat:join      Join a room (ack: users in the room)
    chat:leave     Leave a room
    chat:message   Send a message to a room (ack: message id)
    chat:typing    Typing indicator, relayed to the rest of the room

Server events:
    chat:new-message, chat:user-joined, chat:user-left, chat:user-typing
"""

from datetime import UTC, datetime
from typing import Any

from uuid_extensions import uuid7

from src.presentation.websocket import (
    Connection,
    WebSocketController,
    join_room,
    leave_room,
    namespace,
    publish,
    subscribe,
    validate_ack,
    validate_emit,
    validate_event,
)
from src.schemas.chat_schemas import (
    JoinRoomAck,
    JoinRoomEvent,
    LeaveRoomEvent,
    MessageAck,
    NewMessage,
    SendMessageEvent,
    TypingEvent,
    UserPresence,
    UserTyping,
)


def room_key(room_id: str) -> str:
    return f"room:{room_id}"


@namespace("/chat", description="Real-time chat communication", require_auth=True)
class ChatEventController(WebSocketController):
    """Chat rooms with presence tracking.

    Presence is tracked per connection: ``room_users`` maps a room to the
    user ids present, ``connection_users`` maps a connection to its user.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.room_users: dict[str, set[str]] = {}
        self.connection_users: dict[str, tuple[str, str]] = {}

    # =========================================================================
    # Client -> Server
    # =========================================================================

    @subscribe("chat:join", description="Join a chat room", acknowledgment=True)
    @validate_event(JoinRoomEvent)
    @validate_ack(JoinRoomAck)
    @join_room(lambda data: room_key(data.room_id))
    async def handle_join_room(
        self, connection: Connection, data: JoinRoomEvent
    ) -> dict[str, Any]:
        user_id = str(data.user_id)
        self.room_users.setdefault(data.room_id, set()).add(user_id)
        self.connection_users[connection.id] = (user_id, data.username)

        await self.notify_user_joined(data.room_id, user_id, data.username)
        return {"success": True, "users": sorted(self.room_users[data.room_id])}

    @subscribe("chat:leave", description="Leave a chat room")
    @validate_event(LeaveRoomEvent)
    @leave_room(lambda data: room_key(data.room_id))
    async def handle_leave_room(self, connection: Connection, data: LeaveRoomEvent) -> None:
        user = self.connection_users.get(connection.id)
        if user is None:
            return
        user_id, username = user
        self.room_users.get(data.room_id, set()).discard(user_id)
        await self.notify_user_left(data.room_id, user_id, username)

    @subscribe("chat:message", description="Send a message to a chat room", acknowledgment=True)
    @validate_event(SendMessageEvent)
    @validate_ack(MessageAck)
    async def handle_message(
        self, connection: Connection, data: SendMessageEvent
    ) -> dict[str, Any]:
        if room_key(data.room_id) not in connection.rooms:
            return {
                "success": False,
                "error": "Join the room before sending messages",
                "timestamp": datetime.now(UTC),
            }

        message_id = uuid7()
        timestamp = datetime.now(UTC)
        await self.broadcast_new_message(
            {
                "message_id": message_id,
                "room_id": data.room_id,
                "user_id": str(data.user_id),
                "username": data.username,
                "message": data.message,
                "timestamp": timestamp,
            }
        )
        return {"success": True, "message_id": message_id, "timestamp": timestamp}

    @subscribe("chat:typing", description="Notify others that user is typing")
    @validate_event(TypingEvent)
    async def handle_typing(self, connection: Connection, data: TypingEvent) -> None:
        await connection.broadcast_to(
            room_key(data.room_id),
            "chat:user-typing",
            self._validate_emit("chat:user-typing", data.model_dump(mode="json")),
        )

    # =========================================================================
    # Server -> Client
    # =========================================================================

    @publish(
        "chat:new-message",
        description="New message received in chat room",
        room="dynamic",
        broadcast=True,
    )
    @validate_emit(NewMessage)
    async def broadcast_new_message(self, payload: dict[str, Any]) -> None:
        await self.emit_to_room(room_key(payload["room_id"]), "chat:new-message", payload)

    @publish("chat:user-joined", description="User joined the chat room", broadcast=True)
    @validate_emit(UserPresence)
    async def notify_user_joined(self, room_id: str, user_id: str, username: str) -> None:
        await self.emit_to_room(
            room_key(room_id),
            "chat:user-joined",
            {
                "room_id": room_id,
                "user_id": user_id,
                "username": username,
                "timestamp": datetime.now(UTC),
            },
        )

    @publish("chat:user-left", description="User left the chat room", broadcast=True)
    @validate_emit(UserPresence)
    async def notify_user_left(self, room_id: str, user_id: str, username: str) -> None:
        await self.emit_to_room(
            room_key(room_id),
            "chat:user-left",
            {
                "room_id": room_id,
                "user_id": user_id,
                "username": username,
                "timestamp": datetime.now(UTC),
            },
        )

    @publish("chat:user-typing", description="User is typing indicator", broadcast=True)
    @validate_emit(UserTyping)
    async def notify_typing(self, payload: dict[str, Any]) -> None:
        await self.emit_to_room(room_key(payload["room_id"]), "chat:user-typing", payload)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def on_disconnect(self, connection: Connection, reason: str) -> None:
        await super().on_disconnect(connection, reason)
        user = self.connection_users.pop(connection.id, None)
        if user is None:
            return

        user_id, username = user
        for room_id, users in list(self.room_users.items()):
            if user_id in users:
                users.discard(user_id)
                await self.notify_user_left(room_id, user_id, username)
