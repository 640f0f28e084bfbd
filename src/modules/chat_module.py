"""Chat module: real-time chat rooms over WebSocket."""

from src.presentation.controllers import ChatEventController
from src.presentation.modules import ModuleMetadata, WebSocketModule


class ChatModule(WebSocketModule):
    def __init__(self) -> None:
        super().__init__(
            ModuleMetadata(
                name="chat",
                version="1.0.0",
                description="Real-time chat communication",
            )
        )
        self.controller = ChatEventController()

    def get_event_controllers(self) -> tuple[ChatEventController, ...]:
        return (self.controller,)

    async def destroy(self) -> None:
        self.controller.room_users.clear()
        self.controller.connection_users.clear()
