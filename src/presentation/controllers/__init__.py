"""HTTP and WebSocket controllers of the application modules."""

from src.presentation.controllers.categories_controller import CategoriesController
from src.presentation.controllers.chat_event_controller import ChatEventController

__all__ = ["CategoriesController", "ChatEventController"]
