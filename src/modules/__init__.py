"""Application modules.

Usage:
    registry = get_module_registry()
    register_modules(registry)
"""

from src.modules.categories_module import CategoriesModule
from src.modules.chat_module import ChatModule
from src.presentation.modules import ModuleRegistry


def register_modules(registry: ModuleRegistry) -> ModuleRegistry:
    """Register every application module (raises on duplicate names)."""
    for module in (CategoriesModule(), ChatModule()):
        registry.register(module.get_metadata().name, module)
    return registry


__all__ = ["CategoriesModule", "ChatModule", "register_modules"]
