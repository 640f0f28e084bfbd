"""Application module kinds and the module registry."""

from src.presentation.modules.base_module import (
    BaseModule,
    ExposesEvents,
    ExposesRouter,
    HybridModule,
    ModuleCapability,
    ModuleMetadata,
    RestModule,
    WebSocketModule,
)
from src.presentation.modules.module_registry import ModuleRecord, ModuleRegistry

__all__ = [
    "BaseModule",
    "ExposesEvents",
    "ExposesRouter",
    "HybridModule",
    "ModuleCapability",
    "ModuleMetadata",
    "ModuleRecord",
    "ModuleRegistry",
    "RestModule",
    "WebSocketModule",
]
