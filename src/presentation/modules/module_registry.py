"""Registry of application modules, keyed by unique name.

Usage:
    registry = ModuleRegistry()
    registry.register("categories", CategoriesModule())

    for module in registry.get_all_modules():
        ...

Registration happens at startup; lookups return snapshots in registration
order and never raise on a miss.
"""

from dataclasses import dataclass
from typing import Any

from src.core.errors import DuplicateModuleError
from src.domain.protocols.logger_protocol import LoggerProtocol


@dataclass(frozen=True, slots=True)
class ModuleRecord:
    name: str
    module: Any


class ModuleRegistry:
    """Name to module map.

    Args:
        logger: Optional logger for registration events.
    """

    def __init__(self, logger: LoggerProtocol | None = None) -> None:
        self._modules: dict[str, ModuleRecord] = {}
        self._logger = logger

    def register(self, name: str, module: Any) -> None:
        """Register ``module`` under ``name``.

        Raises:
            DuplicateModuleError: If ``name`` is already registered. The
                existing registration is left untouched.
        """
        if name in self._modules:
            raise DuplicateModuleError(name)
        self._modules[name] = ModuleRecord(name, module)
        if self._logger is not None:
            self._logger.info("Module registered", module=name)

    def get_module(self, name: str) -> Any | None:
        record = self._modules.get(name)
        return record.module if record else None

    def get_all_modules(self) -> list[Any]:
        return [record.module for record in self._modules.values()]

    def get_module_names(self) -> list[str]:
        return list(self._modules)

    def get_records(self) -> list[ModuleRecord]:
        return list(self._modules.values())

    def has_module(self, name: str) -> bool:
        return name in self._modules

    def get_module_count(self) -> int:
        return len(self._modules)

    def clear(self) -> None:
        self._modules.clear()
