"""Deferred registration of method-level contract decorators.

A method decorator runs before its class exists, so it cannot know the owner
class it should be recorded against. Decorators therefore wrap the function
in a ``ContractMember`` that collects pending registrations; Python calls
``__set_name__`` once the class body is complete, at which point every
registration is flushed against ``(owner, name)`` in source order, top to
bottom.

The wrapped function is returned unchanged through ``__get__``, so the
decorated method behaves exactly like the plain function.
"""

from collections.abc import Callable
from typing import Any

from src.core.errors import ContractDefinitionError

type Registration = Callable[[type, str], None]


class ContractMember:
    """Holds a controller method until its owner class is created."""

    __slots__ = ("func", "pending")

    def __init__(self, func: Callable[..., Any]) -> None:
        self.func = func
        self.pending: list[Registration] = []

    def __set_name__(self, owner: type, name: str) -> None:
        # Decorators apply bottom-up; replay them top-down.
        for register in reversed(self.pending):
            register(owner, name)

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        return self.func.__get__(instance, owner)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.func(*args, **kwargs)

    def __repr__(self) -> str:
        return f"<ContractMember {getattr(self.func, '__qualname__', self.func)!r}>"


def _is_class_body_function(func: Any) -> bool:
    parts = getattr(func, "__qualname__", "").split(".")
    return len(parts) >= 2 and parts[-2] != "<locals>"


def declare(target: Any, register: Registration, *, decorator: str) -> ContractMember:
    """Queue ``register`` to run against the owner class of ``target``.

    Args:
        target: The decorated method, or a ContractMember produced by a
            decorator stacked below this one.
        register: Callable receiving ``(owner, member_name)``.
        decorator: Decorator name, used in error messages.

    Returns:
        ContractMember: Wrapper to bind in the class body.

    Raises:
        ContractDefinitionError: If target is not callable or is not defined
            in a class body.
    """
    if isinstance(target, ContractMember):
        member = target
    else:
        if not callable(target):
            raise ContractDefinitionError(
                f"@{decorator} can only decorate methods, got {type(target).__name__}"
            )
        if not _is_class_body_function(target):
            raise ContractDefinitionError(
                f"@{decorator} must decorate a method defined in a class body, "
                f"got {getattr(target, '__qualname__', target)!r}"
            )
        member = ContractMember(target)

    member.pending.append(register)
    return member
