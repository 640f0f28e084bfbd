"""Result types for operations that can fail without raising.

Used by adapters (e.g. token validation) whose failures are expected and
branched on by the caller rather than propagated as exceptions.

Usage:
    result = token_service.validate_access_token(token)
    match result:
        case Success(value=payload):
            ...
        case Failure(error=error):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful outcome carrying ``value``."""

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed outcome carrying ``error``."""

    error: E


type Result[T, E] = Success[T] | Failure[E]
