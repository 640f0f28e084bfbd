"""Request validation failure raised by generated route endpoints.

The router generator catches this error at the route boundary and turns it
into an RFC 7807 400 response, so domain handlers never see invalid input.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldError:
    """Single field-level validation failure.

    Attributes:
        field: Dotted field path prefixed by its request part (e.g. "body.name").
        code: Machine-readable error type from pydantic (e.g. "missing").
        message: Human-readable message.
    """

    field: str
    code: str
    message: str


@dataclass(kw_only=True, eq=False)
class RequestValidationFailed(Exception):
    """One or more request parts failed their bound schema.

    Attributes:
        message: Summary message.
        errors: Field-level failures, in request-part order (params, query, body).
    """

    message: str = "Validation failed"
    errors: list[FieldError] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.message} ({len(self.errors)} error(s))"
