"""Configuration errors raised while the application is being assembled.

Configuration errors are programmer mistakes (a route decorator applied to
something that is not a method, a module registered twice). They are raised
at import/startup time and are never caught by request-handling code, so a
misconfigured application fails before it serves its first request.

Error Hierarchy:
    ConfigurationError
    ├── ContractDefinitionError (malformed contract declaration)
    └── DuplicateModuleError (module name registered twice)
"""


class ConfigurationError(Exception):
    """Base class for fatal startup configuration errors."""


class ContractDefinitionError(ConfigurationError, TypeError):
    """A contract decorator was applied to an invalid target.

    Examples:
        - ``@controller(...)`` applied to a function instead of a class
        - ``@get("/x")`` applied to a module-level function
        - a declared route whose handler is not callable on the controller
    """


class DuplicateModuleError(ConfigurationError):
    """A module name is already present in the module registry.

    Attributes:
        name: The module name that was registered twice.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Module "{name}" is already registered')
