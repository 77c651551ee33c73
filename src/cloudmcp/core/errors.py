"""Shared error types for the dispatch core.

Every user-visible failure is a :class:`ToolError` subclass; the handler
harness turns those into MCP error results.  :class:`FrameworkError` and the
startup errors are the only ones allowed to propagate past a tool call.
"""


class CloudMCPError(Exception):
    """Base error for all cloudmcp failures."""


# ---------------------------------------------------------------------------
# Errors surfaced to the MCP host as ``isError`` results
# ---------------------------------------------------------------------------


class ToolError(CloudMCPError):
    """A failure that is reported inside the tool result, not as a transport error."""


class InvalidArgumentError(ToolError):
    """A tool argument is missing, has the wrong kind, or is malformed."""

    def __init__(self, field: str, detail: str) -> None:
        self.field = field
        self.detail = detail
        super().__init__(f"{detail}: {field}")


class UnknownToolError(ToolError):
    """The dispatcher has no handler registered under this name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class NoCurrentAccountError(ToolError):
    """The account registry is empty or the current account vanished."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        msg = "No current account configured in the account registry"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class NameConflictError(ToolError):
    """An account with this name is already registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Account '{name}' already exists")


class AccountNotFoundError(ToolError):
    """No account is registered under this name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Account '{name}' not found")


class CannotRemoveDefaultError(ToolError):
    """The configured default account cannot be removed."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Cannot remove the default account '{name}'. Change the default account first"
        )


class UpstreamError(ToolError):
    """The provider API answered with a non-2xx status or the transport failed.

    ``status`` is ``0`` for transport-level failures (DNS, connect, timeout).
    """

    def __init__(self, status: int, message: str, *, operation: str = "") -> None:
        self.status = status
        self.message = message
        self.operation = operation
        prefix = f"{operation}: " if operation else ""
        code = f" (HTTP {status})" if status else ""
        super().__init__(f"{prefix}{message}{code}")


class AuthError(UpstreamError):
    """The credential check was rejected by the provider."""

    def __init__(self, status: int, message: str, *, operation: str = "credential check") -> None:
        super().__init__(status, message, operation=operation)


# ---------------------------------------------------------------------------
# Errors that propagate (startup / programming / framework)
# ---------------------------------------------------------------------------


class ConfigError(CloudMCPError):
    """The configuration document could not be read, parsed, or written."""


class DuplicateToolError(CloudMCPError):
    """A tool name was registered twice."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool already registered: {name}")


class FrameworkError(CloudMCPError):
    """Internal invariant violation or serialization failure."""
