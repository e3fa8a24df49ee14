"""
subcmd faults (definition errors, usage conditions) and their surfacing.

Scope
- ErrorHandling: the policy a Runner applies when resolution does not end on a
  leaf command (continue, exit, or panic).
- FaultCode: canonical, stable numeric identifiers for every usage condition.
  Codes are grouped so logs and searches stay predictable.
- DefinitionError and subclasses: authoring bugs in a command table. They are
  raised immediately at construction, whatever the policy.
- UsageError and subclasses: expected runtime outcomes (no command, help
  requested, unknown command). They know how to surface themselves according
  to the policy they are triggered with.
- trigger(): central entry point to surface a usage fault with runtime options.

Integration
- The runner resolves the argument vector; when resolution stops on a usage
  condition it calls trigger(fault, errorhandling=..., usage=...).
- CONTINUE_ON_ERROR hands the fault back, EXIT_ON_ERROR renders the usage and
  exits with the fault's status, PANIC_ON_ERROR raises CommandPanic.
"""
import sys
from enum import IntEnum
from types import MappingProxyType

from .utils import Unset, coalesce


class ErrorHandling(IntEnum):
    """
    how a runner surfaces usage conditions.

    - CONTINUE_ON_ERROR: print nothing, return the fault to the caller.
    - EXIT_ON_ERROR: render the usage listing, then exit with the fault status.
    - PANIC_ON_ERROR: raise CommandPanic chained from the fault.
    """
    CONTINUE_ON_ERROR = 0
    EXIT_ON_ERROR     = 1
    PANIC_ON_ERROR    = 2

    # aliases kept for readers coming from flag-style policy names
    ContinueOnError = 0
    ExitOnNonZero   = 1
    PanicOnInvalid  = 2


class FaultCode(IntEnum):
    """
    canonical fault codes for usage conditions (stable identifiers).

    grouping
    - routing (1110x)
      • NO_COMMAND, UNKNOWN_COMMAND, UNKNOWN_SUBCOMMAND
    - help (1120x)
      • HELP_REQUESTED

    normalize() allows host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- routing (11xxx) ---
    NO_COMMAND          = 11100
    UNKNOWN_COMMAND     = 11101
    UNKNOWN_SUBCOMMAND  = 11102

    # --- help (11xxx) ---
    HELP_REQUESTED      = 11201

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class DefinitionError(ValueError):
    """
    a command table was authored incorrectly.

    raised while building commands, registries or runners; never subject to
    the error-handling policy.
    """


class ReservedNameError(DefinitionError): ...
class DuplicateCommandError(DefinitionError): ...
class MalformedCommandError(DefinitionError, TypeError): ...


class CommandPanic(RuntimeError):
    """
    raised under PANIC_ON_ERROR; carries the usage fault that caused it.
    """

    def __init__(self, error, /):
        super().__init__(str(error))
        self.error = error


class UsageError(Exception):
    """
    base type for usage conditions met while resolving an argument vector.

    attributes
    - message: human-readable description.
    - status: exit status used under EXIT_ON_ERROR.
    - code: FaultCode of the condition.
    - options: read-only runtime context (path, registry, errorhandling, usage).
    """
    status = 1
    code = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = coalesce(message, type(self).__doc__.strip().splitlines()[0])
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    @property
    def path(self):
        """the dispatch path of the level where resolution stopped."""
        return self.options.get("path", "")

    @property
    def registry(self):
        """the sibling registry of the level where resolution stopped."""
        return self.options.get("registry")

    def __str__(self):
        return self.message

    def __repr__(self):
        return f"{type(self).__name__}({self.message!r})"

    def __trigger__(self):
        match self.options.get("errorhandling", ErrorHandling.EXIT_ON_ERROR):
            case ErrorHandling.CONTINUE_ON_ERROR:
                return self
            case ErrorHandling.PANIC_ON_ERROR:
                raise CommandPanic(self) from self
            case ErrorHandling.EXIT_ON_ERROR:
                if usage := self.options.get("usage"):
                    usage()
                sys.exit(self.status)
            case errorhandling:
                raise TypeError(f"bad error handling value {errorhandling!r}")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NoCommandError(UsageError):
    """no sub-command provided"""
    code = FaultCode.NO_COMMAND


class HelpRequested(UsageError):
    """help requested"""
    status = 0
    code = FaultCode.HELP_REQUESTED


class UnknownCommandError(UsageError):
    """
    no such command

    token holds the unmatched argument; suggestions holds close matches among
    the siblings, for display only.
    """
    code = FaultCode.UNKNOWN_COMMAND

    @property
    def token(self):
        return self.options.get("token")

    @property
    def suggestions(self):
        return tuple(self.options.get("suggestions", ()))


class UnknownSubcommandError(UnknownCommandError):
    """no such subcommand"""
    code = FaultCode.UNKNOWN_SUBCOMMAND


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see UsageError).
    - options are merged into the fault via __replace__(**options) before triggering.
    - returns whatever __trigger__ returns (the fault itself when continuing).

    typical options
    - errorhandling, usage, path, registry, token, suggestions.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return fault.__replace__(**options).__trigger__()


__all__ = (
    "ErrorHandling",
    "FaultCode",
    "DefinitionError",
    "ReservedNameError",
    "DuplicateCommandError",
    "MalformedCommandError",
    "CommandPanic",
    "UsageError",
    "NoCommandError",
    "HelpRequested",
    "UnknownCommandError",
    "UnknownSubcommandError",
    "trigger",
)
