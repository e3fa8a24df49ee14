"""
subcmd registry: a validated, name-indexed view over sibling commands.

A Registry is built once from an ordered sequence of Commands and never
changes afterwards. Construction checks, for each command in order:

1. the name is not a reserved help word (ReservedNameError);
2. the name is not already used by an earlier sibling (DuplicateCommandError);
3. the entry is a well-formed Command (MalformedCommandError).

Group commands get their own nested Registry, built (and therefore validated)
eagerly, so an authoring error anywhere in a command tree surfaces as soon as
the root registry exists.

Iteration follows declaration order, which is also the order used by usage
listings.
"""
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .commands import Command
from .faults import ReservedNameError, DuplicateCommandError, MalformedCommandError

HELP_WORDS = frozenset({
    "help",
    "-h",
    "-help",
    "--help",
})
"""Arguments that request the usage listing at any dispatch level."""


class Registry(Mapping):
    """
    Ordered, read-only mapping of command name to Command.

    Attributes
    - commands: tuple of the sibling Commands in declaration order.
    - width: length of the widest sibling name (0 for an empty registry).

    Methods
    - nested(name): the Registry of the group command called `name`.
    """

    def __init__(self, commands=(), /):
        if not isinstance(commands, Iterable) or isinstance(commands, str):
            raise MalformedCommandError("registry 'commands' must be an iterable of commands")

        index = {}
        nested = {}
        for command in commands:
            name = getattr(command, "name", None)
            if isinstance(name, str) and name in HELP_WORDS:
                raise ReservedNameError(f"cannot name a command {name!r}")
            if isinstance(name, str) and name in index:
                raise DuplicateCommandError(f"duplicate command {name!r}")
            if not isinstance(command, Command):
                raise MalformedCommandError(f"registry entry {command!r} is not a command")
            index[name] = command
            if command.group:
                nested[name] = Registry(command.subcommands)

        self._index = MappingProxyType(index)
        self._nested = MappingProxyType(nested)

    @property
    def commands(self):
        return tuple(self._index.values())

    @property
    def width(self):
        return max(map(len, self._index), default=0)

    def nested(self, name, /):
        """
        Return the Registry of the group command `name`.

        Raises KeyError when `name` is unknown or names a leaf command.
        """
        return self._nested[name]

    def __getitem__(self, name, /):
        return self._index[name]

    def __iter__(self):
        return iter(self._index)

    def __len__(self):
        return len(self._index)

    def __repr__(self):
        return f"registry({list(self._index)!r})"


__all__ = (
    "HELP_WORDS",
    "Registry",
)
