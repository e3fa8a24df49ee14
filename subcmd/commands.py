"""
subcmd command layer: describe the verbs a program dispatches to.

What this module provides
- Command: a named, described unit of dispatch. It is a tagged variant:
  • leaf: carries a handler called with the residual argument list.
  • group: carries an ordered sequence of nested Commands (one more level).
  A Command is never both and never neither; violations raise
  MalformedCommandError at construction.

- Factories:
  • command(...): wrap a callable into a leaf Command, directly or as a decorator.
  • group(...): build a group Command from nested Commands.

Quick start
    from subcmd import command, group, Runner

    @command(descr="something about bar")
    def bar(args):
        ...

    tree = [group("foo", "perform foo tasks", [bar])]
    Runner("prog", tree).run(["foo", "bar", "-a"])   # bar(["-a"])

Design notes
- Commands are read-only values: every public field is a property served from
  a private backing attribute, containers as immutable snapshots.
- Sibling rules (unique names, reserved help words) belong to the registry;
  this module only checks the shape of each Command.
"""
import functools
import inspect
import operator
import re
from collections.abc import Iterable

from .faults import MalformedCommandError
from .utils import *


class CommandType(type):
    """
    Metaclass giving Command classes a readable identity.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens)
      for consistent labels in error messages.
    - Expose every name listed in __introspectable__ as a read-only property
      backed by "_{name}" (see frozen()).
    - Provide stable __repr__/__rich_repr__ built from __introspectable__.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: frozen(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation, e.g. command(name='build', ...).
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _summary(callback):
    """
    First line of the callback's own docstring, or Unset when it has none.

    Instances (partials, callable objects) that only inherit their class
    docstring have no summary.
    """
    doc = getattr(callback, "__doc__", None)
    if not inspect.isroutine(callback) and not isinstance(callback, type):
        if doc is getattr(type(callback), "__doc__", None):
            return Unset
    if isinstance(doc, str) and (doc := inspect.cleandoc(doc)):
        return doc.splitlines()[0].strip() or Unset
    return Unset


class Command(metaclass=CommandType):
    """
    A named verb in a command-line interface.

    Fields
    - name: the word matched (exactly) against an argument.
    - descr: short description shown in usage listings (None when absent).
    - handler: callable receiving the residual arguments as a list (leaf only).
    - subcommands: tuple of nested Commands (group only).

    Raises
    - MalformedCommandError when the name is not a non-empty string, when the
      handler is not callable, when a subcommand is not a Command, or when the
      command defines neither or both of handler and subcommands.
    """

    __introspectable__ = (
        "name",
        "descr",
        "handler",
        "subcommands",
    )

    def __init__(self, name, /, descr=Unset, *, handler=Unset, subcommands=Unset):
        typename = type(self).__typename__

        if not isinstance(name, str):
            raise MalformedCommandError(f"{typename} 'name' must be a string")
        elif not name.strip():
            raise MalformedCommandError(f"{typename} 'name' cannot be empty")

        if not isinstance(descr, str | Unset | None):
            raise MalformedCommandError(f"{typename} {name!r} 'descr' must be a string or None")

        if handler is Unset and subcommands is Unset:
            raise MalformedCommandError(f"{typename} {name!r} must define either a handler or subcommands")
        elif handler is not Unset and subcommands is not Unset:
            raise MalformedCommandError(f"{typename} {name!r} cannot define both a handler and subcommands")

        if handler is not Unset and not callable(handler):
            raise MalformedCommandError(f"{typename} {name!r} 'handler' must be callable")

        if subcommands is not Unset:
            if not isinstance(subcommands, Iterable) or isinstance(subcommands, str):
                raise MalformedCommandError(f"{typename} {name!r} 'subcommands' must be an iterable of commands")
            subcommands = tuple(subcommands)
            for subcommand in subcommands:
                if not isinstance(subcommand, Command):
                    raise MalformedCommandError(f"{typename} {name!r} 'subcommands' must be an iterable of commands")

        self._name = name
        self._descr = coalesce(descr)
        self._handler = coalesce(handler)
        self._subcommands = coalesce(subcommands)

    @property
    def leaf(self):
        """True when this command is terminal (has a handler)."""
        return self._handler is not None

    @property
    def group(self):
        """True when this command holds nested subcommands."""
        return self._subcommands is not None


def command(source=Unset, /, name=Unset, descr=Unset):
    """
    Create a leaf Command or return a decorator to build it later.

    Invocation modes
    - Direct:    cmd = command(func, "name", "description")
    - Decorator: @command(descr="description")

    Defaults
    - name: the callable's __name__.
    - descr: first line of the callable's own docstring.

    Returns
    - Command | Callable[[Callable], Command]
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise MalformedCommandError("@command() must be applied to a callable")
        return Command(
            coalesce(name, getattr(source, "__name__", None)),
            coalesce(descr, _summary(source)),
            handler=source,
        )

    return wrapper(source) if source is not Unset else wrapper


def group(name, /, descr=Unset, subcommands=()):
    """
    Build a group Command dispatching one level deeper into `subcommands`.
    """
    return Command(name, descr, subcommands=subcommands)


__all__ = (
    "Command",
    "command",
    "group",
)

# The metaclass is an implementation detail; keep it out of star-imports.
del CommandType
