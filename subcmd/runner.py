"""
subcmd runner: resolve an argument vector against a command tree and act on it.

What this module provides
- resolve(registry, args, path): pure, recursive resolution. Walks group
  commands level by level and returns a Resolution describing either the leaf
  to invoke (with its residual arguments) or the usage fault that stopped it.
- Runner: binds a display name, a registry, an error-handling policy and a
  usage renderer; run(args) resolves, then invokes the leaf handler or
  surfaces the usage fault according to the policy.
- default_usage / print_defaults: the usage listing, rendered with rich.
- run(commands, args): one-call entry point for a program's main().

Outcomes at each level
- no arguments left        → NoCommandError (status 1)
- first argument is a help word → HelpRequested (status 0)
- first argument names a group  → descend one level
- first argument names a leaf   → handler(residual arguments)
- anything else            → UnknownCommandError / UnknownSubcommandError (status 1)

Matching is exact string equality; close matches are only offered as
suggestions on the fault.
"""
import difflib
import functools
import logging
import os.path
import sys
from collections import defaultdict
from collections.abc import Iterable
from typing import NamedTuple

from rich.console import Console
from rich.text import Text

from .faults import *
from .registry import HELP_WORDS, Registry
from .utils import *

logger = logging.getLogger(__name__)

# Space between the widest name and the description column.
PADDING = 4


class Resolution(NamedTuple):
    """
    Result of resolve().

    - path: dispatch path of the level where resolution stopped.
    - registry: sibling registry of that level.
    - command: the matched leaf command, or None.
    - args: residual arguments (after the matched or offending token).
    - fault: the usage fault, or None on a leaf match.
    """
    path: str
    registry: Registry
    command: object
    args: tuple
    fault: object


def resolve(registry, args, path, /, *, depth=0):
    """
    Resolve `args` against `registry`, descending into group commands.

    Parameters
    - registry: Registry of the current level.
    - args: sequence of argument strings for the current level.
    - path: display path accumulated so far (program name, then matched groups).
    - depth: nesting level of `registry` (0 for the root).

    Returns
    - Resolution; exactly one of command/fault is set.
    """
    args = tuple(args)
    if not args:
        logger.debug("resolve %r: no sub-command provided", path)
        return Resolution(path, registry, None, args, NoCommandError(
            "no sub-command provided",
            path=path,
            registry=registry,
        ))

    token, rest = args[0], args[1:]
    if token in HELP_WORDS:
        logger.debug("resolve %r: help requested with %r", path, token)
        return Resolution(path, registry, None, rest, HelpRequested(
            "help requested",
            path=path,
            registry=registry,
            token=token,
        ))

    try:
        command = registry[token]
    except KeyError:
        logger.debug("resolve %r: no such command %r", path, token)
        exception = UnknownSubcommandError if depth else UnknownCommandError
        return Resolution(path, registry, None, rest, exception(
            f"no such {'sub' * bool(depth)}command {token!r}",
            path=path,
            registry=registry,
            token=token,
            suggestions=difflib.get_close_matches(token, list(registry), 5),
        ))

    if command.group:
        logger.debug("resolve %r: descending into %r", path, token)
        return resolve(registry.nested(token), rest, f"{path} {token}", depth=depth + 1)

    logger.debug("resolve %r: matched %r with %d residual argument(s)", path, token, len(rest))
    return Resolution(path, registry, command, rest, None)


_STYLES = {
    "usage-label": "bold #00E6FF",
    "program-name": "bold #FF4D94",
    "metavar": "bold #FFD600",
    "children-title": "bold #FFFFFF",
    "children": "bold #36C5F0",
    "children-description": "#9CA3AF",
    "hint": "italic #9CE19C",
}


def _styler(colorful):
    """
    Return a style lookup honoring `colorful` and __main__.__styles__ overrides.
    """
    styles = defaultdict(str, _STYLES | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""
    return styler


def _listing(commands, styler):
    """
    Build the aligned "name    description" block, one line per command.
    """
    registry = commands if isinstance(commands, Registry) else Registry(commands)
    lines = []
    for command in registry.commands:
        if command.descr:
            lines.append(Text.assemble(
                "  ",
                (command.name.ljust(registry.width + PADDING), styler("children")),
                (command.descr, styler("children-description")),
            ))
        else:
            lines.append(Text.assemble("  ", (command.name, styler("children"))))
    return Text("\n").join(lines)


def print_defaults(commands, console=Unset, /, *, colorful=False):
    """
    Print the aligned command listing (names, then descriptions).

    `commands` is a Registry or a sequence of Commands (validated as one);
    columns are sized from its widest name only.
    """
    console = console if console is not Unset else Console(stderr=True)
    if listing := _listing(commands, _styler(colorful)):
        console.print(listing, highlight=False, soft_wrap=True)


def default_usage(path, commands, console=Unset, /, *, colorful=False):
    """
    Render the usage text for one dispatch level in a single console write:

        Usage:

          <path> COMMAND

        Possible commands are:

          <name>    <description>
          ...

        Run '<path> COMMAND -h' to see more information about a command.
    """
    console = console if console is not Unset else Console(stderr=True)
    styler = _styler(colorful)

    render = Text.assemble(
        ("Usage:", styler("usage-label")),
        "\n\n  ",
        (path, styler("program-name")),
        " ",
        ("COMMAND", styler("metavar")),
        "\n\n",
        ("Possible commands are:", styler("children-title")),
        "\n\n",
    )
    if listing := _listing(commands, styler):
        render.append_text(listing)
        render.append("\n")
    render.append_text(Text.assemble(
        "\n",
        (f"Run '{path} COMMAND -h' to see more information about a command.", styler("hint")),
    ))
    console.print(render, highlight=False, soft_wrap=True)


class Runner:
    """
    Dispatch an argument vector to one command of a (possibly nested) tree.

    Parameters
    - name: display name of the program (first element of every usage path).
    - commands: iterable of Command; validated into a Registry immediately.
    - errorhandling: ErrorHandling policy (default EXIT_ON_ERROR).
    - usage: callable(path, commands, console) rendering the usage listing;
      defaults to default_usage.
    - console: rich Console used for usage output (default: stderr).
    - colorful: style the default usage listing.

    Raises
    - DefinitionError (and subclasses) for an invalid command tree or policy.
    - TypeError for a non-string name or a non-callable usage.
    """
    name = frozen("name")
    errorhandling = frozen("errorhandling")
    usage = frozen("usage")
    console = frozen("console")

    def __init__(
            self,
            name,
            commands,
            /,
            errorhandling=ErrorHandling.EXIT_ON_ERROR,
            *,
            usage=Unset,
            console=Unset,
            colorful=False,
    ):
        if not isinstance(name, str):
            raise TypeError("runner 'name' must be a string")

        try:
            errorhandling = ErrorHandling(errorhandling)
        except ValueError:
            raise DefinitionError(f"bad error handling value {errorhandling!r}") from None

        if usage is not Unset and not callable(usage):
            raise TypeError("runner 'usage' must be callable")

        self._name = name
        self._registry = Registry(commands)
        self._errorhandling = errorhandling
        self._usage = coalesce(usage, functools.partial(default_usage, colorful=bool(colorful)))
        self._console = console if console is not Unset else Console(stderr=True)

    @property
    def registry(self):
        return self._registry

    @property
    def commands(self):
        return self._registry.commands

    def run(self, args=Unset, /):
        """
        Resolve `args` and invoke the matching leaf handler.

        Parameters
        - args: Unset (read sys.argv[1:]) or an iterable of strings, excluding
          the program's own name.

        Returns
        - None after a leaf handler ran.
        - The usage fault under CONTINUE_ON_ERROR.

        Raises
        - SystemExit under EXIT_ON_ERROR (after rendering usage).
        - CommandPanic under PANIC_ON_ERROR.
        - TypeError when args is not an iterable of strings.
        - Anything raised by the handler, unmodified.
        """
        if args is Unset:
            args = sys.argv[1:]
        elif isinstance(args, str) or not isinstance(args, Iterable):
            raise TypeError("run() argument must be an iterable of strings")
        args = list(args)
        for arg in args:
            if not isinstance(arg, str):
                raise TypeError("run() argument must be an iterable of strings")

        resolution = resolve(self._registry, args, self._name)
        if resolution.fault is None:
            logger.debug("run %r: invoking %r", resolution.path, resolution.command.name)
            resolution.command.handler(list(resolution.args))
            return None

        logger.debug(
            "run %r: [%s] %s (%s)",
            resolution.path,
            resolution.fault.code.normalize(),
            resolution.fault,
            self._errorhandling.name,
        )
        return trigger(
            resolution.fault,
            errorhandling=self._errorhandling,
            usage=functools.partial(
                self._usage,
                resolution.path,
                resolution.registry.commands,
                self._console,
            ),
        )


def run(commands, args=Unset, /):
    """
    Dispatch sys.argv (or `args`) over `commands`, exiting on usage conditions.

    The program name shown in usage is the base name of sys.argv[0].
    """
    name = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "program"
    return Runner(name, commands, ErrorHandling.EXIT_ON_ERROR).run(args)


__all__ = (
    "PADDING",
    "Resolution",
    "resolve",
    "Runner",
    "default_usage",
    "print_defaults",
    "run",
)
