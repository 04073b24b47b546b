"""
Bindery command layer: build a command table once, then dispatch prompts to it.

What this module provides
- CommandTable: the explicit registry of overloads built at startup.
  • command(...) registers Python callables as overloads (decorator or call).
  • resolve/can_invoke/invoke/try_invoke delegate to the resolver with the table's
    comparison mode, converter registry and invocation capability.
  • __invoke__(prompt) tokenizes a prompt, dispatches it, and surfaces faults
    (raised, or rendered with rich in shell mode).
- parse(tokens): turn shell tokens into raw arguments.
- invoke(table, prompt): convenience runner.

Quick start
    from bindery import CommandTable, invoke

    table = CommandTable("geo", shell=True)

    @table.command
    def move(x: int, y: int, label: str = "pt"):
        print(label, x, y)

    @table.command(name="move")
    def move_by_name(label: str):
        print(label)

    if __name__ == "__main__":
        invoke(table, "move 10 20 --label=home")

Token grammar
- '--name=value': named argument (hyphens in name become underscores).
- '--name': named argument with content 'true' (boolean switches).
- '--': every following token is positional.
- anything else: positional argument.
"""
import re
import shlex
import sys
from collections.abc import Iterable

from . import invoker as _invoker
from . import resolver
from .arguments import Argument, Comparison, Overload, overload
from .converters import converter_registry
from .faults import *
from .utils import *

_SWITCH = re.compile(r"--(?P<name>[^\W\d](?:[\w-]*\w)?)(?:=(?P<value>.*))?", re.DOTALL)


def parse(tokens, /):
    """
    turn a token sequence into raw arguments.

    returns
    - list[Argument] in the order the tokens were given.

    raises
    - MalformedTokenError: a token starts with '--' but is not a valid switch.
    """
    arguments = []
    positional = False

    for index, token in enumerate(tokens):
        if not isinstance(token, str):
            raise TypeError("parse() argument must be an iterable of strings")
        if positional or not token.startswith("--"):
            arguments.append(Argument(token))
            continue
        if token == "--":
            positional = True
            continue
        if not (match := _SWITCH.fullmatch(token)):
            raise MalformedTokenError(
                "bad form of named argument %r at %s position" % (token, ordinal(index + 1)),
                title="malformed named argument",
                hint="use --name=value, or put '--' before positional values starting with '--'",
                token=token,
                index=index,
            )
        value = match["value"]
        arguments.append(Argument("true" if value is None else value, name=match["name"].replace("-", "_")))

    return arguments


class CommandTable:
    """
    Ordered table of command overloads plus the runtime options used to dispatch them.

    Options
    - ignorecase: compare command names, argument names and enumeration members
      without regard to case.
    - registry: ConverterRegistry used for declared types (defaults to the
      process-wide `converter_registry`).
    - invoker: invocation capability invoker(callback, values) -> result.
    - shell/fancy/colorful/soft: fault surfacing in __invoke__ (see faults.trigger).

    Notes
    - declaration order is resolution order; the first overload that binds and
      converts wins.
    - the table is meant to be filled at startup; it is not safe to register
      commands while other threads dispatch.
    """

    def __init__(
            self,
            name="bindery",
            /,
            *,
            ignorecase=False,
            registry=Unset,
            invoker=_invoker.call,
            shell=False,
            fancy=False,
            colorful=True,
            soft=False,
    ):
        if not isinstance(name, str):
            raise TypeError("command table 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError("command table 'name' cannot be empty")
        if not callable(invoker):
            raise TypeError("command table 'invoker' must be callable")

        self._name = name
        self._comparison = Comparison.IGNORE_CASE if ignorecase else Comparison.ORDINAL
        self._registry = coalesce(registry, converter_registry)
        self._invoker = invoker
        self._overloads = []
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)
        self.soft = bool(soft)

    name = mirror("name")
    comparison = mirror("comparison")
    registry = mirror("registry")

    @property
    def overloads(self):
        return tuple(self._overloads)

    @property
    def names(self):
        """
        distinct command names, in declaration order.
        """
        return tuple(dict.fromkeys(overload.name for overload in self._overloads))

    def add(self, overload, /):
        if not isinstance(overload, Overload):
            raise TypeError("add() argument must be an overload")
        self._overloads.append(overload)
        return overload

    def command(self, source=Unset, /, name=Unset, converters=()):
        """
        Register a callable as an overload, or return a decorator doing so.

        Invocation modes
        - table.command(func, name="x") → registers and returns func.
        - @table.command                 → same, name taken from func.__name__.
        - @table.command(name="x", converters=(...)) → decorator.

        The callable is returned unchanged so several functions can register
        overloads under the same command name.
        """
        @rename("command")
        def wrapper(source, /):
            if not callable(source):
                raise TypeError("@command() must be applied to a callable")
            self.add(overload(source, name, converters))
            return source

        return wrapper(source) if source is not Unset else wrapper

    def resolve(self, name, arguments, /):
        return resolver.resolve(self._overloads, name, arguments, comparison=self._comparison, registry=self._registry)

    def can_invoke(self, name, arguments=(), /):
        return resolver.can_invoke(
            self._overloads, name, arguments, comparison=self._comparison, registry=self._registry
        )

    def invoke(self, name, arguments=(), /):
        return resolver.invoke(
            self._overloads, name, arguments,
            comparison=self._comparison, registry=self._registry, invoker=self._invoker
        )

    def try_invoke(self, name, arguments=(), /):
        return resolver.try_invoke(
            self._overloads, name, arguments,
            comparison=self._comparison, registry=self._registry, invoker=self._invoker
        )

    def trigger(self, fault, /, **options):
        trigger(fault, **{
            "tool": self,
            "shell": self.shell,
            "fancy": self.fancy,
            "colorful": self.colorful,
            "soft": self.soft,
        } | options)

    def __invoke__(self, prompt=Unset):
        """
        Dispatch a prompt: first token is the command name, the rest are arguments.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.

        Returns
        - the callable's result, or None when a fault was surfaced softly.

        Only tokenizing and resolution faults go through trigger(); anything the
        callable raises (bindery faults included) propagates unchanged.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        if not tokens:
            return self.trigger(EntryPointNotFoundError(
                "no command given",
                title="missing command",
                hint="available commands: %s" % ", ".join(self.names),
                name="",
            ))

        name, *tokens = tokens
        try:
            entry, bound = self.resolve(name, parse(tokens)).unwrap()
        except BinderyException as fault:
            return self.trigger(fault)

        # outside the try: faults raised by the command itself propagate as-is
        return _invoker.invoke(entry, bound, self._invoker)

    def __rich_repr__(self):
        yield "name", self._name
        yield "comparison", self._comparison
        yield "names", self.names

    def __repr__(self):
        return f"command-table(name={self._name!r}, names={self.names!r})"


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for command tables.

    Behavior
    - If 'object' implements __invoke__, call it with prompt and return its result.
    - Otherwise, raise TypeError.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "CommandTable",
    "parse",
    "invoke",
)
