"""
Bindery faults (errors) rendering and tagged outcomes.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure the engine
  can report. Codes are grouped by domain (converters, binding, resolution,
  front-end) to keep copy consistent and logs searchable.
- BinderyException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, actionable way.
- Success / Failure: tagged outcomes returned by the non-throwing core; the
  throwing API is a thin unwrap() on top of them.
- trigger(): central entry point to surface a fault (raise, or render in shell mode).

UX goals
- Position-first messages: binding faults mention the ordinal position of the
  offending argument (“third argument”, etc.).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType
from typing import final

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, rename

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - converters (13xxx)
      • CONVERTER_NOT_FOUND, PARAMETER_CONVERT
    - binding (14xxx)
      • ARGUMENT_ASSIGN, PARAMETER_FORMAT
    - resolution (15xxx)
      • OVERRIDE_NOT_FOUND, ENTRY_POINT_NOT_FOUND
    - front-end (16xxx)
      • MALFORMED_TOKEN
    """
    # --- converter errors (13xxx) ---
    CONVERTER_NOT_FOUND         = 13101
    PARAMETER_CONVERT           = 13102

    # --- binding errors (14xxx) ---
    ARGUMENT_ASSIGN             = 14101
    PARAMETER_FORMAT            = 14102

    # --- resolution errors (15xxx) ---
    OVERRIDE_NOT_FOUND          = 15101
    ENTRY_POINT_NOT_FOUND       = 15102

    # --- front-end errors (16xxx) ---
    MALFORMED_TOKEN             = 16101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(sys.modules.get("__main__"), "__codes__", {}).get(self, self.value))


def _detail(name, /):
    """
    read-only attribute backed by the fault options (e.g. fault.index).
    """
    @rename(name)
    def getter(self):
        try:
            return self.options[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} fault has no {name!r} detail") from None
    return property(getter)


class BinderyException(Exception):
    """
    base class of every fault raised by the engine.

    options
    - title, code, hint: rendering metadata.
    - any fault detail (index, argument, parameter, cause, ...), exposed as
      read-only attributes on the concrete subclasses.
    - shell, fancy, colorful, soft, tool: runtime switches merged in by trigger().
    """
    __code__ = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        if "code" not in options and self.__code__ is not Unset:
            options["code"] = self.__code__
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        main = sys.modules.get("__main__")
        options = defaultdict(lambda: None, self.options)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = options["colorful"] is not False

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style if colorful else "")

        tool = getattr(options["tool"], "name", "bindery")
        prog = text(getattr(main, "__prog__", tool), styler("prog-name"))
        code = options["code"].normalize() if isinstance(options["code"], FaultCode) else "-"

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code, styler("code")),
            " | ",
            text(str(options["title"] or "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(options["hint"], styler("hint")))

        if options["fancy"]:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self):
        if not self.options.get("shell"):
            raise self from self.__cause__
        console.print(self)
        if self.options.get("soft"):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        fault = type(self)(self.message, **{**self.options, **overrides})
        fault.__cause__ = self.__cause__
        return fault


class ConverterNotFoundError(BinderyException):
    """no strategy in the converter pipeline produced a converter for the requested type."""
    __code__ = FaultCode.CONVERTER_NOT_FOUND
    type = _detail("type")


class ArgumentAssignError(BinderyException):
    """a raw argument could not be placed (unknown name, name already filled, no free slot)."""
    __code__ = FaultCode.ARGUMENT_ASSIGN
    index = _detail("index")
    argument = _detail("argument")


class ParameterFormatError(BinderyException):
    """too many arguments, or a required parameter is still unfilled after binding."""
    __code__ = FaultCode.PARAMETER_FORMAT
    parameter = _detail("parameter")


class ParameterConvertError(BinderyException):
    """the converter rejected (or raised on) a bound value."""
    __code__ = FaultCode.PARAMETER_CONVERT
    parameter = _detail("parameter")
    cause = _detail("cause")


class OverrideNotFoundError(BinderyException):
    """at least one overload shares the requested name, but none bound and converted."""
    __code__ = FaultCode.OVERRIDE_NOT_FOUND
    name = _detail("name")
    attempts = _detail("attempts")


class EntryPointNotFoundError(BinderyException):
    """no overload shares the requested name at all."""
    __code__ = FaultCode.ENTRY_POINT_NOT_FOUND
    name = _detail("name")


class MalformedTokenError(BinderyException):
    __code__ = FaultCode.MALFORMED_TOKEN
    token = _detail("token")
    index = _detail("index")


@final
class Success:
    """
    successful outcome holding a value.
    """
    __slots__ = ("value",)
    __match_args__ = ("value",)

    ok = True

    def __init__(self, value, /):
        self.value = value

    def unwrap(self):
        return self.value

    def __repr__(self):
        return f"Success({self.value!r})"


@final
class Failure:
    """
    failed outcome holding a fault and, optionally, the partial value computed
    before the failure (e.g. a half-filled slot list).
    """
    __slots__ = ("fault", "value")
    __match_args__ = ("fault",)

    ok = False

    def __init__(self, fault, /, value=None):
        if not isinstance(fault, BinderyException):
            raise TypeError("Failure() argument must be a bindery fault")
        self.fault = fault
        self.value = value

    def unwrap(self):
        raise self.fault

    def __repr__(self):
        return f"Failure({self.fault!r})"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see BinderyException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise, the fault is raised.

    typical options
    - tool, shell, fancy, colorful, soft.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "BinderyException",
    "ConverterNotFoundError",
    "ArgumentAssignError",
    "ParameterFormatError",
    "ParameterConvertError",
    "OverrideNotFoundError",
    "EntryPointNotFoundError",
    "MalformedTokenError",
    "FaultCode",
    "Success",
    "Failure",
    "trigger",
)
