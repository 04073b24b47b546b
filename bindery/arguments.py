r"""
Bindery argument and parameter model.

Overview
- Comparison: case-sensitivity mode for every name comparison (argument names,
  overload names, enumeration members). It is always passed explicitly; nothing
  in the engine stores it as state.
- Argument: one raw or bound argument (optional name, string content, value).
- Parameter: static declaration of one parameter (name, declared type, default,
  variadic flag).
- Overload: one named, parameter-schema-bound candidate entry point.
- overload(): startup builder that reads a Python callable's signature once and
  produces an Overload whose callback accepts a flat positional vector.

Argument lifecycle
- Created by the tokenizer (raw) or by the binder (defaults, packed variadic slot).
- Assigning content resets value to the content and marks the argument raw.
- Assigning value marks the argument settled; settled arguments are never converted.

Introspection & representation
- DescriptorType metaclass provides stable __repr__/__rich_repr__ and exposes the
  fields declared in __introspectable__ as read-only properties.

Quick example:
    >>> from bindery.arguments import overload
    >>> def move(x: int, y: int, label: str = "pt"): ...
    >>> overload(move).parameters[2].default
    'pt'
"""
import enum
import functools
import inspect
import operator
import re
import typing
from collections.abc import Sequence

from .utils import *


class Comparison(enum.Enum):
    """
    Case-sensitivity mode used when comparing names and literals.

    - ORDINAL: exact, case-sensitive comparison.
    - IGNORE_CASE: comparison on case-folded text.
    """
    ORDINAL = "ordinal"
    IGNORE_CASE = "ignore-case"

    @property
    def ignorecase(self):
        return self is Comparison.IGNORE_CASE

    def equals(self, left, right, /):
        """
        Compare two names under this mode. None never matches anything.
        """
        if left is None or right is None:
            return False
        if self is Comparison.IGNORE_CASE:
            return left.casefold() == right.casefold()
        return left == right


class DescriptorType(type):
    """
    Metaclass that turns model classes into introspectable descriptors.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics (rich.pretty and fault rendering).

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - parameter(name='x', type=<class 'int'>, default=Unset, variadic=False)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Argument(metaclass=DescriptorType):
    """
    Raw or bound command argument.

    Fields
    - name: optional explicit target parameter name (None for positional).
    - content: the raw text, or a tuple of texts for a packed variadic slot.
    - value: the raw content until a converter overwrites it, or a settled value.

    Notes
    - Blank names count as positional (see `named`).
    - `raw` tells whether value still holds the unconverted content.
    """
    __displayable__ = ("name", "content", "value")

    def __init__(self, content, /, name=None):
        self.name = name
        self.content = content

    @classmethod
    def settled(cls, value, /, name=None):
        """
        Build an argument whose value is final (no content, no conversion).

        Used by the binder for parameter defaults.
        """
        self = cls.__new__(cls)
        self.name = name
        self._content = None
        self.value = value
        return self

    @property
    def name(self):
        return self._name

    @name.setter
    def name(self, name):
        if name is not None and not isinstance(name, str):
            raise TypeError("argument 'name' must be a string")
        self._name = name

    @property
    def content(self):
        return self._content

    @content.setter
    def content(self, content):
        if isinstance(content, Sequence) and not isinstance(content, str):
            content = tuple(content)
            if not all(isinstance(item, str) for item in content):
                raise TypeError("argument 'content' items must be strings")
        elif not isinstance(content, str):
            raise TypeError("argument 'content' must be a string or a sequence of strings")
        self._content = content
        self._value = content
        self._raw = True

    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, value):
        self._value = value
        self._raw = False

    @property
    def raw(self):
        return self._raw

    @property
    def named(self):
        return isinstance(self._name, str) and bool(self._name.strip())


class Parameter(metaclass=DescriptorType):
    """
    Static declaration of one parameter.

    Fields
    - name: identifier, unique within its schema.
    - type: declared target type (class, generic alias or NewType marker).
    - default: Unset when the parameter is required.
    - variadic: collects positional overflow; only valid as the last parameter.
    """
    __introspectable__ = (
        "name",
        "type",
        "default",
        "variadic",
    )

    def __init__(self, name, /, type=str, default=Unset, *, variadic=False):
        if not isinstance(name, str):
            raise TypeError(f"{self.__typename__} 'name' must be a string")
        elif not name.isidentifier():
            raise ValueError(f"{self.__typename__} 'name' must be a valid identifier, got {name!r}")
        if type is None:
            raise TypeError(f"{self.__typename__} 'type' cannot be None")
        if variadic and default is not Unset:
            raise TypeError(f"variadic {self.__typename__} cannot have a default")
        if variadic and (typing.get_origin(type) or type) not in (list, tuple, Sequence):
            raise TypeError(f"variadic {self.__typename__} {name!r} must be declared as a list, tuple or sequence")

        self._name = name
        self._type = type
        self._default = default
        self._variadic = bool(variadic)

    @property
    def optional(self):
        return self._default is not Unset


class Overload(metaclass=DescriptorType):
    """
    One named candidate entry point.

    Fields
    - name: command name (several overloads may share it).
    - parameters: ordered tuple of Parameter.
    - converters: per-position converter overrides, padded with None.
    - callback: opaque invocation capability handed to the invoker.

    Invariants (checked at construction)
    - only the last parameter may be variadic.
    - parameter names are unique.
    - there are no more converter overrides than parameters.
    """
    __introspectable__ = (
        "name",
        "parameters",
        "converters",
        "callback",
    )
    __displayable__ = (
        "name",
        "parameters",
        "converters",
    )

    def __init__(self, name, parameters, callback, /, converters=()):
        if not isinstance(name, str):
            raise TypeError(f"{self.__typename__} 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{self.__typename__} 'name' cannot be empty")

        parameters = tuple(parameters)
        for parameter in parameters:
            if not isinstance(parameter, Parameter):
                raise TypeError(f"{self.__typename__} parameters must be parameter descriptors")
        if any(parameter.variadic for parameter in parameters[:-1]):
            raise ValueError(f"{self.__typename__} {name!r} can only have its last parameter variadic")
        if len({parameter.name for parameter in parameters}) != len(parameters):
            raise ValueError(f"{self.__typename__} {name!r} parameter names must be unique")

        converters = tuple(converters)
        if len(converters) > len(parameters):
            raise ValueError(f"{self.__typename__} {name!r} has more converters than parameters")

        self._name = name
        self._parameters = parameters
        self._converters = converters + (None,) * (len(parameters) - len(converters))
        self._callback = callback

    @property
    def variadic(self):
        return bool(self._parameters) and self._parameters[-1].variadic


def _trampoline(callback, signature):
    """
    wrap callback so it can be called with one value per declared parameter.

    - positional parameters receive their value positionally.
    - the variadic slot (a sequence) is expanded in place.
    - keyword-only parameters receive their value by keyword.
    """
    layout = tuple((parameter.name, parameter.kind) for parameter in signature.parameters.values())

    if all(kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD) for _, kind in layout):
        return callback

    @functools.wraps(callback)
    def trampoline(*values):
        args = []
        kwargs = {}
        for (name, kind), value in zip(layout, values):
            match kind:
                case inspect.Parameter.VAR_POSITIONAL:
                    args.extend(value)
                case inspect.Parameter.KEYWORD_ONLY:
                    kwargs[name] = value
                case _:
                    args.append(value)
        return callback(*args, **kwargs)

    return trampoline


def overload(callback, /, name=Unset, converters=()):
    """
    Build an Overload from a Python callable (startup-time builder).

    Parameters
    - callback: Callable
      Its signature and annotations are read once, here; resolution never
      introspects it again.
    - name: Unset | str
      Command name; defaults to callback.__name__.
    - converters: Iterable[Converter | None]
      Per-position converter overrides.

    Mapping rules
    - unannotated parameters are declared as str.
    - `*args: T` becomes a variadic parameter declared as tuple[T, ...].
    - `**kwargs` is rejected (TypeError).
    - keyword-only parameters after `*args` are rejected by Overload (ValueError),
      since the variadic parameter must come last.

    Returns
    - Overload whose callback accepts one value per parameter, positionally.
    """
    if not callable(callback):
        raise TypeError("overload() first argument must be callable")

    signature = inspect.signature(callback)
    try:
        hints = typing.get_type_hints(callback)
    except TypeError:
        # not a function/class/module (e.g. a callable instance): annotations are unavailable
        hints = {}

    parameters = []
    for parameter in signature.parameters.values():
        annotation = hints.get(parameter.name, parameter.annotation)
        if annotation is inspect.Parameter.empty:
            annotation = str
        match parameter.kind:
            case inspect.Parameter.VAR_KEYWORD:
                raise TypeError(f"overload() cannot bind variadic keyword parameter {parameter.name!r}")
            case inspect.Parameter.VAR_POSITIONAL:
                parameters.append(Parameter(parameter.name, tuple[annotation, ...], variadic=True))
            case _:
                default = Unset if parameter.default is inspect.Parameter.empty else parameter.default
                parameters.append(Parameter(parameter.name, annotation, default))

    name = coalesce(name, getattr(callback, "__name__", Unset))
    if name is Unset:
        raise TypeError("overload() requires a name for callables without __name__")

    return Overload(name, parameters, _trampoline(callback, signature), converters)


__all__ = (
    "Comparison",
    "Argument",
    "Parameter",
    "Overload",
    "overload",
)
