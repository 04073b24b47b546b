"""
Bindery converters: typed conversion of raw argument content.

Overview
- Converter variants (closed set, dispatched by pattern matching in convert()):
  • ScalarConverter(kind): built-in scalar kinds (booleans, fixed-width and
    arbitrary-precision integers, floats, characters, character arrays, strings,
    hex bytes, decimals).
  • EnumConverter(target): member names (optionally case-insensitive), then the
    underlying integer value.
  • SequenceConverter(element): applies an element converter to every item.
  • CustomConverter(target, function): escape hatch for per-overload overrides.
- ConverterRegistry: direct type → converter map plus an ordered strategy pipeline
  (mapping, enumerations, sequences). The first strategy returning a converter wins.
- coerce(): the conversion step applied to a bound argument set.

Case sensitivity
- Converters are immutable and shared process-wide. The case-sensitivity mode is
  passed to every convert() call as `ignorecase`; it is never stored on a converter.

Registry lifecycle
- Populate once during startup, then freeze(). Registration after freezing raises
  RuntimeError. Lookups never mutate the registry.
"""
import builtins
import collections.abc
import decimal
import enum
import logging
import typing
from types import MappingProxyType

from .arguments import Comparison, DescriptorType
from .faults import *
from .utils import *

logger = logging.getLogger(__name__)


Int8 = typing.NewType("Int8", int)
Int16 = typing.NewType("Int16", int)
Int32 = typing.NewType("Int32", int)
Int64 = typing.NewType("Int64", int)
UInt8 = typing.NewType("UInt8", int)
UInt16 = typing.NewType("UInt16", int)
UInt32 = typing.NewType("UInt32", int)
UInt64 = typing.NewType("UInt64", int)
Char = typing.NewType("Char", str)


class Kind(enum.Enum):
    """
    built-in scalar kinds handled by ScalarConverter.
    """
    BOOLEAN = "boolean"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT = "float"
    CHAR = "char"
    CHARS = "chars"
    STRING = "string"
    HEXBYTES = "hexbytes"
    BIGINT = "bigint"
    DECIMAL = "decimal"

    @property
    def target(self):
        return _TARGETS[self]


_TARGETS = MappingProxyType({
    Kind.BOOLEAN: bool,
    Kind.INT8: Int8,
    Kind.INT16: Int16,
    Kind.INT32: Int32,
    Kind.INT64: Int64,
    Kind.UINT8: UInt8,
    Kind.UINT16: UInt16,
    Kind.UINT32: UInt32,
    Kind.UINT64: UInt64,
    Kind.FLOAT: float,
    Kind.CHAR: Char,
    Kind.CHARS: list[Char],
    Kind.STRING: str,
    Kind.HEXBYTES: bytes,
    Kind.BIGINT: int,
    Kind.DECIMAL: decimal.Decimal,
})

# inclusive bounds of the fixed-width integer kinds
_BOUNDS = MappingProxyType({
    Kind.INT8: (-2 ** 7, 2 ** 7 - 1),
    Kind.INT16: (-2 ** 15, 2 ** 15 - 1),
    Kind.INT32: (-2 ** 31, 2 ** 31 - 1),
    Kind.INT64: (-2 ** 63, 2 ** 63 - 1),
    Kind.UINT8: (0, 2 ** 8 - 1),
    Kind.UINT16: (0, 2 ** 16 - 1),
    Kind.UINT32: (0, 2 ** 32 - 1),
    Kind.UINT64: (0, 2 ** 64 - 1),
})

_BOOLEANS = MappingProxyType({
    "true": True,
    "false": False,
    "True": True,
    "False": False,
    "yes": True,
    "no": False,
    "on": True,
    "off": False,
    "1": True,
    "0": False,
})


class ScalarConverter(metaclass=DescriptorType):
    __introspectable__ = ("kind",)
    __match_args__ = ("kind",)

    def __init__(self, kind, /):
        if not isinstance(kind, Kind):
            raise TypeError(f"{self.__typename__} 'kind' must be a scalar kind")
        self._kind = kind

    @property
    def target(self):
        return self._kind.target

    def convert(self, source, /, *, ignorecase=False):
        return convert(self, source, ignorecase=ignorecase)


class EnumConverter(metaclass=DescriptorType):
    __introspectable__ = ("target",)
    __match_args__ = ("target",)

    def __init__(self, target, /):
        if not isinstance(target, type) or not issubclass(target, enum.Enum):
            raise TypeError(f"{self.__typename__} 'target' must be an enumeration")
        self._target = target
        # aliases included, in definition order
        self._members = MappingProxyType(dict(target.__members__))

    @property
    def members(self):
        return self._members

    def convert(self, source, /, *, ignorecase=False):
        return convert(self, source, ignorecase=ignorecase)


class SequenceConverter(metaclass=DescriptorType):
    __introspectable__ = ("element", "factory")
    __match_args__ = ("element",)

    def __init__(self, element, /, factory=tuple, target=Unset):
        if factory not in (list, tuple):
            raise TypeError(f"{self.__typename__} 'factory' must be list or tuple")
        self._element = element
        self._factory = factory
        self._target = coalesce(target, list[element.target] if factory is list else tuple[element.target, ...])

    @property
    def target(self):
        return self._target

    def convert(self, source, /, *, ignorecase=False):
        return convert(self, source, ignorecase=ignorecase)


class CustomConverter(metaclass=DescriptorType):
    """
    user-supplied conversion: function(text, ignorecase) -> value.
    """
    __introspectable__ = ("target", "function")
    __match_args__ = ("target", "function")

    def __init__(self, target, function, /):
        if not callable(function):
            raise TypeError(f"{self.__typename__} 'function' must be callable")
        self._target = target
        self._function = function

    def convert(self, source, /, *, ignorecase=False):
        return convert(self, source, ignorecase=ignorecase)


def _integer(text):
    # digit group separators are not integer literal syntax here
    if "_" in text:
        raise ValueError(f"invalid integer literal {text!r}")
    return int(text)


def _scalar(kind, text, ignorecase):
    if not isinstance(text, str):
        raise TypeError(f"{kind.value} conversion expects a string, got {type(text).__name__}")

    match kind:
        case Kind.STRING:
            return text
        case Kind.BOOLEAN:
            key = text.strip()
            try:
                return _BOOLEANS[key.lower() if ignorecase else key]
            except KeyError:
                raise ValueError(f"{text!r} is not a boolean literal") from None
        case Kind.CHAR:
            if len(text) != 1:
                raise ValueError(f"{text!r} is not a single character")
            return text
        case Kind.CHARS:
            # whole text, one item per character (no comma splitting)
            return list(text)
        case Kind.FLOAT:
            return float(text)
        case Kind.DECIMAL:
            try:
                return decimal.Decimal(text.strip())
            except decimal.InvalidOperation:
                raise ValueError(f"{text!r} is not a decimal number") from None
        case Kind.HEXBYTES:
            digits = text.strip()
            if digits[:2] in ("0x", "0X"):
                digits = digits[2:]
            return bytes.fromhex(digits)
        case Kind.BIGINT:
            return _integer(text)
        case _:
            value = _integer(text)
            lower, upper = _BOUNDS[kind]
            if not lower <= value <= upper:
                raise OverflowError(f"{value} is out of range for {kind.value} [{lower}, {upper}]")
            return value


def _enumeration(target, members, text, ignorecase):
    if not isinstance(text, str):
        raise TypeError(f"{target.__name__} conversion expects a string, got {type(text).__name__}")

    comparison = Comparison.IGNORE_CASE if ignorecase else Comparison.ORDINAL
    for name, member in members.items():
        if comparison.equals(name, text):
            return member

    try:
        number = _integer(text)
    except ValueError:
        raise ValueError(f"{text!r} is not a member of {target.__name__}") from None
    return target(number)


def convert(converter, source, /, *, ignorecase=False):
    """
    convert source with the given converter.

    parameters
    - converter: one of the converter variants.
    - source: str, or a sequence of str for SequenceConverter.
    - ignorecase: case-insensitive literal/member matching for this call only.

    errors
    - whatever the underlying parse raises (ValueError, TypeError, OverflowError, ...).
      callers wrap these into ParameterConvertError.
    """
    match converter:
        case ScalarConverter(kind):
            return _scalar(kind, source, ignorecase)
        case EnumConverter(target):
            return _enumeration(target, converter.members, source, ignorecase)
        case SequenceConverter(element):
            if isinstance(source, str):
                # a single named value: comma separated items
                source = source.split(",") if source else []
            elif not isinstance(source, collections.abc.Sequence):
                raise TypeError(f"sequence conversion expects a sequence, got {type(source).__name__}")
            return converter.factory(convert(element, item, ignorecase=ignorecase) for item in source)
        case CustomConverter(_, function):
            return function(source, ignorecase)
        case _:
            raise TypeError(f"convert() argument must be a converter, got {type(converter).__name__}")


def from_mapping(registry, target, /):
    """strategy: direct lookup in the registry's explicit map."""
    try:
        return registry.mapping.get(target)
    except TypeError:
        # unhashable annotation
        return None


def for_enum(registry, target, /):
    """strategy: synthesize a converter for any enumeration type."""
    if isinstance(target, type) and issubclass(target, enum.Enum):
        return EnumConverter(target)
    return None


def for_sequence(registry, target, /):
    """
    strategy: list[T], tuple[T, ...], Sequence[T] (and bare list/tuple/Sequence of str).

    resolves the element converter recursively through the same registry; fails
    (returns None) when the element type has no converter.
    """
    origin, parameters = typing.get_origin(target), typing.get_args(target)
    if origin is None and target in (list, tuple, collections.abc.Sequence):
        origin, parameters = target, (str,)

    match origin, parameters:
        case builtins.list, (element,):
            factory = list
        case builtins.tuple, (element,) if target is tuple:
            factory = tuple
        case builtins.tuple, (element, builtins.Ellipsis):
            factory = tuple
        case collections.abc.Sequence, (element,):
            factory = tuple
        case _:
            return None

    if (converter := registry.resolve(element)) is None:
        return None
    return SequenceConverter(converter, factory, target)


def _defaults():
    return {kind.target: ScalarConverter(kind) for kind in Kind}


class ConverterRegistry:
    """
    process-wide table of converters plus the resolution pipeline.

    pipeline
    - strategies are callables strategy(registry, target) -> converter | None,
      tried in order; the first non-None result wins.
    - default order: from_mapping, for_enum, for_sequence.

    api shapes
    - resolve(target): non-throwing query, returns None when nothing matches.
    - get(target): strict accessor, raises ConverterNotFoundError.
    """

    def __init__(self, mapping=Unset, pipeline=Unset):
        self._mapping = _defaults() if mapping is Unset else dict(mapping)
        self._pipeline = list(coalesce(pipeline, (from_mapping, for_enum, for_sequence)))
        self._frozen = False

    @property
    def mapping(self):
        return MappingProxyType(self._mapping)

    @property
    def pipeline(self):
        return tuple(self._pipeline)

    @property
    def frozen(self):
        return self._frozen

    def register(self, target, converter, /):
        """
        map target directly to converter (replacing any previous entry).
        """
        if self._frozen:
            raise RuntimeError("cannot register converters into a frozen registry")
        if not hasattr(converter, "convert"):
            raise TypeError("register() second argument must be a converter")
        self._mapping[target] = converter
        logger.debug("registered converter %r for %r", converter, target)
        return converter

    def extend(self, strategy, /):
        """
        append a strategy at the end of the pipeline.
        """
        if self._frozen:
            raise RuntimeError("cannot extend the pipeline of a frozen registry")
        if not callable(strategy):
            raise TypeError("extend() argument must be callable")
        self._pipeline.append(strategy)
        return strategy

    def freeze(self):
        self._frozen = True
        logger.debug("converter registry frozen with %d direct entries", len(self._mapping))
        return self

    def resolve(self, target, /):
        for strategy in self._pipeline:
            if (converter := strategy(self, target)) is not None:
                return converter
        return None

    def get(self, target, /):
        if (converter := self.resolve(target)) is not None:
            return converter
        raise ConverterNotFoundError(
            "no converter found for type %r" % (target,),
            title="converter not found",
            hint="register a converter for this type before resolving commands",
            type=target,
        )

    def __contains__(self, target):
        return self.resolve(target) is not None


def _unwrap(target):
    target = typing.get_origin(target) or target
    # NewType markers stand for their supertype
    while hasattr(target, "__supertype__"):
        target = target.__supertype__
    return target


def _accepts(declared, target):
    """
    whether values produced for `target` can be passed where `declared` is expected.
    """
    if declared is target or declared in (typing.Any, object):
        return True
    try:
        if declared == target:
            return True
        return issubclass(_unwrap(target), _unwrap(declared))
    except TypeError:
        return False


def coerce(overload, bound, /, *, comparison=Comparison.ORDINAL, registry=Unset):
    """
    convert every raw slot of a bound argument set to its declared type.

    per position
    - the overload's converter override is used when present; its target must be
      acceptable for the declared parameter type, otherwise ParameterConvertError.
    - otherwise the registry resolves a converter for the declared type;
      ConverterNotFoundError when none exists.
    - settled arguments (defaults) are left untouched.
    - any exception raised by the converter becomes ParameterConvertError
      (with the original exception as cause).

    returns
    - Success(bound) with the arguments' values converted in place, or
      Failure(fault, bound) at the first failing position.
    """
    registry = coalesce(registry, converter_registry)
    bound = tuple(bound)
    if len(bound) != len(overload.parameters):
        raise ValueError("coerce() bound arguments must match the overload parameters")

    for parameter, argument, override in zip(overload.parameters, bound, overload.converters):
        if override is not None and not _accepts(parameter.type, override.target):
            cause = TypeError(f"converter target {override.target!r} does not match {parameter.type!r}")
            fault = ParameterConvertError(
                "converter for parameter %r does not produce its declared type" % parameter.name,
                title="converter type mismatch",
                hint="fix the converter override declared for this command",
                parameter=parameter.name,
                cause=cause,
            )
            fault.__cause__ = cause
            return Failure(fault, bound)

        if not argument.raw:
            continue

        if (converter := override) is None and (converter := registry.resolve(parameter.type)) is None:
            return Failure(ConverterNotFoundError(
                "no converter found for parameter %r of type %r" % (parameter.name, parameter.type),
                title="converter not found",
                hint="register a converter for this type before resolving commands",
                type=parameter.type,
            ), bound)

        try:
            argument.value = converter.convert(argument.value, ignorecase=comparison.ignorecase)
        except Exception as exception:
            fault = ParameterConvertError(
                "cannot convert %r for parameter %r: %s" % (argument.content, parameter.name, exception),
                title="bad argument",
                hint="pass a value of type %s" % (getattr(parameter.type, "__name__", parameter.type),),
                parameter=parameter.name,
                cause=exception,
            )
            fault.__cause__ = exception
            return Failure(fault, bound)

    return Success(bound)


converter_registry = ConverterRegistry()
"""
process-wide default registry (populate at startup, then freeze()).
"""


__all__ = (
    # Marker types
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Char",

    # Converters
    "Kind",
    "ScalarConverter",
    "EnumConverter",
    "SequenceConverter",
    "CustomConverter",
    "convert",

    # Pipeline
    "from_mapping",
    "for_enum",
    "for_sequence",
    "ConverterRegistry",
    "coerce",
    "converter_registry",
)
