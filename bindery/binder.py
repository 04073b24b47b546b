"""
Bindery argument binder: align raw arguments with a parameter schema.

Algorithm (fixed schema)
1. fail when there are more raw arguments than parameters.
2. allocate one empty slot per parameter.
3. a named argument goes to the first empty slot whose parameter name matches
   under the comparison mode; unknown, already-filled or ambiguous names fail
   (names differing only in case are ambiguous under ignore-case).
4. a positional argument goes to the leftmost empty slot; none left fails.
5. empty slots take their parameter default; a required one fails.

Variadic schema (last parameter variadic)
- steps 3-5 only cover the fixed slots; positional arguments that find no empty
  fixed slot are appended, in encounter order, to an overflow sequence.
- a named argument targeting the variadic parameter fails; its values must be
  given positionally.
- the variadic slot always ends up holding the overflow sequence (possibly empty).

Every slot is a fresh Argument, so converting a bound set never touches the
caller's raw arguments or any other binding attempt.
"""
from .arguments import Argument, Comparison
from .faults import *
from .utils import ordinal


def _assign_error(index, argument, message, hint):
    return ArgumentAssignError(
        message,
        title="cannot assign argument",
        hint=hint,
        index=index,
        argument=argument,
    )


def attempt_bind(parameters, arguments, /, *, comparison=Comparison.ORDINAL):
    """
    bind raw arguments to parameters without raising.

    returns
    - Success(tuple[Argument, ...]) with one slot per parameter, or
    - Failure(fault, slots) where slots is the partially filled list (None = empty).
    """
    parameters = tuple(parameters)
    arguments = tuple(arguments)
    variadic = bool(parameters) and parameters[-1].variadic
    fixed = len(parameters) - variadic

    slots = [None] * len(parameters)
    if not variadic and len(arguments) > len(parameters):
        return Failure(ParameterFormatError(
            "too many arguments: expected at most %d but %d were given" % (len(parameters), len(arguments)),
            title="too many arguments",
            hint="remove the extra arguments",
        ), slots)

    overflow = []
    cursor = 0

    for index, argument in enumerate(arguments):
        if argument.named:
            matches = [
                position for position, parameter in enumerate(parameters)
                if comparison.equals(parameter.name, argument.name)
            ]
            if len(matches) > 1:
                # e.g. 'a' and 'A' under ignore-case
                return Failure(_assign_error(
                    index,
                    argument,
                    "argument name %r at %s position matches several parameters (%s)" % (
                        argument.name, ordinal(index + 1), ", ".join(parameters[match].name for match in matches)
                    ),
                    "pass these values positionally, or compare names with exact case",
                ), slots)
            if not matches or slots[matches[0]] is not None:
                return Failure(_assign_error(
                    index,
                    argument,
                    ("argument %r at %s position was already given" if matches else
                     "unknown argument name %r at %s position") % (argument.name, ordinal(index + 1)),
                    "give each argument once" if matches else "use one of the declared parameter names",
                ), slots)
            position, = matches

            if parameters[position].variadic:
                return Failure(_assign_error(
                    index,
                    argument,
                    "variadic parameter %r cannot be assigned by name at %s position" % (
                        argument.name, ordinal(index + 1)
                    ),
                    "pass its values as trailing positional arguments",
                ), slots)

            slots[position] = Argument(argument.content, name=parameters[position].name)
            continue

        while cursor < fixed and slots[cursor] is not None:
            cursor += 1

        if cursor < fixed:
            slots[cursor] = Argument(argument.content, name=parameters[cursor].name)
        elif variadic:
            overflow.append(argument.content)
        else:
            return Failure(_assign_error(
                index,
                argument,
                "no free parameter left for the %s argument %r" % (ordinal(index + 1), argument.content),
                "remove the extra positional argument or name it explicitly",
            ), slots)

    for position, parameter in enumerate(parameters[:fixed]):
        if slots[position] is not None:
            continue
        if not parameter.optional:
            return Failure(ParameterFormatError(
                "missing required parameter %r" % parameter.name,
                title="missing argument",
                hint="pass %r by position or as %s=<value>" % (parameter.name, parameter.name),
                parameter=parameter.name,
            ), slots)
        slots[position] = Argument.settled(parameter.default, name=parameter.name)

    if variadic:
        slots[-1] = Argument(overflow, name=parameters[-1].name)

    return Success(tuple(slots))


def bind(parameters, arguments, /, *, comparison=Comparison.ORDINAL):
    """
    bind raw arguments to parameters, raising the binding fault on failure.

    raises
    - ParameterFormatError: too many arguments, or a required parameter is missing.
    - ArgumentAssignError: an argument could not be placed (carries index and argument).
    """
    return attempt_bind(parameters, arguments, comparison=comparison).unwrap()


def try_bind(parameters, arguments, /, *, comparison=Comparison.ORDINAL):
    """
    bind raw arguments to parameters; returns (ok, slots).

    on failure, slots is the partially filled list (None marks an empty slot).
    """
    outcome = attempt_bind(parameters, arguments, comparison=comparison)
    return outcome.ok, outcome.value


__all__ = (
    "attempt_bind",
    "bind",
    "try_bind",
)
