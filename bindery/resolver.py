"""
Bindery overload resolver: pick the first overload that binds and converts.

Resolution
- candidates are scanned strictly in declaration order; only those whose name
  matches (under the comparison mode) are attempted.
- an attempt is bind + coerce on a fresh slot set; the first success wins.
  there is no scoring and no ambiguity detection.
- some name matched but nothing succeeded → OverrideNotFoundError
  (the rejected attempts are kept in its `attempts` detail).
- no name matched at all → EntryPointNotFoundError.

API shapes
- resolve(): tagged outcome holding (overload, bound).
- can_invoke(): boolean probe (dry run), every fault collapses to False.
- invoke(): raises the fault, or returns what the callable returns.
- try_invoke(): (ok, result); exceptions from the callable still propagate.
- invoke_overload(): one overload, raising its own binding/conversion fault.
"""
import logging

from . import invoker as _invoker
from .arguments import Comparison
from .binder import attempt_bind
from .converters import coerce
from .faults import *
from .utils import Unset

logger = logging.getLogger(__name__)


def attempt(overload, arguments, /, *, comparison=Comparison.ORDINAL, registry=Unset):
    """
    bind and convert raw arguments for one overload; returns an outcome.
    """
    outcome = attempt_bind(overload.parameters, arguments, comparison=comparison)
    if not outcome.ok:
        return outcome
    return coerce(overload, outcome.value, comparison=comparison, registry=registry)


def resolve(overloads, name, arguments, /, *, comparison=Comparison.ORDINAL, registry=Unset):
    """
    find the first overload called `name` whose attempt succeeds.

    returns
    - Success((overload, bound)) or Failure(OverrideNotFoundError | EntryPointNotFoundError).
    """
    arguments = tuple(arguments)
    attempts = []

    for overload in overloads:
        if not comparison.equals(overload.name, name):
            continue
        outcome = attempt(overload, arguments, comparison=comparison, registry=registry)
        if outcome.ok:
            logger.debug("resolved %r to overload #%d", name, len(attempts) + 1)
            return Success((overload, outcome.value))
        logger.debug("overload #%d of %r rejected: %s", len(attempts) + 1, name, outcome.fault)
        attempts.append(outcome.fault)

    if attempts:
        return Failure(OverrideNotFoundError(
            "no overload of %r accepts the given arguments" % name,
            title="bad arguments",
            hint=str(attempts[0]) if len(attempts) == 1 else "check the arguments against each overload of %r" % name,
            name=name,
            attempts=tuple(attempts),
        ))

    return Failure(EntryPointNotFoundError(
        "unknown command %r" % name,
        title="unknown command",
        hint="check the command name",
        name=name,
    ))


def can_invoke(overloads, name, arguments, /, *, comparison=Comparison.ORDINAL, registry=Unset):
    return resolve(overloads, name, arguments, comparison=comparison, registry=registry).ok


def invoke(overloads, name, arguments, /, *, comparison=Comparison.ORDINAL, registry=Unset, invoker=_invoker.call):
    overload, bound = resolve(overloads, name, arguments, comparison=comparison, registry=registry).unwrap()
    return _invoker.invoke(overload, bound, invoker)


def try_invoke(overloads, name, arguments, /, *, comparison=Comparison.ORDINAL, registry=Unset, invoker=_invoker.call):
    outcome = resolve(overloads, name, arguments, comparison=comparison, registry=registry)
    if not outcome.ok:
        return False, None
    overload, bound = outcome.value
    return True, _invoker.invoke(overload, bound, invoker)


def invoke_overload(overload, arguments, /, *, comparison=Comparison.ORDINAL, registry=Unset, invoker=_invoker.call):
    """
    invoke a single overload directly (no name matching).

    raises the overload's own ParameterFormatError / ArgumentAssignError /
    ConverterNotFoundError / ParameterConvertError instead of OverrideNotFoundError.
    """
    bound = attempt(overload, arguments, comparison=comparison, registry=registry).unwrap()
    return _invoker.invoke(overload, bound, invoker)


__all__ = (
    "attempt",
    "resolve",
    "can_invoke",
    "invoke",
    "try_invoke",
    "invoke_overload",
)
