"""
Bindery invoker: hand a bound, converted argument set to the invocation capability.

- extract(bound): plain ordered vector of the slots' values.
- call(callback, values): default capability, callback(*values).
- invoke(overload, bound, invoker=call): extract then delegate.

Exceptions raised by the callable are never intercepted.
"""


def extract(bound, /):
    return tuple(argument.value for argument in bound)


def call(callback, values, /):
    return callback(*values)


def invoke(overload, bound, /, invoker=call):
    """
    run overload.callback with the values of a bound set through `invoker`.

    invoker is any callable invoker(callback, values) -> result; its result is
    returned unchanged and its exceptions propagate unchanged.
    """
    return invoker(overload.callback, extract(bound))


__all__ = (
    "extract",
    "call",
    "invoke",
)
