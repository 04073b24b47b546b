"""
Resolver tests (overload selection, fault kinds, invocation shapes).

Scope
- Validate first-declared-wins selection across overloads sharing a name.
- Validate OverrideNotFoundError vs EntryPointNotFoundError.
- Validate the boolean/tuple API shapes and direct overload invocation.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from bindery import Argument, Comparison, overload
from bindery import resolver
from bindery.faults import (
    EntryPointNotFoundError,
    OverrideNotFoundError,
    ParameterConvertError,
    ParameterFormatError,
)


def move(x: int, y: int, label: str = "pt"):
    return "xy", x, y, label


def move_to(label: str):
    return "label", label


def log(level: int, *messages: str):
    return level, messages


OVERLOADS = (overload(move), overload(move_to, name="move"), overload(log))


def arguments(*contents, **named):
    return [Argument(content) for content in contents] + [Argument(value, name=key) for key, value in named.items()]


class TestResolve(TestCase):
    """Selection across candidates."""

    def testPositionalOverload(self):
        self.assertEqual(resolver.invoke(OVERLOADS, "move", arguments("10", "20")), ("xy", 10, 20, "pt"))

    def testSecondOverloadWhenFirstFails(self):
        self.assertEqual(resolver.invoke(OVERLOADS, "move", arguments("home")), ("label", "home"))

    def testFirstDeclaredWins(self):
        def first(value: str):
            return "first"

        def second(value: str):
            return "second"

        overloads = (overload(first, name="pick"), overload(second, name="pick"))
        self.assertEqual(resolver.invoke(overloads, "pick", arguments("x")), "first")

    def testResolveOutcome(self):
        outcome = resolver.resolve(OVERLOADS, "move", arguments("1", "2"))
        self.assertTrue(outcome.ok)
        entry, bound = outcome.value
        self.assertIs(entry, OVERLOADS[0])
        self.assertEqual([argument.value for argument in bound], [1, 2, "pt"])

    def testVariadicOverload(self):
        self.assertEqual(resolver.invoke(OVERLOADS, "log", arguments("3", "a", "b")), (3, ("a", "b")))
        self.assertEqual(resolver.invoke(OVERLOADS, "log", arguments("3")), (3, ()))

    def testOverrideNotFound(self):
        with self.assertRaises(OverrideNotFoundError) as context:
            resolver.invoke(OVERLOADS, "move", arguments("1", "2", "3", "4"))
        self.assertEqual(context.exception.name, "move")
        self.assertEqual(len(context.exception.attempts), 2)

    def testConversionFailureIsReportedPerAttempt(self):
        with self.assertRaises(OverrideNotFoundError) as context:
            resolver.invoke(OVERLOADS, "log", arguments("loud", "a"))
        attempt, = context.exception.attempts
        self.assertIsInstance(attempt, ParameterConvertError)

    def testEntryPointNotFound(self):
        with self.assertRaises(EntryPointNotFoundError) as context:
            resolver.invoke(OVERLOADS, "jump", arguments("1"))
        self.assertEqual(context.exception.name, "jump")

    def testNamesFollowComparison(self):
        with self.assertRaises(EntryPointNotFoundError):
            resolver.invoke(OVERLOADS, "MOVE", arguments("home"))
        result = resolver.invoke(OVERLOADS, "MOVE", arguments("home"), comparison=Comparison.IGNORE_CASE)
        self.assertEqual(result, ("label", "home"))


class TestInvocationShapes(TestCase):
    """Boolean and tuple variants, direct invocation."""

    def testCanInvoke(self):
        self.assertTrue(resolver.can_invoke(OVERLOADS, "move", arguments("1", "2")))
        self.assertFalse(resolver.can_invoke(OVERLOADS, "move", arguments("1", "x")))
        self.assertFalse(resolver.can_invoke(OVERLOADS, "jump", ()))

    def testCanInvokeDoesNotCall(self):
        calls = []
        overloads = (overload(lambda: calls.append(1), name="touch"),)
        self.assertTrue(resolver.can_invoke(overloads, "touch", ()))
        self.assertEqual(calls, [])

    def testTryInvoke(self):
        self.assertEqual(resolver.try_invoke(OVERLOADS, "move", arguments("1", "2")), (True, ("xy", 1, 2, "pt")))
        self.assertEqual(resolver.try_invoke(OVERLOADS, "jump", ()), (False, None))

    def testCallableExceptionsPropagate(self):
        def fail():
            raise LookupError("boom")

        overloads = (overload(fail),)
        with self.assertRaises(LookupError):
            resolver.invoke(overloads, "fail", ())
        with self.assertRaises(LookupError):
            resolver.try_invoke(overloads, "fail", ())

    def testCustomInvoker(self):
        seen = []

        def invoker(callback, values):
            seen.append(values)
            return "handled"

        result = resolver.invoke(OVERLOADS, "move", arguments("1", "2"), invoker=invoker)
        self.assertEqual(result, "handled")
        self.assertEqual(seen, [(1, 2, "pt")])

    def testInvokeOverloadRaisesItsOwnFault(self):
        with self.assertRaises(ParameterFormatError):
            resolver.invoke_overload(overload(lambda x, y: None, name="pair"), arguments("1", "2", "3"))

    def testInvokeOverload(self):
        self.assertEqual(resolver.invoke_overload(OVERLOADS[1], arguments("home")), ("label", "home"))


if __name__ == "__main__":
    unittest.main()
