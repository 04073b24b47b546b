"""
Argument model tests (arguments, parameters, overloads, the overload builder).

Scope
- Validate the argument lifecycle (raw content vs settled value).
- Validate comparison modes for names.
- Validate parameter/overload construction invariants.
- Validate how Python signatures are mapped to overloads.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from collections.abc import Sequence
from unittest import TestCase

from bindery import Argument, Comparison, Parameter, Overload, overload
from bindery.utils import Unset


class TestArgument(TestCase):
    """Lifecycle of raw and settled arguments."""

    def testContentResetsValue(self):
        argument = Argument("10")
        argument.value = 10
        self.assertFalse(argument.raw)
        argument.content = "20"
        self.assertTrue(argument.raw)
        self.assertEqual(argument.value, "20")

    def testSequenceContentIsStoredAsTuple(self):
        argument = Argument(["a", "b"], name="messages")
        self.assertEqual(argument.content, ("a", "b"))
        self.assertEqual(argument.value, ("a", "b"))

    def testContentMustBeText(self):
        with self.assertRaises(TypeError):
            Argument(10)
        with self.assertRaises(TypeError):
            Argument(["a", 1])

    def testSettledArgumentIsNotRaw(self):
        argument = Argument.settled(None, name="label")
        self.assertIsNone(argument.content)
        self.assertIsNone(argument.value)
        self.assertFalse(argument.raw)
        self.assertEqual(argument.name, "label")

    def testBlankNameCountsAsPositional(self):
        self.assertFalse(Argument("x").named)
        self.assertFalse(Argument("x", name="  ").named)
        self.assertTrue(Argument("x", name="y").named)

    def testRepresentation(self):
        self.assertEqual(repr(Argument("1", name="x")), "argument(name='x', content='1', value='1')")


class TestComparison(TestCase):
    """Case-sensitivity modes."""

    def testOrdinalIsCaseSensitive(self):
        self.assertTrue(Comparison.ORDINAL.equals("move", "move"))
        self.assertFalse(Comparison.ORDINAL.equals("move", "Move"))
        self.assertFalse(Comparison.ORDINAL.ignorecase)

    def testIgnoreCase(self):
        self.assertTrue(Comparison.IGNORE_CASE.equals("move", "MOVE"))
        self.assertTrue(Comparison.IGNORE_CASE.ignorecase)

    def testNoneNeverMatches(self):
        self.assertFalse(Comparison.ORDINAL.equals(None, None))
        self.assertFalse(Comparison.IGNORE_CASE.equals("x", None))


class TestParameterAndOverload(TestCase):
    """Construction invariants."""

    def testParameterDefaults(self):
        parameter = Parameter("x")
        self.assertIs(parameter.type, str)
        self.assertIs(parameter.default, Unset)
        self.assertFalse(parameter.optional)
        self.assertTrue(Parameter("x", int, None).optional)

    def testParameterNameMustBeIdentifier(self):
        with self.assertRaises(ValueError):
            Parameter("not valid")
        with self.assertRaises(TypeError):
            Parameter(1)

    def testVariadicParameterCannotHaveDefault(self):
        with self.assertRaises(TypeError):
            Parameter("rest", tuple[str, ...], (), variadic=True)

    def testVariadicParameterMustBeSequence(self):
        with self.assertRaises(TypeError):
            Parameter("rest", str, variadic=True)
        with self.assertRaises(TypeError):
            Parameter("rest", int, variadic=True)
        for declared in (tuple[int, ...], list[str], list, tuple, Sequence[float]):
            self.assertTrue(Parameter("rest", declared, variadic=True).variadic)

    def testOnlyLastParameterMayBeVariadic(self):
        with self.assertRaises(ValueError):
            Overload("f", [Parameter("rest", tuple[str, ...], variadic=True), Parameter("x")], print)

    def testParameterNamesMustBeUnique(self):
        with self.assertRaises(ValueError):
            Overload("f", [Parameter("x"), Parameter("x")], print)

    def testConvertersArePadded(self):
        entry = Overload("f", [Parameter("x"), Parameter("y")], print)
        self.assertEqual(entry.converters, (None, None))
        with self.assertRaises(ValueError):
            Overload("f", [Parameter("x")], print, [None, None])

    def testEmptyNameRejected(self):
        with self.assertRaises(ValueError):
            Overload("  ", [], print)


class TestOverloadBuilder(TestCase):
    """Mapping Python callables to overloads."""

    def testSignatureMapping(self):
        def move(x: int, y: int, label="pt"):
            pass

        entry = overload(move)
        self.assertEqual(entry.name, "move")
        self.assertEqual([parameter.name for parameter in entry.parameters], ["x", "y", "label"])
        self.assertEqual([parameter.type for parameter in entry.parameters], [int, int, str])
        self.assertEqual(entry.parameters[2].default, "pt")
        self.assertFalse(entry.variadic)
        self.assertIs(entry.callback, move)

    def testExplicitName(self):
        self.assertEqual(overload(lambda: None, name="noop").name, "noop")

    def testVariadicParameter(self):
        def log(level: int, *messages: str):
            return level, messages

        entry = overload(log)
        self.assertTrue(entry.variadic)
        self.assertEqual(entry.parameters[-1].type, tuple[str, ...])
        self.assertEqual(entry.callback(1, ("a", "b")), (1, ("a", "b")))

    def testKeywordOnlyParameter(self):
        def paint(color, *, outline: bool = False):
            return color, outline

        entry = overload(paint)
        self.assertEqual(entry.parameters[1].default, False)
        self.assertEqual(entry.callback("red", True), ("red", True))

    def testVariadicKeywordRejected(self):
        def tool(**options):
            pass

        with self.assertRaises(TypeError):
            overload(tool)

    def testNonCallableRejected(self):
        with self.assertRaises(TypeError):
            overload("move")


if __name__ == "__main__":
    unittest.main()
