"""
Fault tests (codes, details, rendering, outcomes, trigger).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from rich.console import Console

from bindery import Argument
from bindery.faults import (
    ArgumentAssignError,
    BinderyException,
    EntryPointNotFoundError,
    FaultCode,
    Failure,
    ParameterFormatError,
    Success,
    trigger,
)


class TestFaults(TestCase):
    """Fault metadata and rendering."""

    def testCodeIsInjected(self):
        fault = ParameterFormatError("missing required parameter 'y'", parameter="y")
        self.assertIs(fault.options["code"], FaultCode.PARAMETER_FORMAT)
        self.assertEqual(FaultCode.PARAMETER_FORMAT.normalize(), "14102")
        self.assertEqual(str(fault), "missing required parameter 'y'")

    def testDetails(self):
        argument = Argument("1", name="z")
        fault = ArgumentAssignError("unknown", index=1, argument=argument)
        self.assertEqual(fault.index, 1)
        self.assertIs(fault.argument, argument)
        with self.assertRaises(AttributeError):
            ParameterFormatError("too many").parameter

    def testOptionsAreReadOnly(self):
        fault = EntryPointNotFoundError("unknown command 'jump'", name="jump")
        with self.assertRaises(TypeError):
            fault.options["name"] = "move"

    def testReplaceKeepsCause(self):
        cause = ValueError("bad")
        fault = ParameterFormatError("bad")
        fault.__cause__ = cause
        replaced = fault.__replace__(shell=False)
        self.assertIsNot(replaced, fault)
        self.assertIs(replaced.__cause__, cause)
        self.assertIs(replaced.options["shell"], False)

    def testRendering(self):
        console = Console(record=True, width=100, color_system=None)
        fault = EntryPointNotFoundError("unknown command 'jump'", title="unknown command", hint="check the name")
        console.print(fault)
        console.print(fault.__replace__(fancy=True, colorful=False))
        output = console.export_text()
        self.assertIn("15102", output)
        self.assertIn("Unknown Command", output)
        self.assertIn("unknown command 'jump'", output)
        self.assertIn("check the name", output)

    def testTriggerRaisesOutsideShell(self):
        with self.assertRaises(EntryPointNotFoundError):
            trigger(EntryPointNotFoundError("unknown command 'jump'"), shell=False)

    def testTriggerRequiresFault(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("bad"))


class TestOutcomes(TestCase):
    """Tagged outcomes."""

    def testSuccess(self):
        outcome = Success(3)
        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.unwrap(), 3)

    def testFailure(self):
        fault = ParameterFormatError("too many")
        outcome = Failure(fault, [None])
        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.value, [None])
        with self.assertRaises(ParameterFormatError):
            outcome.unwrap()

    def testFailureRequiresFault(self):
        with self.assertRaises(TypeError):
            Failure(ValueError("bad"))

    def testPatternMatching(self):
        match Failure(BinderyException("x")):
            case Success(value):
                self.fail(value)
            case Failure(fault):
                self.assertEqual(str(fault), "x")


if __name__ == "__main__":
    unittest.main()
