"""
Fault taxonomy tests (codes, messages, rendering, shell boundary).

Scope
- Validate the exception hierarchy and the stable numeric codes.
- Validate lazily formatted, position-first messages.
- Validate rich rendering and the trigger() boundary.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import __main__
import io
import pickle
import unittest
from unittest import TestCase, mock

from rich.console import Console
from rich.panel import Panel

from cmdlineargs import faults
from cmdlineargs.faults import (
    FaultCode,
    Fault,
    RegistrationError,
    ParseError,
    ConversionFailedError,
    BadArgumentError,
    UnknownArgumentError,
    DanglingOptionError,
    BadValueError,
    MissingArgumentError,
    DuplicateLongNameError,
    PositionalOrderViolationError,
    trigger,
    getdoc,
)


def plain(renderable):
    buffer = io.StringIO()
    Console(file=buffer, width=100, color_system=None).print(renderable)
    return buffer.getvalue()


class TestFaultHierarchy(TestCase):
    """Bases and codes."""

    def testRegistrationErrorsAreValueErrors(self):
        self.assertTrue(issubclass(RegistrationError, ValueError))
        self.assertTrue(issubclass(DuplicateLongNameError, Fault))

    def testParseErrorsAreNotValueErrors(self):
        self.assertFalse(issubclass(ParseError, ValueError))
        self.assertTrue(issubclass(BadValueError, ParseError))

    def testConversionFailedIsValueError(self):
        self.assertTrue(issubclass(ConversionFailedError, ValueError))
        self.assertFalse(issubclass(ConversionFailedError, ParseError))

    def testCodesAreGroupedByDomain(self):
        for code in FaultCode:
            with self.subTest(code=code):
                self.assertIn(code.value // 10000, (1, 2))
        self.assertEqual(BadArgumentError.code, FaultCode.BAD_ARGUMENT)
        self.assertEqual(int(FaultCode.MISSING_ARGUMENT), 11141)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.BAD_VALUE.normalize(), "11124")

    def testNormalizeHonoursHostLabels(self):
        with mock.patch.object(__main__, "__codes__", {FaultCode.BAD_VALUE: "E-VALUE"}, create=True):
            self.assertEqual(FaultCode.BAD_VALUE.normalize(), "E-VALUE")


class TestFaultMessages(TestCase):
    """Context fields and message formatting."""

    def testPositionIsSpelledOut(self):
        fault = BadArgumentError(token="-abc", position=3)
        self.assertEqual(str(fault), "bad argument '-abc' at third position")

    def testLargePositionUsesSuffix(self):
        fault = UnknownArgumentError(token="-x", position=22)
        self.assertEqual(str(fault), "unknown argument '-x' at 22nd position")

    def testMissingPositionIsOmitted(self):
        self.assertEqual(str(BadArgumentError(token="-abc")), "bad argument '-abc'")

    def testValidValuesAppended(self):
        fault = BadValueError(token="mid", parameter="--level", choices=("high", "low"), position=2)
        self.assertEqual(str(fault), "bad value 'mid' for --level at second position. valid values: high, low")

    def testContextReadableAsAttributes(self):
        fault = MissingArgumentError(parameter="--id", name="id")
        self.assertEqual(fault.name, "id")
        self.assertIsNone(fault.token)
        self.assertEqual(str(fault), "missing argument --id")

    def testUndeclaredAttributeRaises(self):
        fault = BadArgumentError(token="-abc")
        with self.assertRaises(AttributeError):
            fault.tokn
        self.assertFalse(hasattr(fault, "reason"))

    def testRegistrationFieldsReadAsNone(self):
        fault = DuplicateLongNameError(name="name")
        self.assertIsNone(fault.existing)
        self.assertIsNone(fault.attribute)

    def testContextIsReadOnly(self):
        fault = MissingArgumentError(name="id")
        with self.assertRaises(TypeError):
            fault.context["name"] = "other"

    def testRegistrationMessage(self):
        fault = PositionalOrderViolationError(reason="optional", previous="#1 <source>", parameter="#2 <target>")
        self.assertEqual(
            str(fault),
            "optional positional parameter #1 <source> followed by another positional parameter #2 <target>"
        )

    def testPickleKeepsContext(self):
        fault = BadArgumentError(token="-abc", position=1)
        clone = pickle.loads(pickle.dumps(fault))
        self.assertIsInstance(clone, BadArgumentError)
        self.assertEqual(dict(clone.context), dict(fault.context))
        self.assertEqual(str(clone), str(fault))

    def testRepr(self):
        self.assertEqual(repr(BadArgumentError(token="-a")), "BadArgumentError(token='-a')")


class TestFaultRendering(TestCase):
    """Rich rendering and the shell boundary."""

    def testPlainRender(self):
        output = plain(DanglingOptionError(token="-n", parameter="-n/--name", position=2).render(
            prog="tool",
            colorful=False,
        ))
        self.assertIn("[ tool - 11117 | Missing Option Value ]", output)
        self.assertIn("option -n/--name at second position expects a value but the input ended", output)
        self.assertIn("add a value after -n (for example: -n <value>)", output)

    def testFancyRenderIsPanel(self):
        self.assertIsInstance(BadArgumentError(token="-abc").render(fancy=True), Panel)

    def testHostDocsAreAppended(self):
        docs = {FaultCode.BAD_ARGUMENT: "see the manual"}
        with mock.patch.object(__main__, "__docs__", docs, create=True):
            self.assertEqual(getdoc(FaultCode.BAD_ARGUMENT), "see the manual")
            self.assertIn("see the manual", plain(BadArgumentError(token="-abc").render(colorful=False)))

    def testGetdocMissReturnsNone(self):
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_ARGUMENT))

    def testGetdocRejectsPlainIntegers(self):
        with self.assertRaises(TypeError):
            getdoc(11111)

    def testTriggerRaisesOutsideShell(self):
        fault = BadArgumentError(token="-abc")
        with self.assertRaises(BadArgumentError) as context:
            trigger(fault)
        self.assertIs(context.exception, fault)

    def testTriggerExitsInShell(self):
        buffer = io.StringIO()
        with mock.patch.object(faults, "console", Console(file=buffer, width=100, color_system=None)):
            with self.assertRaises(SystemExit) as context:
                trigger(BadArgumentError(token="-abc"), shell=True, prog="tool", usage="Usage: tool <file>\n")
        self.assertEqual(context.exception.code, 1)
        self.assertIn("bad argument '-abc'", buffer.getvalue())
        self.assertIn("Usage: tool <file>", buffer.getvalue())

    def testTriggerRejectsOtherExceptions(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))


if __name__ == "__main__":
    unittest.main()
