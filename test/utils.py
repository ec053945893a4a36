"""
Utility helper tests (sentinel, coalesce, rename, mirror, ordinal, program).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import __main__
import unittest
from unittest import TestCase, mock

from cmdlineargs.utils import UnsetType, Unset, coalesce, rename, mirror, ordinal, program


class TestUnset(TestCase):
    """Sentinel semantics."""

    def testFalsey(self):
        self.assertFalse(Unset)

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testSealed(self):
        with self.assertRaises(TypeError):
            class Derived(UnsetType):  # NOQA: F-811
                pass

    def testUnionWithTypes(self):
        self.assertIsInstance("text", str | Unset)
        self.assertIsInstance(Unset, str | Unset)


class TestCoalesce(TestCase):
    """Unset replacement."""

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testKeepsFalseyValues(self):
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)

    def testDefaultIsNone(self):
        self.assertIsNone(coalesce(Unset))


class TestRenameAndMirror(TestCase):
    """Accessor helpers."""

    def testRenameInPlace(self):
        def function():
            pass

        rename(function, "renamed")
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecorator(self):
        @rename("decorated")
        def function():
            pass

        self.assertEqual(function.__name__, "decorated")

    def testRenameArity(self):
        with self.assertRaises(TypeError):
            rename()

    def testMirrorReturnsCopies(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ["a", ["b"]]

        holder = Holder()
        items = holder.items
        items[1].append("c")
        self.assertEqual(holder._items, ["a", ["b"]])

    def testMirrorIsReadOnly(self):
        class Holder:
            value = mirror("value")
            _value = 1

        with self.assertRaises(AttributeError):
            Holder().value = 2


class TestOrdinal(TestCase):
    """Token position words."""

    def testSpelledOut(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self):
        cases = {11: "11th", 12: "12th", 13: "13th", 21: "21st", 22: "22nd", 23: "23rd", 103: "103rd", 111: "111th"}
        for number, expected in cases.items():
            with self.subTest(number=number):
                self.assertEqual(ordinal(number), expected)

    def testRejectsBadInput(self):
        with self.assertRaises(TypeError):
            ordinal(True)
        with self.assertRaises(TypeError):
            ordinal("1")
        with self.assertRaises(ValueError):
            ordinal(-1)


class TestProgram(TestCase):
    """Program name resolution."""

    def testBaseNameOfArgv(self):
        with mock.patch("sys.argv", ["/usr/bin/tool", "x"]):
            self.assertEqual(program(), "tool")

    def testFallbackWithoutArgv(self):
        with mock.patch("sys.argv", []):
            self.assertEqual(program(), "program")

    def testHostOverride(self):
        with mock.patch.object(__main__, "__prog__", "hosted", create=True):
            self.assertEqual(program(), "hosted")


if __name__ == "__main__":
    unittest.main()
