"""
Tests for the internal utilities.

This module verifies:
- Unset sentinel semantics (singleton, falsy, repr, sealed, union support).
- coalesce() preserving legitimate falsey values.
- rename() in both function and decorator forms.
- mirror() read-only properties handing out copies.
- ordinal() word and suffix forms.
"""
import unittest
from unittest import TestCase

from optspec.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.
    """

    def testSingleton(self) -> None:
        self.assertIs(Unset, UnsetType())

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testUnionWithTypes(self) -> None:
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertNotIsInstance(3, str | Unset)


class CoalesceTest(TestCase):
    def testUnsetIsReplaced(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalseyValuesArePreserved(self) -> None:
        for value in (None, 0, "", False):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):
    def testFunctionForm(self) -> None:
        def f():
            pass
        self.assertIs(rename(f, "work"), f)
        self.assertEqual(f.__name__, "work")
        self.assertEqual(f.__qualname__, "work")

    def testDecoratorForm(self) -> None:
        @rename("work")
        def f():
            pass
        self.assertEqual(f.__name__, "work")

    def testRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "work")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()


class MirrorTest(TestCase):
    def setUp(self) -> None:
        class Holder:
            items = mirror("items")
            name = mirror("name")

            def __init__(self):
                self._items = ["a", "b"]
                self._name = "holder"

        self.holder = Holder()

    def testReadsBackingField(self) -> None:
        self.assertEqual(self.holder.name, "holder")

    def testContainersAreCopies(self) -> None:
        items = self.holder.items
        self.assertEqual(items, ("a", "b"))
        self.assertIsNot(items, self.holder._items)

    def testReadOnly(self) -> None:
        with self.assertRaises(AttributeError):
            self.holder.name = "other"

    def testRejectsNonStrings(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)


class OrdinalTest(TestCase):
    def testWords(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self) -> None:
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(111), "111th")
        self.assertEqual(ordinal(104), "104th")

    def testRejectsNonPositive(self) -> None:
        with self.assertRaises(ValueError):
            ordinal(0)
        with self.assertRaises(TypeError):
            ordinal("1")


if __name__ == "__main__":
    unittest.main()
