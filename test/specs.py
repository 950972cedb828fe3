"""
Specs module behavioral tests (option specs and option sets).

Scope
- Validate OptionSpec construction, normalization, defaults and immutability.
- Validate the flag()/option() factories.
- Validate OptionSet uniqueness rules and the three lookups the parser relies on.

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None for any parameter; omit instead.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from rich.text import Text

from optspec import OptionKind, OptionSpec, OptionSet, flag, option


class TestOptionSpec(TestCase):
    """Behavioral tests for OptionSpec."""

    def testFlagDefaults(self):
        spec = flag("verbose")
        self.assertEqual(spec.name, "verbose")
        self.assertIs(spec.kind, OptionKind.FLAG)
        self.assertIsNone(spec.short)
        self.assertIsNone(spec.descr)
        self.assertIs(spec.default, False)

    def testValueDefaults(self):
        spec = option("output", "o", "write to FILE")
        self.assertIs(spec.kind, OptionKind.VALUE)
        self.assertEqual(spec.short, "o")
        self.assertEqual(spec.descr, "write to FILE")
        self.assertIsNone(spec.default)

    def testKindDefaultsToFlag(self):
        self.assertIs(OptionSpec("quiet").kind, OptionKind.FLAG)

    def testNameIsTrimmed(self):
        self.assertEqual(flag("  dry-run ").name, "dry-run")

    def testNamesAllowI18N(self):
        self.assertEqual(flag("名-前").name, "名-前")

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            OptionSpec(3)

    def testNameCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            flag("   ")

    def testNameRejectsDashes(self):
        with self.assertRaises(ValueError):
            flag("--verbose")

    def testNameRejectsUnderscoreAndEquals(self):
        with self.assertRaises(ValueError):
            flag("dry_run")
        with self.assertRaises(ValueError):
            option("out=put")

    def testKindMustBeOptionKind(self):
        with self.assertRaises(TypeError):
            OptionSpec("verbose", "flag")

    def testShortMustBeSingleCharacter(self):
        with self.assertRaises(ValueError):
            flag("verbose", "vv")
        with self.assertRaises(ValueError):
            flag("verbose", "")

    def testShortRejectsReservedCharacters(self):
        for char in ("-", "=", " ", "\n"):
            with self.subTest(char=char), self.assertRaises(ValueError):
                flag("verbose", char)

    def testShortMustBeString(self):
        with self.assertRaises(TypeError):
            flag("verbose", 1)

    def testDescrIsTrimmed(self):
        self.assertEqual(flag("verbose", descr="  talk more  ").descr, "talk more")

    def testDescrAcceptsRichText(self):
        descr = Text("talk more", style="bold")
        self.assertIs(flag("verbose", descr=descr).descr, descr)

    def testDescrEmptyRejected(self):
        with self.assertRaises(ValueError):
            flag("verbose", descr="  ")

    def testDescrExplicitNoneRejected(self):
        with self.assertRaises(TypeError):
            flag("verbose", descr=None)

    def testSpecIsReadOnly(self):
        spec = flag("verbose", "v")
        with self.assertRaises(AttributeError):
            spec.name = "quiet"
        with self.assertRaises(AttributeError):
            spec.extra = True
        self.assertEqual(spec.name, "verbose")

    def testEqualityByFields(self):
        self.assertEqual(flag("verbose", "v"), flag("verbose", "v"))
        self.assertNotEqual(flag("verbose", "v"), option("verbose", "v"))
        self.assertEqual(hash(flag("verbose", "v")), hash(flag("verbose", "v")))

    def testRepresentation(self):
        text = repr(option("output", "o"))
        self.assertTrue(text.startswith("option-spec("))
        self.assertIn("name='output'", text)
        self.assertIn("short='o'", text)


class TestOptionSet(TestCase):
    """Behavioral tests for OptionSet."""

    def setUp(self):
        self.specs = OptionSet(
            flag("verbose", "v"),
            flag("verbosity"),
            option("output", "o"),
        )

    def testSequenceProtocol(self):
        self.assertEqual(len(self.specs), 3)
        self.assertEqual(self.specs[2].name, "output")
        self.assertEqual([spec.name for spec in self.specs], ["verbose", "verbosity", "output"])

    def testSliceIsAnOptionSet(self):
        head = self.specs[:1]
        self.assertIsInstance(head, OptionSet)
        self.assertEqual(head.names, ("verbose",))

    def testContainsByNameOrSpec(self):
        self.assertIn("output", self.specs)
        self.assertIn(flag("verbose", "v"), self.specs)
        self.assertNotIn("out", self.specs)

    def testNamesKeepDeclarationOrder(self):
        self.assertEqual(self.specs.names, ("verbose", "verbosity", "output"))

    def testExactLookup(self):
        self.assertEqual(self.specs.get("output").name, "output")
        self.assertIsNone(self.specs.get("out"))

    def testShortLookup(self):
        self.assertEqual(self.specs.shorthand("v").name, "verbose")
        self.assertIsNone(self.specs.shorthand("x"))

    def testExpandReturnsProperPrefixMatches(self):
        self.assertEqual([spec.name for spec in self.specs.expand("verb")], ["verbose", "verbosity"])
        self.assertEqual([spec.name for spec in self.specs.expand("verbose")], [])
        self.assertEqual(self.specs.expand("x"), ())

    def testDefaults(self):
        self.assertEqual(self.specs.defaults(), {"verbose": False, "verbosity": False, "output": None})

    def testDuplicateNamesRejected(self):
        with self.assertRaises(ValueError):
            OptionSet(flag("verbose"), option("verbose"))

    def testDuplicateShortFormsRejected(self):
        with self.assertRaises(ValueError):
            OptionSet(flag("verbose", "v"), flag("version", "v"))

    def testItemsMustBeSpecs(self):
        with self.assertRaises(TypeError):
            OptionSet("verbose")

    def testCoerce(self):
        self.assertIs(OptionSet.coerce(self.specs), self.specs)
        self.assertEqual(OptionSet.coerce([flag("verbose")]).names, ("verbose",))
        with self.assertRaises(TypeError):
            OptionSet.coerce(flag("verbose"))

    def testEmptySet(self):
        self.assertEqual(len(OptionSet()), 0)
        self.assertEqual(OptionSet().defaults(), {})


if __name__ == "__main__":
    unittest.main()
