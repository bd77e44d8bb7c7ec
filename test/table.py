"""
Option table behavioral tests (key registration, duplicates, shadowing, lookup).

Scope
- Validate that explicit keys claimed twice raise DuplicateOptionError before parsing.
- Validate first-wins registration of synthesized keys and ShadowedOptionWarning.
- Validate positional ordering and token-name resolution.

Conventions
- Test method names follow CamelCase per project convention.
- Warnings are asserted with assertWarns (non-shell mode routes them through warnings).
"""
import unittest
import warnings
from unittest import TestCase

from optbind import DuplicateOptionError, Named, Ordered, ShadowedOptionWarning, bind, describe
from optbind.table import OptionTable


class DuplicateFlags:
    first: str = Named("name")
    second: str = Named("name")


class DuplicateCodes:
    first: str = Named("first", "x")
    second: str = Named("second", "x")


class Synthesized:
    string_value: str
    something_else: str


class ExplicitOverSynthesized:
    stats: str
    size: str = Named(code="s")


class Positionals:
    one: str = Ordered(1)
    two: list[str] = Ordered(2)
    zero: str = Ordered(0)
    three: tuple[str, ...] = Ordered(3)


class Mixed:
    long: str = Named("s")
    short: str = Named(code="s")
    name: str = Named("name", required=True)
    source: str = Ordered(0, required=True)


def build(cls):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        return OptionTable(describe(cls))


class TestDuplicates(TestCase):
    """Behavioral tests for duplicate explicit keys."""

    def testDuplicateFlagRaises(self):
        with self.assertRaises(DuplicateOptionError) as context:
            OptionTable(describe(DuplicateFlags))
        self.assertEqual(context.exception.field.name, "second")
        self.assertEqual(context.exception.options["owner"].name, "first")
        self.assertEqual(context.exception.options["key"], "name")

    def testDuplicateCodeRaises(self):
        with self.assertRaises(DuplicateOptionError):
            OptionTable(describe(DuplicateCodes))

    def testDuplicateRaisedByBind(self):
        with self.assertRaises(DuplicateOptionError):
            bind(DuplicateFlags, ["--name", "value"])


class TestSynthesizedKeys(TestCase):
    """Behavioral tests for keys synthesized from identifiers."""

    def testFirstRegisteredWins(self):
        with self.assertWarns(ShadowedOptionWarning):
            table = OptionTable(describe(Synthesized))
        self.assertEqual(table.resolve("s", long=False).name, "string_value")
        self.assertEqual(table.resolve("something-else").name, "something_else")
        self.assertEqual(table.resolve("string-value").name, "string_value")

    def testSkippedKeyIsNone(self):
        table = build(Synthesized)
        something = next(d for d in table.named if d.name == "something_else")
        self.assertEqual(table.keys(something), ("something-else", None))
        self.assertEqual(table.label(something), "--something-else")

    def testExplicitKeysRegisteredFirst(self):
        with self.assertWarns(ShadowedOptionWarning):
            table = OptionTable(describe(ExplicitOverSynthesized))
        self.assertEqual(table.resolve("s", long=False).name, "size")
        self.assertEqual(table.resolve("stats").name, "stats")


class TestLookup(TestCase):
    """Behavioral tests for ordering and resolution."""

    def testOrderedSortedByOrder(self):
        table = build(Positionals)
        self.assertEqual([d.name for d in table.ordered], ["zero", "one", "two", "three"])
        self.assertEqual(table.named, ())

    def testResolveUnknown(self):
        table = build(Mixed)
        self.assertIsNone(table.resolve("missing"))
        self.assertIsNone(table.resolve("Z", long=False))

    def testResolvePrefersIndexBySpelling(self):
        table = build(Mixed)
        self.assertEqual(table.resolve("s", long=True).name, "long")
        self.assertEqual(table.resolve("s", long=False).name, "short")

    def testResolveFallsBackToOtherIndex(self):
        table = build(Mixed)
        self.assertEqual(table.resolve("name", long=False).name, "name")

    def testRequiredView(self):
        table = build(Mixed)
        self.assertEqual([d.name for d in table.required], ["name", "source"])
        self.assertEqual(table.label(table.ordered[0]), "<source>")

    def testIndexesAreReadOnly(self):
        table = build(Mixed)
        with self.assertRaises(TypeError):
            table.flags["other"] = None


if __name__ == "__main__":
    unittest.main()
