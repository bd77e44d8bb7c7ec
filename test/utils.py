"""
Utilities behavioral tests (Unset, coalesce, rename, mirror, hyphenate).

Scope
- Validate the Unset sentinel semantics.
- Validate helper functions used across fields, table and faults.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from optbind.utils import Unset, UnsetType, coalesce, hyphenate, mirror, rename


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestHelpers(TestCase):
    """Behavioral tests for rename(), mirror() and hyphenate()."""

    def testRename(self):
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")
        with self.assertRaises(TypeError):
            rename(1, "name")

    def testMirrorCopiesContainers(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = [[1], 2]

        holder = Holder()
        self.assertEqual(holder.items, [[1], 2])
        holder.items[0].append(3)
        self.assertEqual(holder._items, [[1], 2])

    def testHyphenate(self):
        self.assertEqual(hyphenate("stringValue"), "string-value")
        self.assertEqual(hyphenate("string_value"), "string-value")
        self.assertEqual(hyphenate("_private__name_"), "private-name")
        self.assertEqual(hyphenate("NamedConfig"), "named-config")
        self.assertEqual(hyphenate("x"), "x")


if __name__ == "__main__":
    unittest.main()
