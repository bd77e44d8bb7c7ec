"""
Fields module behavioral tests (specs, descriptors, describe()).

Scope
- Validate public specs (Named, Ordered, Ignore): construction, normalization, metadata rules.
- Validate FieldDescriptor derivation: synthesized keys, kinds, elements, default descriptions.
- Validate describe(): declaration order, skipped attributes, Annotated specs.

Conventions
- Test method names follow CamelCase per project convention.
- Destination classes are declared at module level when shared by several tests.
"""
import unittest
from collections import deque
from typing import Annotated, ClassVar
from unittest import TestCase

from optbind import Char, Float32, Ignore, Int8, Int32, Named, Ordered, describe
from optbind.fields import FieldDescriptor


class Mixed:
    verbose: bool = Named(code="v", descr="Chatty output")
    name: str = Named("name", required=True)
    tags: list[str] = Named(code="t")
    source: str = Ordered(0)
    target: Annotated[str, Ordered(1)]
    cache: dict = Ignore()
    threads: int = 4
    limit: ClassVar[int] = 10
    _hidden: str = "secret"

    def run(self):
        pass


class Base:
    first: str


class Derived(Base):
    second: str


class TestNamed(TestCase):
    """Behavioral tests for Named specifications."""

    def testNamedDefaults(self):
        n = Named()
        self.assertIsNone(n.flag)
        self.assertIsNone(n.code)
        self.assertFalse(n.required)
        self.assertEqual(n.category, "")
        self.assertIsNone(n.descr)
        self.assertEqual(n.status, 1)
        self.assertFalse(n.helper)

    def testNamedFlagRejectsDashes(self):
        with self.assertRaises(ValueError):
            Named("--name")

    def testNamedFlagRejectsUnderscore(self):
        with self.assertRaises(ValueError):
            Named("first_name")

    def testNamedFlagMustBeString(self):
        with self.assertRaises(TypeError):
            Named(1)

    def testNamedFlagAllowsI18N(self):
        self.assertEqual(Named("größe").flag, "größe")

    def testNamedCodeMustBeSingleCharacter(self):
        with self.assertRaises(ValueError):
            Named(code="ab")
        with self.assertRaises(ValueError):
            Named(code="-")
        with self.assertRaises(ValueError):
            Named(code=" ")

    def testNamedDescrEmptyRejected(self):
        with self.assertRaises(ValueError):
            Named("name", descr="   ")

    def testNamedDescrStripped(self):
        self.assertEqual(Named("name", descr="  Your name ").descr, "Your name")

    def testNamedStatusMustBeInteger(self):
        with self.assertRaises(TypeError):
            Named("name", status=True)
        with self.assertRaises(TypeError):
            Named("name", status="2")

    def testNamedStatusCannotBeNegative(self):
        with self.assertRaises(ValueError):
            Named("name", status=-1)

    def testNamedConverterMustExposeReadAndWrite(self):
        with self.assertRaises(TypeError):
            Named("name", converter=str)

    def testNamedDefaultIsCopiedOnAccess(self):
        n = Named("items", default=[1, 2])
        self.assertEqual(n.default, [1, 2])
        self.assertIsNot(n.default, n.default)

    def testNamedRepr(self):
        self.assertTrue(repr(Named("name")).startswith("named(flag='name'"))


class TestOrdered(TestCase):
    """Behavioral tests for Ordered specifications."""

    def testOrderedKeepsOrder(self):
        self.assertEqual(Ordered(3).order, 3)

    def testOrderedOrderMustBeInteger(self):
        with self.assertRaises(TypeError):
            Ordered("1")
        with self.assertRaises(TypeError):
            Ordered(True)

    def testOrderedOrderCannotBeNegative(self):
        with self.assertRaises(ValueError):
            Ordered(-1)


class TestFieldDescriptor(TestCase):
    """Behavioral tests for FieldDescriptor derivation."""

    def testKeysSynthesizedFromCamelCase(self):
        d = FieldDescriptor("stringValue", str)
        self.assertEqual(d.flag, "string-value")
        self.assertEqual(d.code, "s")
        self.assertTrue(d.synthesized)

    def testKeysSynthesizedFromSnakeCase(self):
        d = FieldDescriptor("double_value", float)
        self.assertEqual(d.flag, "double-value")
        self.assertEqual(d.code, "d")

    def testExplicitKeysAreNotSynthesized(self):
        d = FieldDescriptor("name", str, Named(code="n"))
        self.assertIsNone(d.flag)
        self.assertEqual(d.code, "n")
        self.assertFalse(d.synthesized)

    def testOrderedHasNoKeys(self):
        d = FieldDescriptor("source", str, Ordered(2))
        self.assertTrue(d.ordered)
        self.assertEqual(d.order, 2)
        self.assertIsNone(d.flag)
        self.assertIsNone(d.code)
        self.assertEqual(d.label, "<source>")

    def testOptionalIsUnwrapped(self):
        d = FieldDescriptor("port", Int32 | None)
        self.assertIs(d.type, Int32)

    def testSequenceKindAndElement(self):
        d = FieldDescriptor("tags", list[int])
        self.assertTrue(d.sequence)
        self.assertIs(d.kind, list)
        self.assertIs(d.element, int)

    def testBareSequenceElementDefaultsToString(self):
        d = FieldDescriptor("names", deque)
        self.assertIs(d.kind, deque)
        self.assertIs(d.element, str)

    def testTupleEllipsisElement(self):
        d = FieldDescriptor("values", tuple[Int8, ...])
        self.assertIs(d.kind, tuple)
        self.assertIs(d.element, Int8)

    def testSpecElementOverridesAnnotation(self):
        d = FieldDescriptor("values", list[str], Named(code="x", element=Int8))
        self.assertIs(d.element, Int8)

    def testStringIsNotASequence(self):
        d = FieldDescriptor("name", str)
        self.assertFalse(d.sequence)
        self.assertIsNone(d.element)

    def testDefaultDescriptions(self):
        self.assertEqual(FieldDescriptor("flag", bool).descr, "Boolean flag which requires no argument")
        self.assertEqual(FieldDescriptor("name", str).descr, "Accepts a string value")
        self.assertEqual(FieldDescriptor("ratio", Float32).descr, "Accepts a floating point number")
        self.assertEqual(FieldDescriptor("grade", Char).descr, "Accepts a single character")
        self.assertEqual(FieldDescriptor("port", Int32).descr, "Accepts a number")
        self.assertEqual(FieldDescriptor("tags", list[str]).descr, "Accepts a value, may be repeated")

    def testExplicitDescriptionWins(self):
        d = FieldDescriptor("flag", bool, Named(code="f", descr="Turns it on"))
        self.assertEqual(d.descr, "Turns it on")

    def testHelpFlagIsHelper(self):
        self.assertTrue(FieldDescriptor("help", bool).helper)
        self.assertFalse(FieldDescriptor("verbose", bool).helper)

    def testHelperMustBeBoolean(self):
        with self.assertRaises(TypeError):
            FieldDescriptor("usage", str, Named("usage", helper=True))

    def testDescriptorIsReadOnly(self):
        d = FieldDescriptor("name", str)
        with self.assertRaises(AttributeError):
            d.flag = "other"

    def testSpecMustBeNamedOrOrdered(self):
        with self.assertRaises(TypeError):
            FieldDescriptor("name", str, Ignore())


class TestDescribe(TestCase):
    """Behavioral tests for describe()."""

    def testDeclarationOrderAndSkips(self):
        names = [d.name for d in describe(Mixed)]
        self.assertEqual(names, ["verbose", "name", "tags", "source", "target", "threads"])

    def testAnnotatedSpec(self):
        target = next(d for d in describe(Mixed) if d.name == "target")
        self.assertTrue(target.ordered)
        self.assertEqual(target.order, 1)
        self.assertIs(target.type, str)

    def testPlainAttributeIsSynthesized(self):
        threads = next(d for d in describe(Mixed) if d.name == "threads")
        self.assertIs(threads.type, int)
        self.assertEqual(threads.flag, "threads")
        self.assertIsNone(threads.default)

    def testUnannotatedSpecIsString(self):
        class Bare:
            name = Named("name")

        descriptor, = describe(Bare)
        self.assertIs(descriptor.type, str)

    def testBasesComeFirst(self):
        self.assertEqual([d.name for d in describe(Derived)], ["first", "second"])

    def testRequiresClass(self):
        with self.assertRaises(TypeError):
            describe(Mixed())


if __name__ == "__main__":
    unittest.main()
