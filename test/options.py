# python
"""
Options module behavioral tests (descriptor construction and resolution).

Scope
- Validate NamedOption and PositionalOption metadata sanitization.
- Validate choice membership helpers and read-only properties.
- Validate resolve() across descriptors, __option__ providers and mappings.

Conventions
- Test method names follow CamelCase per project convention.
- Schema-level invariants (unique names/positions) live in the parsing tests.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argscheme import Option, NamedOption, PositionalOption, resolve
from argscheme.utils import Unset


class TestNamedOption(TestCase):
    """Behavioral tests for NamedOption descriptors."""

    def testNamesKeepDeclarationOrder(self):
        o = NamedOption("-m", "--mode")
        self.assertEqual(o.names, ("-m", "--mode"))

    def testDefaults(self):
        o = NamedOption("--mode")
        self.assertIs(o.type, str)
        self.assertIsNone(o.choices)
        self.assertFalse(o.required)
        self.assertIs(o.default, Unset)
        self.assertFalse(o.flag)
        self.assertFalse(o.multiple)

    def testNoNamesAcceptedUntilSchemaValidation(self):
        o = NamedOption(type=int)
        self.assertEqual(o.names, ())

    def testNonStringNameRejected(self):
        with self.assertRaises(TypeError):
            NamedOption("--ok", 3)

    def testBlankNameRejected(self):
        with self.assertRaises(ValueError):
            NamedOption("  ")

    def testFlagAndMultipleRejected(self):
        with self.assertRaises(TypeError):
            NamedOption("--both", flag=True, multiple=True)

    def testNonBooleanFlagRejected(self):
        with self.assertRaises(TypeError):
            NamedOption("--verbose", flag="yes")

    def testDescribeListsNames(self):
        self.assertEqual(NamedOption("-n", "--name").__describe__(), "names are [-n, --name]")

    def testReprStartsWithTypename(self):
        self.assertTrue(repr(NamedOption("-m", "--mode")).startswith("named-option(names=('-m', '--mode')"))

    def testPropertiesAreReadOnly(self):
        o = NamedOption("--mode")
        with self.assertRaises(AttributeError):
            o.names = ("--other",)

    def testDefaultIsHandedOutAsCopy(self):
        o = NamedOption("--tags", multiple=True, default=["a"])
        first = o.default
        first.append("b")
        self.assertEqual(o.default, ["a"])


class TestPositionalOption(TestCase):
    """Behavioral tests for PositionalOption descriptors."""

    def testPosition(self):
        self.assertEqual(PositionalOption(2).position, 2)

    def testPositionStoredAsGiven(self):
        # validity is a schema invariant, checked by ArgumentsParser
        self.assertEqual(PositionalOption(-1).position, -1)

    def testTypeMustBeCallable(self):
        with self.assertRaises(TypeError):
            PositionalOption(0, type="int")

    def testRequiredMustBeBoolean(self):
        with self.assertRaises(TypeError):
            PositionalOption(0, required=1)

    def testDescribeShowsPosition(self):
        self.assertEqual(PositionalOption(1).__describe__(), "position is 1")

    def testNoneDefaultIsKept(self):
        self.assertIsNone(PositionalOption(0, default=None).default)


class TestChoices(TestCase):
    """Behavioral tests for choices normalization and membership."""

    def testDuplicatesRejectedForGenericIterable(self):
        with self.assertRaises(ValueError):
            NamedOption("--mode", choices=["fast", "safe", "fast"])

    def testEqualValuesOfDifferentTypesAreDistinct(self):
        self.assertEqual(NamedOption("--level", choices=[1, True, 1.0]).choices, (1, True, 1.0))

    def testStringChoicesRejected(self):
        with self.assertRaises(TypeError):
            NamedOption("--mode", choices="abc")

    def testNonIterableChoicesRejected(self):
        with self.assertRaises(TypeError):
            NamedOption("--mode", choices=3)

    def testSequenceNormalizedToTuple(self):
        self.assertEqual(NamedOption("--mode", choices=["x", "y"]).choices, ("x", "y"))

    def testSetAndRangeFrozen(self):
        self.assertEqual(PositionalOption(0, choices={1, 2}).choices, frozenset({1, 2}))
        self.assertEqual(PositionalOption(0, choices=range(3)).choices, (0, 1, 2))

    def testAccepts(self):
        o = NamedOption("--level", type=int, choices=(1, 2))
        self.assertTrue(o.restricted)
        self.assertTrue(o.accepts(1))
        self.assertFalse(o.accepts(3))

    def testUnrestrictedAcceptsAnything(self):
        o = NamedOption("--level", choices=None)
        self.assertFalse(o.restricted)
        self.assertTrue(o.accepts(object()))


class TestResolve(TestCase):
    """Behavioral tests for schema value resolution."""

    def testOptionBaseIsAbstract(self):
        with self.assertRaises(TypeError):
            Option()

    def testDescriptorReturnedAsIs(self):
        o = PositionalOption(0)
        self.assertIs(resolve(o), o)

    def testOptionProvider(self):
        o = NamedOption("--mode")

        class Provider:
            def __option__(self):
                return o

        self.assertIs(resolve(Provider()), o)

    def testOptionProviderMustReturnOption(self):
        class Provider:
            def __option__(self):
                return "--mode"

        with self.assertRaises(TypeError):
            resolve(Provider())

    def testNamedMappingWithAliases(self):
        o = resolve({"names": ["--no-color"], "parser": bool, "isFlag": True})
        self.assertIsInstance(o, NamedOption)
        self.assertEqual(o.names, ("--no-color",))
        self.assertIs(o.type, bool)
        self.assertTrue(o.flag)

    def testPositionalMapping(self):
        o = resolve({"position": 1, "type": int, "required": True})
        self.assertIsInstance(o, PositionalOption)
        self.assertEqual(o.position, 1)
        self.assertTrue(o.required)

    def testMappingWithBothShapesRejected(self):
        with self.assertRaises(ValueError):
            resolve({"names": ["-a"], "position": 0})

    def testMappingWithNeitherShapeRejected(self):
        with self.assertRaises(ValueError):
            resolve({"type": int})

    def testMappingWithStringNamesRejected(self):
        with self.assertRaises(TypeError):
            resolve({"names": "--mode"})

    def testUnknownObjectRejected(self):
        with self.assertRaises(TypeError):
            resolve(42)


if __name__ == "__main__":
    unittest.main()
