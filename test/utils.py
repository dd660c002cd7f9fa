"""
Tests for the shared helpers.

This module verifies the guarantees the option specs and diagnostics rely on:
- The Unset sentinel is a falsy, sealed singleton that survives copies and pickling.
- coalesce() only replaces Unset.
- rename() and mirror() produce stable names and read-only views.
- pluralize() and ordinal() wording used by diagnostics.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from cmdtree.utils import *
from cmdtree.utils import SpecType


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the module-level instance.
        """
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self) -> None:
        """
        Unset is falsy but distinct from other falsy values.
        """
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, 0)
        self.assertEqual(repr(Unset), "Unset")

    def testCopyAndPickle(self) -> None:
        """
        Copies and pickle round-trips preserve identity.
        """
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self) -> None:
        """
        The sentinel type cannot be subclassed.
        """
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testUnionWithTypes(self) -> None:
        """
        Unset takes part in isinstance() unions.
        """
        self.assertIsInstance(Unset, int | Unset)
        self.assertIsInstance(3, Unset | int)


class HelpersTest(TestCase):

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)

    def testRename(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual((function.__name__, function.__qualname__), ("renamed", "renamed"))

        @rename("decorated")
        def other():
            pass

        self.assertEqual(other.__name__, "decorated")

        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(1, "name")

    def testMirrorFreezesContainers(self) -> None:
        class Holder:
            values = mirror("values")
            mapping = mirror("mapping")

            def __init__(self):
                self._values = [1, 2]
                self._mapping = {"a": 1}

        holder = Holder()
        self.assertEqual(holder.values, (1, 2))
        with self.assertRaises(TypeError):
            holder.mapping["b"] = 2
        with self.assertRaises(AttributeError):
            holder.values = ()

    def testPluralize(self) -> None:
        self.assertEqual(pluralize("argument", 1), "argument")
        self.assertEqual(pluralize("argument", 0), "arguments")
        self.assertEqual(pluralize("argument"), "arguments")
        self.assertEqual(pluralize("command entry"), "command entries")
        self.assertEqual(pluralize("match", 2), "matches")
        self.assertEqual(pluralize("day", 2), "days")

    def testOrdinal(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(112), "112th")


class SpecTypeTest(TestCase):

    def testTypenameFieldsAndRepr(self) -> None:
        class SampleSpec(metaclass=SpecType):
            __introspectable__ = ("name", "tags")
            __displayable__ = ("name",)

            def __init__(self, name, tags):
                self._name = name
                self._tags = tags

        spec = SampleSpec("demo", ["a"])
        self.assertEqual(SampleSpec.__typename__, "sample-spec")
        self.assertEqual(spec.tags, ("a",))
        self.assertEqual(repr(spec), "sample-spec(name='demo')")
        self.assertEqual(list(spec.__rich_repr__()), [("name", "demo")])


if __name__ == "__main__":
    unittest.main()
