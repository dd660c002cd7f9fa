# python
"""
Option specification tests.

Scope
- Arity shorthands and validation.
- CommandOption name rules, defaults and contextual arity.
- The @option decorator on functions and on registrations.
"""
import pathlib
import unittest
import warnings
from unittest import TestCase

import cmdtree
from cmdtree import Arity, CommandOption, CommandRegistration, option, registration


class TestArity(TestCase):

    def testShorthands(self):
        self.assertEqual(Arity.of(Arity.ONE_OR_MORE), Arity(1, None))
        self.assertEqual(Arity.of(2), Arity(2, 2))
        self.assertEqual(Arity.of("?"), Arity.ZERO_OR_ONE)
        self.assertEqual(Arity.of("*"), Arity.ZERO_OR_MORE)
        self.assertEqual(Arity.of("+"), Arity.ONE_OR_MORE)
        self.assertEqual(Arity.of((1, 3)), Arity(1, 3))
        self.assertEqual(Arity.of([0, None]), Arity.ZERO_OR_MORE)

    def testInvalid(self):
        for source, error in (
            (True, TypeError),
            (-1, ValueError),
            ("!", ValueError),
            ((3, 1), ValueError),
            ((1, 2, 3), ValueError),
            (("1", 2), TypeError),
            (1.5, TypeError),
        ):
            with self.subTest(source=source):
                with self.assertRaises(error):
                    Arity.of(source)

    def testUnboundedAndRepr(self):
        self.assertTrue(Arity.ZERO_OR_MORE.unbounded)
        self.assertFalse(Arity.EXACTLY_ONE.unbounded)
        self.assertEqual(repr(Arity.ONE_OR_MORE), "arity(1..*)")
        self.assertEqual(repr(Arity.ZERO), "arity(0..0)")


class TestCommandOption(TestCase):

    def testNames(self):
        spec = CommandOption("--arg1", "-a", "--first")
        self.assertEqual(spec.longnames, ("arg1", "first"))
        self.assertEqual(spec.shortnames, ("a",))
        self.assertEqual(spec.name, "--arg1")
        self.assertEqual(CommandOption("-x").name, "-x")

    def testInvalidNames(self):
        for names, error in (
            ((), TypeError),
            ((1,), TypeError),
            (("",), ValueError),
            (("arg1",), ValueError),
            (("-ab",), ValueError),
            (("--1arg",), ValueError),
            (("---arg",), ValueError),
            (("--arg1", "--arg1"), ValueError),
        ):
            with self.subTest(names=names):
                with self.assertRaises(error):
                    CommandOption(*names)

    def testDefaults(self):
        spec = CommandOption("--arg1")
        self.assertIs(spec.type, str)
        self.assertFalse(spec.required)
        self.assertIsNone(spec.default)
        self.assertIsNone(spec.position)
        self.assertIsNone(spec.description)
        self.assertFalse(spec.positional)
        self.assertFalse(spec.hidden)

    def testInvalidBinding(self):
        with self.assertRaises(TypeError):
            CommandOption("--arg1", type="int")
        with self.assertRaises(TypeError):
            CommandOption("--arg1", default=1)
        with self.assertRaises(TypeError):
            CommandOption("--arg1", position=True)
        with self.assertRaises(ValueError):
            CommandOption("--arg1", position=-1)
        with self.assertRaises(ValueError):
            CommandOption("--arg1", description="  ")

    def testContextualArity(self):
        self.assertEqual(CommandOption("--arg1").resolve_arity(), Arity.ZERO_OR_MORE)
        self.assertEqual(CommandOption("--flag", type=bool).resolve_arity(), Arity.ZERO)
        spec = CommandOption("--arg1", position=0)
        self.assertEqual(spec.resolve_arity(positional=True), Arity.ZERO_OR_ONE)
        self.assertEqual(spec.resolve_arity(positional=True, alone=True), Arity.ZERO_OR_MORE)
        declared = CommandOption("--arg1", arity=2, position=0)
        self.assertEqual(declared.resolve_arity(positional=True, alone=True), Arity(2, 2))

    def testMatches(self):
        spec = CommandOption("--arg1", "-a")
        self.assertTrue(spec.matches("--arg1"))
        self.assertTrue(spec.matches("-a"))
        self.assertFalse(spec.matches("--a"))
        self.assertFalse(spec.matches("-arg1"))
        self.assertFalse(spec.matches("arg1"))
        self.assertFalse(spec.matches("--ARG1"))
        self.assertTrue(spec.matches("--ARG1", casefold=True))
        self.assertTrue(spec.matches("-A", casefold=True))

    def testIdentity(self):
        self.assertNotEqual(CommandOption("--arg1"), CommandOption("--arg1"))

    def testRepr(self):
        self.assertTrue(repr(CommandOption("--arg1")).startswith("command-option(longnames=('arg1',)"))

    def testSourcesCompileWithoutWarnings(self):
        for path in sorted(pathlib.Path(cmdtree.__file__).parent.glob("*.py")):
            with self.subTest(module=path.name):
                with warnings.catch_warnings():
                    warnings.simplefilter("error")
                    compile(path.read_text(encoding="utf-8"), str(path), "exec")


class TestOptionDecorator(TestCase):

    def testStackedOnFunctionKeepsTopDownOrder(self):
        @option("--arg1")
        @option("--arg2")
        def target(**kwargs):
            return kwargs

        self.assertEqual([spec.name for spec in target.__options__], ["--arg1", "--arg2"])

    def testCollectedByRegistration(self):
        @registration("root3")
        @option("--arg1", required=True)
        @option("-b", type=bool)
        def root3(**kwargs):
            return kwargs

        self.assertIsInstance(root3, CommandRegistration)
        self.assertEqual([spec.name for spec in root3.options], ["--arg1", "-b"])
        self.assertEqual(root3(arg1="x"), {"arg1": "x"})

    def testAppliedOnRegistration(self):
        @option("--verbose", "-v", type=bool)
        @registration("root5", options=[CommandOption("--arg1")])
        def root5(**kwargs):
            return kwargs

        self.assertIsInstance(root5, CommandRegistration)
        self.assertEqual([spec.name for spec in root5.options], ["--verbose", "--arg1"])

    def testOptionHook(self):
        decorator = option("--arg1")
        instance = CommandRegistration("root3", options=[decorator])
        self.assertEqual(instance.options[0].name, "--arg1")

    def testRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            option("--arg1")(42)


if __name__ == "__main__":
    unittest.main()
