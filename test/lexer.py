# python
"""
Lexer behavioral tests.

Scope
- Command path recognition (single and nested segments, casing rules).
- Short-option heuristic, double dash and argument classification.
- Directive handling (allowed, ignored, reported) and content before commands.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from cmdtree import Feature, Lexer, MessageCode, ParserConfig, ParserMessage, Token, TokenType

import samples
from samples import lexer, model


class TestCommands(TestCase):
    """Command path recognition."""

    def testSingleSegmentCommandYieldsOneCommandToken(self):
        registrations = (samples.ROOT1, samples.ROOT2, samples.ROOT3)
        for registration in registrations:
            with self.subTest(command=registration.command):
                result = lexer(*registrations).tokenize([registration.command])
                self.assertEqual(result.tokens, [Token(registration.command, TokenType.COMMAND, 0)])
                self.assertEqual(result.message_results, [])

    def testCaseInsensitiveCommandKeepsInputCasing(self):
        result = lexer(samples.ROOT1, config=samples.insensitive()).tokenize(["ROOT1"])
        self.assertEqual(result.tokens, [Token("ROOT1", TokenType.COMMAND, 0)])

        result = lexer(samples.ROOT1_UP, config=samples.insensitive()).tokenize(["root1"])
        self.assertEqual(result.tokens, [Token("root1", TokenType.COMMAND, 0)])

    def testCaseSensitiveCommandIsNotMatched(self):
        result = lexer(samples.ROOT1).tokenize(["ROOT1"])
        self.assertEqual(result.tokens, [])
        self.assertEqual([message.code for message in result.message_results], [MessageCode.ILLEGAL_CONTENT])

    def testNestedCommandsAndOption(self):
        tokens = lexer(samples.ROOT2, samples.ROOT2_SUB1, samples.ROOT2_SUB1_SUB2).tokenize(
            ["root2", "sub1", "sub2", "--arg1", "xxx"]
        ).tokens
        self.assertEqual(tokens, [
            Token("root2", TokenType.COMMAND, 0),
            Token("sub1", TokenType.COMMAND, 1),
            Token("sub2", TokenType.COMMAND, 2),
            Token("--arg1", TokenType.OPTION, 3),
            Token("xxx", TokenType.ARGUMENT, 4),
        ])

    def testCommandMatchingStopsAtFirstNonChild(self):
        tokens = lexer(samples.ROOT2, samples.ROOT2_SUB1).tokenize(["root2", "xxx", "sub1"]).tokens
        self.assertEqual(tokens, [
            Token("root2", TokenType.COMMAND, 0),
            Token("xxx", TokenType.ARGUMENT, 1),
            Token("sub1", TokenType.ARGUMENT, 2),
        ])

    def testGroupingSegmentIsACommandToken(self):
        tokens = lexer(samples.ROOT2_SUB1_SUB2).tokenize(["root2", "sub1"]).tokens
        self.assertEqual([token.type for token in tokens], [TokenType.COMMAND, TokenType.COMMAND])

    def testEmptyInput(self):
        result = lexer(samples.ROOT1).tokenize([])
        self.assertEqual(result.tokens, [])
        self.assertEqual(result.message_results, [])

    def testNonStringWordsRejected(self):
        with self.assertRaises(TypeError):
            lexer(samples.ROOT1).tokenize(["root1", 1])


class TestOptionsAndArguments(TestCase):
    """Short-option heuristic, double dash and argument classification."""

    def testNonLetterShortBundlesAreArguments(self):
        for word in ("-1", "-1a", "-a1", "-ab1", "-ab1c"):
            with self.subTest(word=word):
                tokens = lexer(samples.ROOT3).tokenize(["root3", word]).tokens
                self.assertEqual(tokens[1], Token(word, TokenType.ARGUMENT, 1))

    def testLetterShortBundlesAndLongNamesAreOptions(self):
        for word in ("-a", "-ab", "-abc", "--abc"):
            with self.subTest(word=word):
                tokens = lexer(samples.ROOT3).tokenize(["root3", word]).tokens
                self.assertEqual(tokens[1], Token(word, TokenType.OPTION, 1))

    def testNegativeNumberAfterOption(self):
        tokens = lexer(samples.ROOT3).tokenize(["root3", "--arg1", "-1"]).tokens
        self.assertEqual(tokens[1:], [
            Token("--arg1", TokenType.OPTION, 1),
            Token("-1", TokenType.ARGUMENT, 2),
        ])

    def testSingleDashIsAnArgument(self):
        tokens = lexer(samples.ROOT3).tokenize(["root3", "-"]).tokens
        self.assertEqual(tokens[1], Token("-", TokenType.ARGUMENT, 1))

    def testDoubleDashTurnsEverythingIntoArguments(self):
        result = lexer(samples.ROOT3).tokenize(["root3", "--", "a", "--arg1", "-b", "root3"])
        self.assertEqual(result.tokens, [
            Token("root3", TokenType.COMMAND, 0),
            Token("--", TokenType.DOUBLEDASH, 1),
            Token("a", TokenType.ARGUMENT, 2),
            Token("--arg1", TokenType.ARGUMENT, 3),
            Token("-b", TokenType.ARGUMENT, 4),
            Token("root3", TokenType.ARGUMENT, 5),
        ])
        self.assertEqual(result.message_results, [])

    def testLoneDoubleDashIsReportedTwice(self):
        result = lexer(samples.ROOT1).tokenize(["--"])
        self.assertEqual(result.tokens, [])
        self.assertEqual([message.code for message in result.message_results], [1000, 1000])

    def testDanglingDoubleDashAfterCommand(self):
        result = lexer(samples.ROOT1).tokenize(["root1", "--"])
        self.assertEqual(result.tokens, [
            Token("root1", TokenType.COMMAND, 0),
            Token("--", TokenType.DOUBLEDASH, 1),
        ])
        self.assertEqual(len(result.message_results), 1)
        self.assertIs(result.message_results[0].message, ParserMessage.DANGLING_DOUBLE_DASH)
        self.assertEqual(result.message_results[0].position, 1)


class TestDirectives(TestCase):
    """Directives and content before the command path."""

    def testDirectiveWithoutValue(self):
        result = lexer(samples.ROOT1, config=samples.directives()).tokenize(["[fake]", "root1"])
        self.assertEqual(result.tokens, [
            Token("fake", TokenType.DIRECTIVE, 0),
            Token("root1", TokenType.COMMAND, 1),
        ])
        self.assertEqual(result.message_results, [])

    def testDirectiveWithValue(self):
        tokens = lexer(samples.ROOT1, config=samples.directives()).tokenize(["[fake:value]", "root1"]).tokens
        self.assertEqual(tokens[0], Token("fake:value", TokenType.DIRECTIVE, 0))

    def testAdjoinedDirectives(self):
        tokens = lexer(samples.ROOT1, config=samples.directives()).tokenize(["[foo][bar:value]", "root1"]).tokens
        self.assertEqual(tokens, [
            Token("foo", TokenType.DIRECTIVE, 0),
            Token("bar:value", TokenType.DIRECTIVE, 0),
            Token("root1", TokenType.COMMAND, 1),
        ])

    def testDirectivesReportedWhenNotAllowed(self):
        result = lexer(samples.ROOT1).tokenize(["[fake]", "root1"])
        self.assertEqual(result.tokens, [Token("root1", TokenType.COMMAND, 1)])
        self.assertEqual(len(result.message_results), 1)
        self.assertIs(result.message_results[0].message, ParserMessage.ILLEGAL_CONTENT_BEFORE_COMMANDS)
        self.assertEqual(result.message_results[0].inserts, ("[fake]",))

    def testDirectivesSilentlyIgnored(self):
        config = ParserConfig().enable(Feature.IGNORE_DIRECTIVES)
        result = lexer(samples.ROOT1, config=config).tokenize(["[fake]", "root1"])
        self.assertEqual(result.tokens, [Token("root1", TokenType.COMMAND, 1)])
        self.assertEqual(result.message_results, [])

    def testIllegalContentReportedOnceAtFirstWord(self):
        result = lexer(samples.ROOT1, config=samples.directives()).tokenize(["[a]", "foo", "bar", "root1"])
        self.assertEqual(result.tokens, [
            Token("a", TokenType.DIRECTIVE, 0),
            Token("root1", TokenType.COMMAND, 3),
        ])
        self.assertEqual(len(result.message_results), 1)
        self.assertEqual(result.message_results[0].position, 1)
        self.assertEqual(result.message_results[0].inserts, ("foo bar",))

    def testLexerKeepsConfigSnapshot(self):
        config = ParserConfig()
        instance = Lexer(model(samples.ROOT1), config)
        config.enable(Feature.ALLOW_DIRECTIVES)
        self.assertFalse(instance.config.is_enabled(Feature.ALLOW_DIRECTIVES))

    def testCommandCasingMustMatchModel(self):
        with self.assertRaises(ValueError):
            Lexer(model(samples.ROOT1), samples.insensitive())
        with self.assertRaises(ValueError):
            Lexer(model(samples.ROOT1, config=samples.insensitive()), ParserConfig())
        config = ParserConfig().disable(Feature.CASE_SENSITIVE_COMMANDS).enable(Feature.ALLOW_DIRECTIVES)
        instance = Lexer(model(samples.ROOT1, config=samples.insensitive()), config)
        self.assertTrue(instance.config.is_enabled(Feature.ALLOW_DIRECTIVES))


if __name__ == "__main__":
    unittest.main()
