"""
cmdtree lexer: classify raw words into tokens.

Words are processed in two sections, split at the first word that is a root
command of the model:

- before the command: only directives ("[name]", "[name:value]", possibly
  adjoined as "[a][b:c]") may appear, and only when the configuration allows
  or ignores them. Anything else is reported once as illegal content (1000).
- from the command on: consecutive child segments become COMMAND tokens; the
  rest are OPTION, ARGUMENT or DOUBLEDASH tokens.

Short-option heuristic: "-x..." is an OPTION only when every character after
the dash is a letter ("-a", "-abc"); "-1", "-a1" or "-ab1c" are ARGUMENTs so
negative numbers survive. "--x..." is always an OPTION. After a bare "--"
every word is an ARGUMENT.
"""
import logging
import re
from typing import NamedTuple

from .config import Feature, snapshot
from .messages import MessageResult, ParserMessage
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

DOUBLE_DASH = "--"


class LexerResult(NamedTuple):
    tokens: list
    message_results: list


def is_directive(word, /):
    """
    True when the whole word is made of bracket groups ("[a]", "[a:b]", "[a][b]").
    """
    return re.fullmatch(r"(?:\[[^\[\]]+\])+", word) is not None


def directives_of(word, /):
    """
    Bracket group contents, left to right.
    """
    return re.findall(r"\[([^\[\]]+)\]", word)


def classify(word, /):
    """
    TokenType of a word outside the command path, before any double-dash.
    """
    if word.startswith("--"):
        return TokenType.OPTION
    if word.startswith("-") and len(word) > 1 and all(char.isalpha() for char in word[1:]):
        return TokenType.OPTION
    return TokenType.ARGUMENT


class Lexer:
    """
    Tokenizer bound to a command model and a configuration snapshot.

    Parameters
    - model: CommandModel used to recognize command path segments.
    - config: ParserConfig | None; defaults to the model's configuration.

    Raises
    - ValueError when config disagrees with the model on command casing
      (the trie keys are fixed when the model is built).
    """

    def __init__(self, model, config=None):
        self._model = model
        self._config = snapshot(config if config is not None else model.config)
        if self._config.is_enabled(Feature.CASE_SENSITIVE_COMMANDS) != model.case_sensitive:
            raise ValueError(
                f"config {Feature.CASE_SENSITIVE_COMMANDS.key!r} must match the command model"
                f" ({model.case_sensitive!r}); build the model with the same config"
            )

    @property
    def config(self):
        return self._config

    def _split(self, words):
        """
        Index of the first word naming a root command, or len(words).
        """
        roots = self._model.valid_root_tokens()
        for index, word in enumerate(words):
            if self._model.normalize(word) in roots:
                return index
        return len(words)

    def _before(self, words, tokens, messages):
        """
        Consume the words preceding the command path (directives or illegal content).
        """
        allow = self._config.is_enabled(Feature.ALLOW_DIRECTIVES)
        ignore = self._config.is_enabled(Feature.IGNORE_DIRECTIVES)

        offending = []
        for position, word in enumerate(words):
            if not word.strip():
                continue
            if not offending and is_directive(word) and (allow or ignore):
                if allow:
                    tokens.extend(
                        Token(directive, TokenType.DIRECTIVE, position)
                        for directive in directives_of(word)
                    )
                continue
            if not offending:
                first = position
            offending.append(word)

        if offending:
            messages.append(MessageResult.of(
                ParserMessage.ILLEGAL_CONTENT_BEFORE_COMMANDS,
                first,
                " ".join(offending),
            ))

    def _after(self, words, offset, tokens, messages):
        """
        Consume the command path and everything after it.
        """
        node = None
        matching = True
        escaped = False

        for position, word in enumerate(words, offset):
            if escaped:
                tokens.append(Token(word, TokenType.ARGUMENT, position))
                continue

            if matching:
                segment = self._model.normalize(word)
                child = self._model.root_command(word) if node is None else node.child(segment)
                if child is not None:
                    node = child
                    tokens.append(Token(word, TokenType.COMMAND, position))
                    continue
                matching = False

            if word == DOUBLE_DASH:
                escaped = True
                tokens.append(Token(word, TokenType.DOUBLEDASH, position))
                if position == offset + len(words) - 1:
                    messages.append(MessageResult.of(ParserMessage.DANGLING_DOUBLE_DASH, position, word))
                continue

            tokens.append(Token(word, classify(word), position))

    def tokenize(self, words, /):
        """
        Classify words into tokens and collect lexical diagnostics.

        Returns
        - LexerResult(tokens, message_results); never raises for input content.
        """
        words = list(words)
        if not all(isinstance(word, str) for word in words):
            raise TypeError("tokenize() argument must be an iterable of strings")
        logger.debug("tokenizing words %r", words)

        tokens, messages = [], []
        if words and words[0] == DOUBLE_DASH:
            messages.append(MessageResult.of(ParserMessage.ILLEGAL_CONTENT_BEFORE_COMMANDS, 0, words[0]))

        split = self._split(words)
        self._before(words[:split], tokens, messages)
        self._after(words[split:], split, tokens, messages)

        logger.debug("generated tokens %r", tokens)
        return LexerResult(tokens, messages)


__all__ = (
    "Lexer",
    "LexerResult",
)
