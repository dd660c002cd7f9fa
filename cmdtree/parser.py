"""
cmdtree parser: words → tokens → syntax tree → bound, converted values.

Parser.parse(words) composes the Lexer, the Ast builder and a per-call
binder. It never raises for problems in the input: every lexical or binding
problem becomes a MessageResult in ParseResult.message_results, in the order
lexer, named binding, positional binding, mandatory options, conversions.

Binding rules (per call)
- Named: each OptionNode is matched against the resolved registration by
  long name ("--name", "--name=value") or as a short bundle ("-abc", every
  letter a short name, the last letter receiving the trailing words). The
  option takes up to arity.max words, counted across repeated occurrences;
  the rest are free.
- Free words are reported as ArgumentResult, ranked from 0 and ranked again
  from 0 after a double dash.
- Positional: options with a position and not bound by name take free words
  in ascending position order; leftovers are reported once (2004) when the
  registration declares positional options. A word binds at most once.
- Defaults bind options still unbound (explicit=False); required options
  without a default and still unbound are reported (2000).
- Values are converted to the option type; failures are reported (2002)
  and the raw string is kept.

Quick example
    >>> model = CommandModel([CommandRegistration("root4", options=[CommandOption("--arg1", required=True)])])
    >>> Parser(model).parse(["root4"]).message_results[0].format()
    "2000E:(pos 0): missing mandatory option '--arg1'"
"""
import logging
from collections.abc import Iterable
from typing import NamedTuple

from .config import Feature, snapshot
from .conversions import ConversionError, convert
from .lexer import Lexer
from .messages import MessageKind, MessageResult, ParserExit, ParserException, ParserMessage
from .model import CommandModel
from .syntax import Ast, OptionArgumentNode
from .utils import *

logger = logging.getLogger(__name__)


class OptionResult(NamedTuple):
    """
    A bound option: the spec, its converted value (raw string when the
    conversion failed) and whether the user supplied it.
    """
    option: object
    value: object
    explicit: bool = True


class ArgumentResult(NamedTuple):
    value: str
    position: int


class DirectiveResult(NamedTuple):
    name: str
    value: str | None = None


class ParseResult(NamedTuple):
    """
    Outcome of Parser.parse().

    Fields
    - registration: CommandRegistration | None (None when no command resolved).
    - option_results: tuple[OptionResult, ...] (named, positional, then defaults).
    - argument_results: tuple[ArgumentResult, ...] (words not bound by name).
    - directive_results: tuple[DirectiveResult, ...].
    - message_results: tuple[MessageResult, ...].
    """
    registration: object
    option_results: tuple = ()
    argument_results: tuple = ()
    directive_results: tuple = ()
    message_results: tuple = ()

    @property
    def resolved(self):
        return self.registration is not None

    @property
    def errors(self):
        return tuple(result for result in self.message_results if result.kind is MessageKind.ERROR)

    def values(self):
        """
        Map option keys (first long name, else first short name) to bound values.
        """
        return {
            result.option.name.lstrip("-"): result.value
            for result in self.option_results
        }

    def value_of(self, name, /, default=None):
        """
        Value bound to the option spelled 'name' ("arg1", "--arg1" or "-a").
        """
        if not name.startswith("-"):
            name = ("--" if len(name) > 1 else "-") + name
        for result in self.option_results:
            if result.option.matches(name):
                return result.value
        return default

    def raise_for_messages(self, **options):
        """
        Raise ParserExit (one ParserException per error message) when errors exist.

        Options are forwarded to the exceptions' rich rendering (prog, colorful,
        fancy). Returns self when there is nothing to raise.
        """
        if errors := self.errors:
            raise ParserExit([ParserException(result, **options) for result in errors], **options)
        return self


class _Word(NamedTuple):
    value: str
    position: int
    escaped: bool = False


class _Binding:
    __slots__ = ("option", "words", "explicit", "position")

    def __init__(self, option, words, explicit=True, position=0):
        self.option = option
        self.words = words
        self.explicit = explicit
        self.position = position

    @property
    def raw(self):
        if self.words is None:
            return self.option.default
        if not self.words:
            return None
        return ",".join(word.value for word in self.words)


class _Binder:
    """
    Per-call binding state; never shared between parse() calls.
    """

    def __init__(self, registration, casefold):
        self.registration = registration
        self.casefold = casefold
        self.bindings = {}
        self.free = []
        self.messages = []

    def report(self, message, position, /, *inserts):
        self.messages.append(MessageResult.of(message, position, *inserts))

    def lookup(self, name):
        for option in self.registration.options:
            if option.matches(name, casefold=self.casefold):
                return option
        return None

    def bind(self, option, words, position):
        if (binding := self.bindings.get(option)) is None:
            self.bindings[option] = _Binding(option, list(words), position=position)
        else:
            binding.words.extend(words)

    def named(self, node, trailing):
        """
        Bind one OptionNode with its trailing words; return the words left free.
        """
        name, inline = node.name, False
        if name.startswith("--"):
            name, inline, value = name.partition("=")
            if inline:
                trailing = [_Word(value, node.position), *trailing]
            targets = [name]
        else:
            targets = ["-" + letter for letter in name[1:]]

        free = []
        for index, target in enumerate(targets):
            words = trailing if index == len(targets) - 1 else []
            option = self.lookup(target)
            if option is None:
                logger.debug("unrecognised option %r dropping %r", target, words)
                self.report(ParserMessage.UNRECOGNISED_OPTION, node.position, target)
                continue

            arity = option.resolve_arity()
            bound = len(binding.words) if (binding := self.bindings.get(option)) is not None else 0
            if arity.max is None:
                limit = len(words)
            else:
                # repeated occurrences share the option's arity
                limit = max(arity.max - bound, 0)
                # an inline value belongs to its option unless the option is already full
                if inline and not limit and not bound:
                    limit = 1
            taken = words[:limit]
            free.extend(words[len(taken):])
            if bound + len(taken) < arity.min:
                self.report(ParserMessage.NOT_ENOUGH_OPTION_ARGUMENTS, node.position, target, arity.min, bound + len(taken))
            self.bind(option, taken, node.position)
        return free

    def positional(self, words):
        """
        Feed free words to positional options not bound by name.
        """
        declared = self.registration.positionals()
        alone = len(declared) == 1

        queue = list(words)
        for option in declared:
            if option in self.bindings:
                continue
            arity = option.resolve_arity(positional=True, alone=alone)
            taken = queue if arity.max is None else queue[:arity.max]
            if not taken:
                continue
            if len(taken) < arity.min:
                self.report(ParserMessage.NOT_ENOUGH_OPTION_ARGUMENTS, taken[0].position, option.name, arity.min, len(taken))
            self.bind(option, taken, taken[0].position)
            queue = queue[len(taken):]

        if declared and queue:
            self.report(
                ParserMessage.TOO_MANY_ARGUMENTS,
                queue[0].position,
                " ".join(word.value for word in queue),
                pluralize("argument", len(queue)),
            )

    def defaults(self):
        for option in self.registration.options:
            if option in self.bindings:
                continue
            if option.default is not None:
                self.bindings[option] = _Binding(option, None, explicit=False)
            elif option.required:
                description = f", {option.description}" if option.description else ""
                self.report(ParserMessage.MANDATORY_OPTION_MISSING, 0, option.name, description)

    def convert(self):
        results = []
        for option, binding in self.bindings.items():
            raw = binding.raw
            if raw is None and option.type is bool:
                value = True
            else:
                try:
                    value = convert(raw, option.type)
                except ConversionError as error:
                    self.report(ParserMessage.ILLEGAL_OPTION_VALUE, binding.position, raw, str(error))
                    value = raw
            results.append(OptionResult(option, value, binding.explicit))
        return results

    def run(self, ast):
        trailing = {}
        for node in ast.argument_nodes:
            word = _Word(node.value, node.position, node.escaped)
            if node.option is not None and not node.escaped:
                trailing.setdefault(node.option, []).append(word)
            else:
                self.free.append(word)

        for node in ast.options():
            words = [_Word(child.value, child.position) for child in node.children if isinstance(child, OptionArgumentNode)]
            words.extend(trailing.get(node, ()))
            self.free.extend(self.named(node, words))
        self.free.sort(key=lambda word: word.position)

        arguments, rank, escaped = [], 0, False
        for word in self.free:
            if word.escaped and not escaped:
                rank, escaped = 0, True
            arguments.append(ArgumentResult(word.value, rank))
            rank += 1

        self.positional(self.free)
        self.defaults()
        options = self.convert()
        logger.debug("bound %r with %d options and %d arguments", self.registration.command, len(options), len(arguments))
        return options, arguments


class Parser:
    """
    Lexer → Ast → binder pipeline over a command model.

    Parameters
    - model: CommandModel, or an iterable of registrations to build one from.
    - config: ParserConfig | None; defaults to the model's configuration.
      Option casing and directive handling are read from it.

    Raises
    - ValueError when config and model disagree on command casing.
    """

    def __init__(self, model, config=None):
        if not isinstance(model, CommandModel):
            if isinstance(model, str) or not isinstance(model, Iterable):
                raise TypeError("Parser() first argument must be a command model or registrations")
            model = CommandModel(model, config)
        self._model = model
        self._config = snapshot(config if config is not None else model.config)
        self._lexer = Lexer(model, self._config)
        self._ast = Ast()

    @property
    def model(self):
        return self._model

    @property
    def config(self):
        return self._config

    def parse(self, words, /):
        """
        Parse already-split words into a ParseResult.

        Raises
        - TypeError when 'words' is a string or contains non-strings (no
          shell splitting happens here).
        """
        if isinstance(words, str) or not isinstance(words, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")

        lexed = self._lexer.tokenize(words)
        ast = self._ast.generate(lexed.tokens)
        directives = tuple(DirectiveResult(node.name, node.value) for node in ast.terminal_nodes)

        info = self._model.resolve(node.command for node in ast.commands())
        if info is None:
            logger.debug("no registration resolved for %r", lexed.tokens)
            return ParseResult(None, (), (), directives, tuple(lexed.message_results))

        binder = _Binder(info.registration, not self._config.is_enabled(Feature.CASE_SENSITIVE_OPTIONS))
        options, arguments = binder.run(ast)
        return ParseResult(
            info.registration,
            tuple(options),
            tuple(arguments),
            directives,
            (*lexed.message_results, *binder.messages),
        )

    def derive(self, *registrations):
        """
        Return a parser over a model extended with more registrations (copy-on-write).
        """
        return type(self)(self._model.derive(*registrations), self._config)


__all__ = (
    "Parser",
    "ParseResult",
    "OptionResult",
    "ArgumentResult",
    "DirectiveResult",
)
