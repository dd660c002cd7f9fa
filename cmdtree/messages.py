"""
cmdtree diagnostics: stable message codes, parser messages and their rendering.

Scope
- MessageCode: stable numeric identifiers shared with hosts (1000 lexical,
  2000-2004 binding). normalize() lets a host remap them to its own labels.
- ParserMessage: every diagnostic the parser can produce, with its kind
  (MessageKind), code, title, text template and hint template.
- MessageResult: one produced diagnostic (message + word position + inserts).
  Parsing never raises for input problems; it returns these as data.
- ParserException / ParserExit: exception forms for hosts that prefer raising
  (see ParseResult.raise_for_messages()), rendered with rich.

UX goals
- Position-first hints ("→ at second word") so users can find the culprit.
- Short titles, one-sentence lowercased bodies.
- Styles can be overridden with a __styles__ mapping in __main__, and the
  program label with __prog__.
"""
import copy
from collections import defaultdict
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import NamedTuple

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import *


class MessageCode(IntEnum):
    """
    stable diagnostic codes (caller-visible).

    - 1000: lexical problems (content before the command, dangling double dash).
    - 2000-2004: binding problems (missing, unrecognised, illegal, not enough, too many).

    normalize() returns the host label from a __codes__ mapping in __main__
    when present, else the numeric value as a string.
    """
    ILLEGAL_CONTENT             = 1000
    MANDATORY_OPTION_MISSING    = 2000
    UNRECOGNISED_OPTION         = 2001
    ILLEGAL_OPTION_VALUE        = 2002
    NOT_ENOUGH_OPTION_ARGUMENTS = 2003
    TOO_MANY_ARGUMENTS          = 2004

    def normalize(self):
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class MessageKind(Enum):
    ERROR = "E"


class ParserMessage(Enum):
    """
    diagnostics produced by the lexer and the binder.

    each member carries (kind, code, title, template, hint); templates are
    str.format strings filled with the MessageResult inserts.
    """
    ILLEGAL_CONTENT_BEFORE_COMMANDS = (
        MessageKind.ERROR,
        MessageCode.ILLEGAL_CONTENT,
        "illegal content",
        "illegal content before commands '{0}'",
        "only directives may appear before the command",
    )
    DANGLING_DOUBLE_DASH = (
        MessageKind.ERROR,
        MessageCode.ILLEGAL_CONTENT,
        "dangling double dash",
        "nothing follows double dash '{0}'",
        "put arguments after '--' or remove it",
    )
    MANDATORY_OPTION_MISSING = (
        MessageKind.ERROR,
        MessageCode.MANDATORY_OPTION_MISSING,
        "missing option",
        "missing mandatory option '{0}'{1}",
        "pass '{0}' with a value",
    )
    UNRECOGNISED_OPTION = (
        MessageKind.ERROR,
        MessageCode.UNRECOGNISED_OPTION,
        "unknown option",
        "unrecognised option '{0}'",
        "check the spelling of '{0}' or remove it",
    )
    ILLEGAL_OPTION_VALUE = (
        MessageKind.ERROR,
        MessageCode.ILLEGAL_OPTION_VALUE,
        "illegal value",
        "illegal option value '{0}', reason '{1}'",
        "pass a value of the expected type",
    )
    NOT_ENOUGH_OPTION_ARGUMENTS = (
        MessageKind.ERROR,
        MessageCode.NOT_ENOUGH_OPTION_ARGUMENTS,
        "not enough values",
        "not enough arguments for option '{0}', requires at least '{1}'",
        "'{0}' got {2} of {1} values",
    )
    TOO_MANY_ARGUMENTS = (
        MessageKind.ERROR,
        MessageCode.TOO_MANY_ARGUMENTS,
        "too many arguments",
        "too many arguments '{0}'",
        "remove the extra {1}",
    )

    def __init__(self, kind, code, title, template, hint):
        self.kind = kind
        self.code = code
        self.title = title
        self.template = template
        self.hint = hint


class MessageResult(NamedTuple):
    """
    One produced diagnostic.

    Fields
    - message: ParserMessage member.
    - position: index of the word the diagnostic points at.
    - inserts: values substituted into the message templates.
    """
    message: ParserMessage
    position: int
    inserts: tuple = ()

    @classmethod
    def of(cls, message, position, /, *inserts):
        if not isinstance(message, ParserMessage):
            raise TypeError("MessageResult.of() first argument must be a parser message")
        return cls(message, position, tuple(inserts))

    @property
    def code(self):
        return self.message.code

    @property
    def kind(self):
        return self.message.kind

    @property
    def text(self):
        return self.message.template.format(*self.inserts)

    @property
    def hint(self):
        return self.message.hint.format(*self.inserts)

    def format(self, code=True):
        """
        Compact one-line form: "2000E:(pos 0): missing mandatory option '--arg1'".
        """
        if not code:
            return self.text
        return "%s%s:(pos %d): %s" % (self.code.normalize(), self.kind.value, self.position, self.text)

    def __str__(self):
        return self.format()


def _renderer(options):
    """
    Internal: build (styler, text) helpers honoring the colorful option and __styles__.
    """
    main = __import__("__main__")

    styles = defaultdict(str, {
        # header parts
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "error-title": "bold #FF4DA6",
        "title": "bold #FF4DA6",

        # body
        "message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    } | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if options["colorful"] else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not options["colorful"]:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", options["prog"]), styler("prog-name"))
    return styler, text, prog


class ParserException(Exception):
    """
    Exception form of a MessageResult.

    Options
    - prog: label shown in the header (default "cmdtree"; __main__.__prog__ wins).
    - colorful: style the output (default True).
    - fancy: wrap the output in a panel (default False).
    """

    def __init__(self, result, /, **options):
        if not isinstance(result, MessageResult):
            raise TypeError("ParserException() argument must be a message result")
        super().__init__(result.format())
        self.result = result
        self.options = MappingProxyType({"prog": "cmdtree", "colorful": True, "fancy": False} | options)

    @property
    def code(self):
        return self.result.code

    @property
    def position(self):
        return self.result.position

    def __rich__(self):
        styler, text, prog = _renderer(self.options)
        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.result.code.normalize(), styler("code")),
            " | ",
            text(self.result.message.title.title(), styler("error-title")),
            " ]",
        )
        message = text(self.result.text, styler("message"))
        hint = Text.assemble(
            text(" → ", styler("hint-arrow")),
            text(f"at {ordinal(self.result.position + 1)} word: {self.result.hint}", styler("hint")),
        )

        if self.options["fancy"]:
            return Panel(Group(message, hint), title=header, title_align="left")
        return Group(header, message, hint)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.result, **{**self.options, **overrides})


class ParserExit(ExceptionGroup[ParserException]):
    """
    Group of ParserException raised by ParseResult.raise_for_messages().
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad input", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad input", tuple(exceptions))
        self.options = MappingProxyType({"prog": "cmdtree", "colorful": True, "fancy": False} | options)

    def __rich__(self):
        styler, text, prog = _renderer(self.options)

        count = len(self.exceptions)
        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(f"{count} {pluralize("problem", count)}", styler("title")),
            " ]",
        )
        renders = [copy.replace(exception, **self.options) for exception in self.exceptions]

        if self.options["fancy"]:
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def derive(self, excs):
        return type(self)(excs, **self.options)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


__all__ = (
    "MessageCode",
    "MessageKind",
    "ParserMessage",
    "MessageResult",
    "ParserException",
    "ParserExit",
)
