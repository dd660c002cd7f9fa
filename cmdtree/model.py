"""
cmdtree command model: a trie of command path segments.

Every node (CommandInfo) is one path segment. A node may own a registration
(a runnable command) and/or children (sub-commands); grouping nodes such as
"root2" in "root2 sub1 sub2" exist only to reach their children unless they
are registered themselves.

The model is built once from a final set of registrations and is read-only
afterwards. Changing the registration set means building a new model
(CommandModel.derive), so models can be shared by concurrent parses.

Casing: with Feature.CASE_SENSITIVE_COMMANDS disabled every segment is
lower-cased both on insertion and on lookup.
"""
import logging
from types import MappingProxyType

from .config import Feature, snapshot
from .registrations import registrations_of
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)


class CommandInfo:
    """
    One node of the command trie.

    Attributes
    - command: the (normalized) segment of this node.
    - registration: CommandRegistration | None.
    - parent: CommandInfo | None (None for root commands).
    - children: read-only mapping of normalized segment → CommandInfo.
    """
    __slots__ = ("_command", "_registration", "_parent", "_children")

    def __init__(self, command, parent=None):
        self._command = command
        self._registration = None
        self._parent = parent
        self._children = {}

    @property
    def command(self):
        return self._command

    @property
    def registration(self):
        return self._registration

    @property
    def parent(self):
        return self._parent

    @property
    def children(self):
        return MappingProxyType(self._children)

    @property
    def path(self):
        """
        Normalized segments from the root command down to this node.
        """
        node, path = self, []
        while node is not None:
            path.append(node._command)
            node = node._parent
        return tuple(reversed(path))

    def child(self, command, /):
        return self._children.get(command)

    def valid_tokens(self):
        """
        Map raw words that may follow this node to the token they produce.

        - every child segment → COMMAND token
        - every "--long"/"-s" spelling of the registration's options → OPTION token
        """
        tokens = {
            command: Token(command, TokenType.COMMAND)
            for command in self._children
        }
        if self._registration is not None:
            for option in self._registration.options:
                for name in option.longnames:
                    tokens["--" + name] = Token(name, TokenType.OPTION)
                for name in option.shortnames:
                    tokens["-" + name] = Token(name, TokenType.OPTION)
        return tokens

    def __repr__(self):
        return "command-info(path=%r, registered=%r, children=%r)" % (
            " ".join(self.path),
            self._registration is not None,
            tuple(self._children),
        )


class CommandModel:
    """
    Immutable trie built from command registrations.

    Parameters
    - registrations: iterable of CommandRegistration (or objects exposing
      __registration__()).
    - config: ParserConfig | None; a snapshot is kept, later edits to the
      given config do not affect this model.

    Raises
    - TypeError for malformed inputs.
    - ValueError when two registrations (or aliases) claim the same path,
      after case normalization.
    """

    def __init__(self, registrations=(), config=None):
        self._config = snapshot(config)
        self._registrations = registrations_of(registrations)
        self._roots = {}

        for registration in self._registrations:
            for path in registration.paths:
                self._insert(path, registration)

        logger.debug(
            "built command model with %d registrations and %d root commands",
            len(self._registrations),
            len(self._roots),
        )

    @property
    def config(self):
        return self._config

    @property
    def registrations(self):
        return self._registrations

    @property
    def case_sensitive(self):
        return self._config.is_enabled(Feature.CASE_SENSITIVE_COMMANDS)

    def normalize(self, segment, /):
        """
        Apply the model's casing rule to a path segment.
        """
        return segment if self.case_sensitive else segment.lower()

    def _insert(self, path, registration):
        nodes, node = self._roots, None
        for segment in map(self.normalize, path):
            if (child := nodes.get(segment)) is None:
                child = nodes[segment] = CommandInfo(segment, node)
            node, nodes = child, child._children

        if node._registration is not None:
            raise ValueError(
                f"command path {" ".join(path)!r} is already registered"
                f" by {node._registration.command!r}"
            )
        node._registration = registration

    def valid_root_tokens(self):
        """
        Map every root segment to a COMMAND token.
        """
        return {
            command: Token(command, TokenType.COMMAND)
            for command in self._roots
        }

    def root_command(self, name, /):
        """
        Return the root CommandInfo for a segment, or None.
        """
        return self._roots.get(self.normalize(name))

    def resolve(self, words, /):
        """
        Walk the trie with command words and return the closest registered node.

        The walk stops at the first word that is not a child of the current
        node. The deepest matched node is returned when it is registered,
        otherwise its closest registered ancestor; None when the first word
        is not a root command or no node on the matched path is registered.
        """
        words = list(words)
        node, nodes = None, self._roots
        for word in words:
            if (child := nodes.get(self.normalize(word))) is None:
                break
            node, nodes = child, child._children

        while node is not None and node._registration is None:
            node = node._parent

        logger.debug("resolved %r to %r", words, node)
        return node

    def derive(self, *registrations):
        """
        Return a new model holding this model's registrations plus the given ones.

        Copy-on-write: this model is left untouched.
        """
        return type(self)((*self._registrations, *registrations_of(registrations)), self._config)

    def __len__(self):
        return len(self._registrations)

    def __contains__(self, path):
        if isinstance(path, str):
            path = path.split()
        node = self.resolve(path)
        return node is not None and node.path == tuple(map(self.normalize, path))

    def __repr__(self):
        return "command-model(%s)" % ", ".join(
            repr(registration.command) for registration in self._registrations
        )


__all__ = (
    "CommandInfo",
    "CommandModel",
)
