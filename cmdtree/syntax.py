"""
cmdtree syntax tree: fold a token stream into command/option nodes.

Shape
- DirectiveNode: terminal, one per DIRECTIVE token ("name" or "name:value").
- CommandNode: nonterminal, one per COMMAND token; nested to mirror the path.
- OptionNode: nonterminal child of the deepest CommandNode, one per OPTION token.
  Its only possible child is the OptionArgumentNode built from the ARGUMENT
  immediately following the option.
- CommandArgumentNode: every other ARGUMENT, listed in order in
  AstResult.argument_nodes with the OptionNode it trails (None after the
  command path or after a double dash).

Tokens arriving before any CommandNode (options or arguments without a
command) have nowhere to attach and are skipped.
"""
import logging
from typing import NamedTuple

from .tokens import TokenType

logger = logging.getLogger(__name__)


class Node:
    __slots__ = ("token",)

    def __init__(self, token):
        self.token = token

    @property
    def position(self):
        return self.token.position


class NonterminalNode(Node):
    __slots__ = ("children",)

    def __init__(self, token):
        super().__init__(token)
        self.children = []


class CommandNode(NonterminalNode):
    __slots__ = ("command",)

    def __init__(self, token):
        super().__init__(token)
        self.command = token.value

    def __repr__(self):
        return "command-node(%r, children=%r)" % (self.command, self.children)


class OptionNode(NonterminalNode):
    __slots__ = ("name",)

    def __init__(self, token):
        super().__init__(token)
        self.name = token.value

    @property
    def argument(self):
        """
        The OptionArgumentNode child, or None.
        """
        return self.children[0] if self.children else None

    def __repr__(self):
        return "option-node(%r, children=%r)" % (self.name, self.children)


class OptionArgumentNode(Node):
    __slots__ = ("value",)

    def __init__(self, token):
        super().__init__(token)
        self.value = token.value

    def __repr__(self):
        return "option-argument-node(%r)" % self.value


class CommandArgumentNode(Node):
    """
    Free argument word; 'option' is the OptionNode it trails, 'escaped' is
    True after a double dash.
    """
    __slots__ = ("value", "option", "escaped")

    def __init__(self, token, option=None, escaped=False):
        super().__init__(token)
        self.value = token.value
        self.option = option
        self.escaped = escaped

    def __repr__(self):
        return "command-argument-node(%r)" % self.value


class DirectiveNode(Node):
    __slots__ = ("name", "value")

    def __init__(self, token):
        super().__init__(token)
        name, separator, value = token.value.partition(":")
        self.name = name
        self.value = value if separator else None

    def __repr__(self):
        return "directive-node(%r, %r)" % (self.name, self.value)


class AstResult(NamedTuple):
    nonterminal_nodes: list
    terminal_nodes: list
    argument_nodes: list

    def commands(self):
        """
        CommandNodes from the root command down to the deepest one.
        """
        chain = []
        nodes = self.nonterminal_nodes
        while nodes:
            chain.append(nodes[0])
            nodes = [node for node in nodes[0].children if isinstance(node, CommandNode)]
        return chain

    def options(self):
        """
        OptionNodes in token order.
        """
        return sorted(
            (
                node
                for command in self.commands()
                for node in command.children
                if isinstance(node, OptionNode)
            ),
            key=lambda node: node.position,
        )


class Ast:
    """
    Stateless syntax-tree builder.
    """

    def generate(self, tokens, /):
        nonterminals, terminals, arguments = [], [], []
        command = option = None
        trailing = escaped = False

        for token in tokens:
            match token.type:
                case TokenType.DIRECTIVE:
                    terminals.append(DirectiveNode(token))
                case TokenType.COMMAND:
                    node = CommandNode(token)
                    (nonterminals if command is None else command.children).append(node)
                    command, option, trailing = node, None, False
                case TokenType.OPTION if command is not None:
                    option = OptionNode(token)
                    command.children.append(option)
                    trailing = True
                case TokenType.ARGUMENT if command is not None:
                    if trailing:
                        option.children.append(OptionArgumentNode(token))
                    else:
                        arguments.append(CommandArgumentNode(token, option, escaped))
                    trailing = False
                case TokenType.DOUBLEDASH:
                    option, trailing, escaped = None, False, True
                case _:
                    logger.debug("skipping %r outside of any command", token)

        result = AstResult(nonterminals, terminals, arguments)
        logger.debug("generated syntax tree %r", result)
        return result


__all__ = (
    "Node",
    "NonterminalNode",
    "CommandNode",
    "OptionNode",
    "OptionArgumentNode",
    "CommandArgumentNode",
    "DirectiveNode",
    "AstResult",
    "Ast",
)
