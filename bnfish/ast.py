# ============================================================================
# Copyright (c) 2026 The bnfish authors
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
# ============================================================================
"""
The classes `Token` and `Node` make up the abstract syntax tree that a
`Grammar` builds from its input.  Tokens are the leaves, produced by the
scanner; nodes are produced by parser rules, one per matched alternative,
and hold their children in an ordered property mapping keyed by alias.

A property value is one of:

  * a Token,
  * a Node,
  * a list of Tokens and/or Nodes (for aliases that accumulate).

Callers are expected to know the shape of their grammar, so the typed
accessors raise `TypeMismatch` instead of handing back None.
"""

from __future__ import annotations
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    List,
    TypeVar,
    Union,
)

from mypy_extensions import mypyc_attr

from bnfish.errors import TypeMismatch

if TYPE_CHECKING:
    from bnfish.visitor import Visitor

S = TypeVar("S")


@mypyc_attr(allow_interpreted_subclasses=True)
class Token:
    """
    A terminal symbol: the kind is the name of the lexer rule that matched
    and text is the matched slice of the input.  Tokens are treated as
    immutable.  The offset (position of the match in the input) is kept
    for diagnostics only and does not take part in comparisons.
    """

    def __init__(self, kind: str, text: str, offset: int = 0) -> None:
        self.kind = kind
        self.text = text
        self.offset = offset

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Token):
            return self.kind == other.kind and self.text == other.text
        else:
            return NotImplemented

    def __hash__(self) -> int:
        return hash((self.kind, self.text))

    def __repr__(self) -> str:
        return "Token(%r, %r)" % (self.kind, self.text)


@mypyc_attr(allow_interpreted_subclasses=True)
class Node:
    """
    A non-terminal symbol of the tree.  The name is the name of the rule
    whose alternative produced the node; properties maps each alias to the
    matched value, in insertion order.  A node is complete once the rule
    that built it has returned, and is not mutated afterwards.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.properties: Dict[str, PropertyValue] = {}

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Node):
            return (
                self.name == other.name
                and self.properties == other.properties
            )
        else:
            return NotImplemented

    def __repr__(self) -> str:
        return "Node(%r, %r)" % (self.name, self.properties)

    def __contains__(self, alias: str) -> bool:
        return alias in self.properties

    def has(self, alias: str) -> bool:
        return alias in self.properties

    # Visitor support.
    def accept(self, visitor: Visitor[Any]) -> None:
        visitor.visit(self)

    def walk(self, visitor: Visitor[S]) -> S:
        """Dispatch the visitor on this node, and return its state."""
        self.accept(visitor)
        return visitor.state

    # Typed accessors.
    def get(self, alias: str) -> PropertyValue:
        try:
            return self.properties[alias]
        except KeyError:
            raise TypeMismatch(
                "Node %s has no property %r" % (self.name, alias)
            ) from None

    def get_many(self, alias: str) -> List[Union[Token, Node]]:
        value = self.get(alias)
        if not isinstance(value, list):
            raise TypeMismatch(
                "Property %r of node %s is a single %s, not a sequence"
                % (alias, self.name, type(value).__name__)
            )
        return value

    def get_token(self, alias: str) -> Token:
        value = self.get(alias)
        if not isinstance(value, Token):
            raise TypeMismatch(
                "Property %r of node %s is not a Token: %r"
                % (alias, self.name, value)
            )
        return value

    def get_node(self, alias: str) -> Node:
        value = self.get(alias)
        if not isinstance(value, Node):
            raise TypeMismatch(
                "Property %r of node %s is not a Node: %r"
                % (alias, self.name, value)
            )
        return value

    def get_tokens(self, alias: str) -> List[Token]:
        result = []
        for item in self.get_many(alias):
            if not isinstance(item, Token):
                raise TypeMismatch(
                    "Property %r of node %s must be a Token sequence, "
                    "found %r" % (alias, self.name, item)
                )
            result.append(item)
        return result

    def get_nodes(self, alias: str) -> List[Node]:
        result = []
        for item in self.get_many(alias):
            if not isinstance(item, Node):
                raise TypeMismatch(
                    "Property %r of node %s must be a Node sequence, "
                    "found %r" % (alias, self.name, item)
                )
            result.append(item)
        return result

    def text(self, alias: str) -> str:
        return self.get_token(alias).text

    def pretty(self, indent: str = "", last: bool = True) -> str:
        """
        Render the subtree as indented text, one line per node or token.
        Tokens are shown with the alias they are stored under, followed
        by their kind and text; sequences get a '[]' header line.
        """
        lines = ["%s+- %s" % (indent, self.name)]
        indent += "   " if last else "|  "
        keys = list(self.properties)
        for i, key in enumerate(keys):
            value = self.properties[key]
            is_last = i == len(keys) - 1
            if isinstance(value, list):
                lines.append('%s+- "%s" []' % (indent, key))
                inner = indent + ("   " if is_last else "|  ")
                for j, item in enumerate(value):
                    lines.append(
                        _pretty_item(item, None, inner, j == len(value) - 1)
                    )
            else:
                lines.append(_pretty_item(value, key, indent, is_last))
        return "\n".join(lines)


PropertyValue = Union[Token, Node, List[Union[Token, Node]]]


def _pretty_item(
    item: Union[Token, Node], key: str | None, indent: str, last: bool
) -> str:
    if isinstance(item, Node):
        return item.pretty(indent, last)
    if key is None:
        return "%s+- %s [%s]" % (indent, item.kind, item.text)
    return '%s+- "%s" %s [%s]' % (indent, key, item.kind, item.text)
