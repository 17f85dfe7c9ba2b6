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
Visitor support.  A Visitor maps rule names to handlers, and carries a
caller-defined state object that every handler can read and update:

    visitor = Visitor([])

    def number(v, node):
        v.state.append(int(node.text("NUMBER")))

    visitor.add_visitor("number", number)
    tree.walk(visitor)

Handler lookup ignores case.  Nodes without a handler are walked by
visiting each of their properties in insertion order, so that a subtree
that no handler knows about is still traversed in full.  Handlers decide
for themselves whether and when to descend, by calling accept() on child
nodes or visit() on child values.
"""

from __future__ import annotations
from typing import Callable, Dict, Generic, TypeVar

from bnfish.ast import Node, PropertyValue

S = TypeVar("S")


class Visitor(Generic[S]):
    def __init__(self, state: S) -> None:
        self.state = state
        self._handlers: Dict[str, Callable[[Visitor[S], Node], None]] = {}

    def add_visitor(
        self, name: str, handler: Callable[[Visitor[S], Node], None]
    ) -> None:
        key = name.lower()
        if key in self._handlers:
            raise ValueError("Duplicate visitor for rule %r" % name)
        self._handlers[key] = handler

    def has_visitor(self, name: str) -> bool:
        return name.lower() in self._handlers

    def visit(self, value: PropertyValue) -> None:
        """
        Dispatch on a property value: a node goes to its handler (or the
        default traversal), a list is visited element by element, and a
        token has nothing to visit.
        """
        if isinstance(value, Node):
            handler = self._handlers.get(value.name.lower())
            if handler is None:
                self.visit_children(value)
            else:
                handler(self, value)
        elif isinstance(value, list):
            for item in value:
                self.visit(item)

    def visit_children(self, node: Node) -> None:
        for value in node.properties.values():
            self.visit(value)
