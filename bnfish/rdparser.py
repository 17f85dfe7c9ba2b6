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
Backtracking recursive-descent matcher.

Matching a rule alternative pushes a frame (the node being built) and
matches its symbols in order; if one of them fails, the cursor is wound
back to where the alternative started and the frame is discarded, so the
caller can try the next alternative from the same position.  Matching a
symbol is a loop: a token of that kind, or else the first alternative of
the rule of that name that matches, is fed into the node on top of the
stack, and repeatable symbols go around again.  Repetition is greedy, and
a rule that has returned successfully is never retried to satisfy a later
symbol, so grammars have to be ordered or left-factored accordingly.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence

import contextlib
import sys
from bnfish.ast import Node, PropertyValue, Token
from bnfish.errors import GrammarError, ParseError

if TYPE_CHECKING:
    from bnfish.grammar import Grammar, ProductionRule, Symbol

# Rule frames that may be nested before a parse is abandoned.
DEFAULT_MAX_DEPTH = 1000

# Interpreter frames per nested rule (_match_rule, _match_symbol, _attempt).
FRAMES_PER_RULE = 3

# The interpreter recursion limit is never raised past this while matching.
RECURSION_CEILING = 10000


@contextlib.contextmanager
def _recursion_headroom(max_depth: int) -> Iterator[None]:
    """
    Raise the interpreter recursion limit far enough for max_depth nested
    rules, up to RECURSION_CEILING, and restore it afterwards.
    """
    old_limit = sys.getrecursionlimit()
    wanted = min(max_depth * FRAMES_PER_RULE + 500, RECURSION_CEILING)
    if wanted <= old_limit:
        yield
        return
    sys.setrecursionlimit(wanted)
    try:
        yield
    finally:
        sys.setrecursionlimit(old_limit)


class _Frame:
    """
    An alternative being matched: the node under construction, and the
    value that replaces it when a symbol with the empty alias matched.
    """

    def __init__(self, rule: ProductionRule) -> None:
        self.rule = rule
        self.node = Node(rule.name)
        self.value: Optional[PropertyValue] = None

    def result(self) -> PropertyValue:
        if self.value is None:
            return self.node
        return self.value


class ParseContext:
    """
    State of one parse: the token cursor, the furthest position it ever
    reached, and the stack of alternatives being matched (innermost last).
    Each parse owns its own context, which is what makes it safe to share a
    Grammar between parses.
    """

    def __init__(self, grammar: Grammar, tokens: Sequence[Token]) -> None:
        self.grammar = grammar
        self.tokens = tokens
        self._index = 0
        self._best_index = 0
        self._frames: List[_Frame] = []

    @property
    def index(self) -> int:
        return self._index

    @index.setter
    def index(self, value: int) -> None:
        self._index = value
        if value > self._best_index:
            self._best_index = value

    @property
    def best_index(self) -> int:
        """The furthest token index reached by any attempt so far."""
        return self._best_index

    @property
    def eof(self) -> bool:
        return self._index >= len(self.tokens)

    @property
    def depth(self) -> int:
        return len(self._frames)

    def token_at(self, index: int) -> Optional[Token]:
        if index < len(self.tokens):
            return self.tokens[index]
        return None

    def peek(self) -> Optional[Token]:
        return self.token_at(self._index)

    def try_token(self, kind: str) -> Optional[Token]:
        """
        Consume and return the next token if it is of the given kind.
        """
        token = self.peek()
        if token is None or token.kind != kind:
            return None
        self.index += 1
        return token

    def push(self, rule: ProductionRule) -> _Frame:
        frame = _Frame(rule)
        self._frames.append(frame)
        return frame

    def pop(self) -> _Frame:
        return self._frames.pop()

    def update_result(self, alias: str, value: PropertyValue) -> None:
        """
        Store a matched value in the innermost frame.  Aliases that the
        frame's alternative enumerates accumulate into a list (lists being
        fed in are spliced); any other alias is set.  The empty alias
        stands for the frame's result itself.
        """
        frame = self._frames[-1]
        if alias in frame.rule.enumerated:
            if alias:
                seq = frame.node.properties.setdefault(alias, [])
            else:
                if frame.value is None:
                    frame.value = []
                seq = frame.value
            assert isinstance(seq, list)
            if isinstance(value, list):
                seq.extend(value)
            else:
                seq.append(value)
        elif alias:
            frame.node.properties[alias] = value
        else:
            frame.value = value


class Matcher:
    """
    Ordered-choice matcher.  The Matcher uses a Grammar in order to turn
    the tokens fed to parse() into a tree.  With verbose set, every rule
    attempt and its outcome are printed.
    """

    def __init__(
        self,
        grammar: Grammar,
        verbose: bool = False,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._grammar = grammar
        self.verbose = verbose
        self.max_depth = max_depth

    @property
    def grammar(self) -> Grammar:
        return self._grammar

    def parse(self, root: str, tokens: Sequence[Token]) -> Node:
        """
        Match the whole token sequence against the rule named root.  Each
        alternative of root is tried from the first token; the first one
        that matches and leaves no token unconsumed is the result.
        """
        context = ParseContext(self._grammar, tokens)
        rules = self._grammar.alternatives_of(root)
        if not rules:
            if self._grammar.is_token_kind(root):
                return self._parse_token(root, context)
            raise GrammarError("Production rule %s not found." % root)

        with _recursion_headroom(self.max_depth):
            try:
                return self._parse_rules(root, rules, context)
            except RecursionError as e:
                raise ParseError(
                    "Maximum nesting depth exceeded near token #%d"
                    % context.index,
                    context.index,
                    context.peek(),
                ) from e

    def _parse_rules(
        self,
        root: str,
        rules: Sequence[ProductionRule],
        context: ParseContext,
    ) -> Node:
        for rule in rules:
            context.index = 0
            result = self._match_rule(context, rule)
            if result is not None and context.eof:
                if self.verbose:
                    print("   --> accept %r" % rule)
                if isinstance(result, Node):
                    return result
                # The root passed its match through; keep a node on top.
                node = Node(root)
                node.properties[root] = result
                return node
        raise self._error(context)

    def _parse_token(self, kind: str, context: ParseContext) -> Node:
        token = context.try_token(kind)
        if token is None or not context.eof:
            raise self._error(context)
        node = Node(kind)
        node.properties[kind] = token
        return node

    def _error(self, context: ParseContext) -> ParseError:
        index = context.best_index
        token = context.token_at(index)
        if token is None:
            message = (
                "Input cannot be parsed: unexpected end of input "
                "after token #%d" % index
            )
        else:
            message = "Input cannot be parsed near token #%d %s %r" % (
                index,
                token.kind,
                token.text,
            )
        return ParseError(message, index, token)

    def _match_rule(
        self, context: ParseContext, rule: ProductionRule
    ) -> Optional[PropertyValue]:
        if context.depth >= self.max_depth:
            raise ParseError(
                "Maximum nesting depth of %d rules exceeded" % self.max_depth,
                context.index,
                context.peek(),
            )
        start = context.index
        frame = context.push(rule)
        if self.verbose:
            self._trace(context, "RULE %r" % rule)
        try:
            for symbol in rule.symbols:
                if not self._match_symbol(context, symbol):
                    context.index = start
                    if self.verbose:
                        self._trace(context, "   --> fail %s" % rule.name)
                    return None
        finally:
            context.pop()
        if self.verbose:
            self._trace(context, "   --> match %s" % rule.name)
        return frame.result()

    def _match_symbol(self, context: ParseContext, symbol: Symbol) -> bool:
        if symbol.optional and context.eof:
            return True
        start = context.index
        matched = False
        while True:
            before = context.index
            value = self._attempt(context, symbol)
            if value is None:
                if matched:
                    return True
                context.index = start
                return symbol.optional
            matched = True
            if not symbol.ignore:
                context.update_result(symbol.alias, value)
            # Stop repeating once an iteration consumes nothing.
            if not symbol.repeatable or context.index == before:
                return True

    def _attempt(
        self, context: ParseContext, symbol: Symbol
    ) -> Optional[PropertyValue]:
        token = context.try_token(symbol.name)
        if token is not None:
            return token
        for rule in self._grammar.alternatives_of(symbol.name):
            result = self._match_rule(context, rule)
            if result is not None:
                return result
        return None

    def _trace(self, context: ParseContext, message: str) -> None:
        token = context.peek()
        if token is None:
            next_token = "<EOF>"
        else:
            next_token = "%s %r" % (token.kind, token.text)
        print(
            "%s%s [#%d %s]"
            % ("  " * context.depth, message, context.index, next_token)
        )
