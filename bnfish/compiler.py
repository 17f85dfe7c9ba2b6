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
Compilation of grammar text.  The text is tokenized and parsed with the
meta-grammar (see bnfish.bootstrap), and the resulting tree is walked by a
visitor that emits one ProductionRule per alternative:

  * a rule whose right hand side is a single quoted literal becomes a
    lexer rule, with the literal (minus the quotes) as its pattern,
  * every other rule becomes one parser rule per '|' alternative,
  * each parenthesized group becomes a rule of its own, named
    anonymous_<n>, and is referred to by that name.  The counter belongs
    to one compilation, outer groups are numbered before inner ones, and
    numbers whose name the grammar declares itself are skipped.
"""

from __future__ import annotations
from typing import Iterable, List, Optional, Set

from bnfish.ast import Node, Token
from bnfish.bootstrap import meta_grammar
from bnfish.errors import GrammarError, LexError, ParseError
from bnfish.grammar import PARSER, Grammar, ProductionRule, Symbol
from bnfish.interfaces import GrammarSource
from bnfish.rdparser import Matcher
from bnfish.visitor import Visitor


class _CompileState:
    def __init__(self) -> None:
        self.rules: List[ProductionRule] = []
        self.current_rule = ""
        self.subrules = 0
        self.declared: Set[str] = set()

    def subrule_name(self) -> str:
        # Counter values whose name the grammar declares are skipped.
        name = "anonymous_%d" % self.subrules
        while name in self.declared:
            self.subrules += 1
            name = "anonymous_%d" % self.subrules
        self.subrules += 1
        return name


def _visit_grammar(v: Visitor[_CompileState], n: Node) -> None:
    rules = n.get_nodes("RULES")
    v.state.declared.update(rule.text("RULE") for rule in rules)
    for rule in rules:
        rule.accept(v)


def _visit_rule(v: Visitor[_CompileState], n: Node) -> None:
    name = n.text("RULE")
    expansion = n.get("EXPANSION")
    if isinstance(expansion, Token):
        pattern = expansion.text
        if len(pattern) >= 2 and pattern[0] == '"' and pattern[-1] == '"':
            pattern = pattern[1:-1]
        v.state.rules.append(ProductionRule.lexer(name, pattern))
    else:
        v.state.current_rule = name
        v.visit(expansion)


def _visit_alternatives(v: Visitor[_CompileState], n: Node) -> None:
    for sequence in n.get_nodes("ALTERNATE"):
        sequence.accept(v)


def _visit_sequence(v: Visitor[_CompileState], n: Node) -> None:
    state = v.state
    symbols = []
    for node in n.get_nodes("SYMBOL"):
        if node.has("IDENTIFIER"):
            name = node.text("IDENTIFIER")
        else:
            # Lift the group into a rule of its own.
            name = state.subrule_name()
            outer = state.current_rule
            state.current_rule = name
            node.get_node("SUBRULE").accept(v)
            state.current_rule = outer

        alias = None
        if node.has("ALIAS"):
            alias = "".join(
                [
                    token.text
                    for token in node.get_tokens("ALIAS")
                    if token.kind == "IDENTIFIER"
                ]
            )
        modifier = node.text("MODIFIER") if node.has("MODIFIER") else ""
        symbols.append(Symbol.from_modifier(name, modifier, alias))

    state.rules.append(ProductionRule(state.current_rule, PARSER, symbols))


def _compile_visitor() -> Visitor[_CompileState]:
    visitor = Visitor(_CompileState())
    visitor.add_visitor("grammar", _visit_grammar)
    visitor.add_visitor("rule", _visit_rule)
    visitor.add_visitor("alternatives", _visit_alternatives)
    visitor.add_visitor("sequence", _visit_sequence)
    return visitor


class TextGrammarSource(GrammarSource):
    """
    TextGrammarSource compiles grammar text into production rules, in the
    order the text declares them (groups ahead of the rule using them).
    """

    def __init__(self, text: str, ignored: Iterable[str] = ()) -> None:
        self.text = text
        self.ignored = frozenset(ignored)
        self._cache_rules: Optional[list[ProductionRule]] = None

    def get_ignored(self) -> frozenset[str]:
        return self.ignored

    def get_rules(self) -> list[ProductionRule]:
        if self._cache_rules is not None:
            return self._cache_rules
        meta = meta_grammar()
        try:
            tokens = meta.tokenize(self.text)
        except LexError as e:
            raise GrammarError(
                "Syntax error in grammar at offset %d near [%s...]"
                % (e.offset, e.remainder)
            ) from e
        if not tokens:
            raise GrammarError("Invalid grammar. No production rules found.")

        try:
            tree = Matcher(meta).parse("grammar", tokens)
        except ParseError as e:
            if e.token is None:
                message = "Syntax error in grammar: unexpected end of text"
            else:
                message = "Syntax error in grammar at offset %d near %r" % (
                    e.token.offset,
                    e.token.text,
                )
            raise GrammarError(message) from e

        state = tree.walk(_compile_visitor())
        self._cache_rules = state.rules
        return state.rules


def compile_grammar(
    text: str,
    ignored: Iterable[str] = (),
    *,
    ignore_case: bool = True,
) -> Grammar:
    """
    Compile grammar text.  ignored names the token kinds (typically
    comments) that the scanner drops from the input.
    """
    return Grammar.from_source(
        TextGrammarSource(text, ignored), ignore_case=ignore_case
    )
