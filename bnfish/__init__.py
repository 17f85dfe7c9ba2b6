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
The bnfish package compiles grammars written in a small BNF-like notation,
and uses them to turn text into abstract syntax trees:

    import bnfish

    grammar = bnfish.compile_grammar(r'''
        /* Lexer rules: a name and a quoted regular expression. */
        NUMBER = "\\d+";
        PLUS   = "\\+";

        /* Parser rules. */
        sum    = TERMS:NUMBER, TERMS:(PLUS!, :NUMBER)*;
    ''')
    tree = grammar.parse("sum", "1 + 2 + 3")
    [token.text for token in tree.get_tokens("TERMS")]  # ['1', '2', '3']

Lexer rules are tried in declaration order at each position of the input,
and the first one that matches produces the next token (first match, not
longest match).  Parser rules are matched by a backtracking recursive
descent: alternatives of a rule are tried in declaration order and the
first one that matches is used; repetition is greedy.  Left-recursive
rules are not supported.

Notation summary:

    name = "pattern";              Lexer rule.
    name = a, b | c;               Parser rule; ',' concatenates and '|'
                                   separates alternatives.
    ALIAS:name                     Store the match under ALIAS.
    :name                          Let the match stand in for the node.
    name?  name*  name+  name!     Optional, zero or more, one or more,
                                   matched but not stored.
    ( ... )                        Group, compiled to a rule of its own.
    /* ... */                      Comment.

The tree is made of Node objects (one per matched parser rule alternative)
and Token objects.  Properties of a node hold a single Token or Node, or a
list of them when the alias is repeatable or used more than once in the
alternative.  Trees are consumed with a Visitor, which maps rule names to
handlers and threads a caller-defined state object through them.

The main entry points are:

  * compile_grammar(text) -> Grammar
  * Grammar.parse(root, text) -> Node
  * Node.accept(visitor), Node.walk(visitor)
"""

from __future__ import annotations


__all__ = (
    "BnfishError",
    "Grammar",
    "GrammarError",
    "GrammarSource",
    "LEXER",
    "LexError",
    "Matcher",
    "MetaGrammarSource",
    "Node",
    "PARSER",
    "ParseContext",
    "ParseError",
    "ProductionRule",
    "Scanner",
    "Symbol",
    "TextGrammarSource",
    "Token",
    "TypeMismatch",
    "Visitor",
    "__version__",
    "compile_grammar",
    "meta_grammar",
)

from bnfish._version import __version__
from bnfish.ast import Node, Token
from bnfish.errors import (
    BnfishError,
    GrammarError,
    LexError,
    ParseError,
    TypeMismatch,
)
from bnfish.grammar import LEXER, PARSER, Grammar, ProductionRule, Symbol
from bnfish.interfaces import GrammarSource
from bnfish.bootstrap import MetaGrammarSource, meta_grammar
from bnfish.compiler import TextGrammarSource, compile_grammar
from bnfish.rdparser import Matcher, ParseContext
from bnfish.scanner import Scanner
from bnfish.visitor import Visitor
