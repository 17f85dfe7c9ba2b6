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
The meta-grammar: the rules of the grammar notation itself, built directly
as ProductionRule objects so that compiling grammar text does not depend
on compiling grammar text.  Written in its own notation, it reads:

    COMMENT       = "/\\*[\\s\\S]*?\\*/";
    EQ            = "=";
    COMMA         = "[,]";
    COLON         = "[:]";
    SEMICOLON     = ";";
    MODIFIER      = "[?!+*]";
    OR            = "[|]";
    QUOTEDLITERAL = "\\"(?:[^\\"\\\\]|\\\\.)*\\"";
    IDENTIFIER    = "[a-zA-Z_][a-zA-Z0-9_']*";
    LPAREN        = "\\(";
    RPAREN        = "\\)";

    alias             = :IDENTIFIER?, :COLON;
    subrule           = LPAREN!, :alternatives, RPAREN!;
    symbol            = ALIAS:alias?, SUBRULE:subrule, MODIFIER:MODIFIER?;
    symbol            = ALIAS:alias?, IDENTIFIER:IDENTIFIER,
                        MODIFIER:MODIFIER?;
    sequence          = SYMBOL:symbol, SYMBOL:sequence_tail*;
    sequence_tail     = COMMA!, :symbol;
    alternatives      = ALTERNATE:sequence, ALTERNATE:alternatives_tail*;
    alternatives_tail = OR!, :sequence;
    rule              = RULE:IDENTIFIER, EQ!, EXPANSION:QUOTEDLITERAL,
                        SEMICOLON!;
    rule              = RULE:IDENTIFIER, EQ!, EXPANSION:alternatives,
                        SEMICOLON!;
    grammar           = RULES:rule+;

COMMENT tokens are ignored.
"""

from __future__ import annotations
from typing import Optional

from bnfish.grammar import Grammar, ProductionRule
from bnfish.interfaces import GrammarSource

IGNORED = frozenset(["COMMENT"])


class MetaGrammarSource(GrammarSource):
    def get_rules(self) -> list[ProductionRule]:
        lexer = ProductionRule.lexer
        parser = ProductionRule.parser
        return [
            # Lexer rules.
            lexer("COMMENT", r"/\*[\s\S]*?\*/"),
            lexer("EQ", "="),
            lexer("COMMA", "[,]"),
            lexer("COLON", "[:]"),
            lexer("SEMICOLON", ";"),
            lexer("MODIFIER", "[?!+*]"),
            lexer("OR", "[|]"),
            lexer("QUOTEDLITERAL", r'"(?:[^"\\]|\\.)*"'),
            lexer("IDENTIFIER", r"[a-zA-Z_][a-zA-Z0-9_']*"),
            lexer("LPAREN", r"\("),
            lexer("RPAREN", r"\)"),
            # Parser rules.
            parser("alias", ":IDENTIFIER?", ":COLON"),
            parser("subrule", "LPAREN!", ":alternatives", "RPAREN!"),
            parser(
                "symbol",
                "ALIAS:alias?",
                "SUBRULE:subrule",
                "MODIFIER:MODIFIER?",
            ),
            parser(
                "symbol",
                "ALIAS:alias?",
                "IDENTIFIER:IDENTIFIER",
                "MODIFIER:MODIFIER?",
            ),
            parser("sequence", "SYMBOL:symbol", "SYMBOL:sequence_tail*"),
            parser("sequence_tail", "COMMA!", ":symbol"),
            parser(
                "alternatives",
                "ALTERNATE:sequence",
                "ALTERNATE:alternatives_tail*",
            ),
            parser("alternatives_tail", "OR!", ":sequence"),
            # Lexer rule definition first: a quoted literal on its own.
            parser(
                "rule",
                "RULE:IDENTIFIER",
                "EQ!",
                "EXPANSION:QUOTEDLITERAL",
                "SEMICOLON!",
            ),
            parser(
                "rule",
                "RULE:IDENTIFIER",
                "EQ!",
                "EXPANSION:alternatives",
                "SEMICOLON!",
            ),
            parser("grammar", "RULES:rule+"),
        ]

    def get_ignored(self) -> frozenset[str]:
        return IGNORED


_meta_grammar: Optional[Grammar] = None


def meta_grammar() -> Grammar:
    """The compiled meta-grammar.  It is built once, and shared."""
    global _meta_grammar
    grammar = _meta_grammar
    if grammar is None:
        grammar = _meta_grammar = Grammar.from_source(MetaGrammarSource())
    return grammar
