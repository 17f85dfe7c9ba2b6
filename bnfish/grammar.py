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
This module contains classes that are used in the specification of grammars.

A grammar is an ordered collection of production rules.  Each rule is one
alternative for a name; rules that share a name form the ordered set of
alternatives for that name, and the first alternative that matches wins.
Lexer rules have a single symbol whose name is a regular expression, and
define the token kinds.  Parser rules have a sequence of symbols, each of
which refers to a lexer or parser rule by name:

    NUMBER   = "\\d+";
    PLUS     = "\\+";
    sum      = TERMS:NUMBER, TERMS:(PLUS!, :NUMBER)*;

A symbol can carry an alias (the property name its match is stored under
in the AST node, default the symbol name; the empty alias makes the match
replace the node altogether) and one modifier:

    ? : optional
    * : optional, repeatable
    + : repeatable
    ! : matched but never stored in the tree

A stored symbol with the empty alias can only be combined with ignored
symbols and other empty-alias symbols, since its match stands in for the
whole node; 'r = :X, EXTRA:Y;' is rejected with a GrammarError.
"""

from __future__ import annotations
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Iterable,
    List,
    Optional,
    Tuple,
)

import re
from bnfish.ast import Node, Token
from bnfish.errors import GrammarError
from bnfish.rdparser import DEFAULT_MAX_DEPTH, Matcher
from bnfish.scanner import Scanner

if TYPE_CHECKING:
    from bnfish.interfaces import GrammarSource


# Rule kinds.
LEXER = "lexer"
PARSER = "parser"

# Modifier -> (optional, repeatable, ignore).
MODIFIERS: Dict[str, Tuple[bool, bool, bool]] = {
    "": (False, False, False),
    "?": (True, False, False),
    "*": (True, True, False),
    "+": (False, True, False),
    "!": (False, False, True),
}


class Symbol:
    """
    One element of the right hand side of a parser rule.  The name refers
    to a lexer rule (token kind) or a parser rule.  For lexer rules, the
    only symbol holds the regular expression in its name.
    """

    shorthand_re = re.compile(
        r"(?:([A-Za-z_][\w']*)?(:))?([A-Za-z_][\w']*)([?*+!]?)$"
    )

    def __init__(
        self,
        name: str,
        alias: Optional[str] = None,
        optional: bool = False,
        repeatable: bool = False,
        ignore: bool = False,
    ) -> None:
        self.name = name
        self.alias = name if alias is None else alias
        self.optional = optional
        self.repeatable = repeatable
        self.ignore = ignore

    @classmethod
    def from_modifier(
        cls, name: str, modifier: str = "", alias: Optional[str] = None
    ) -> Symbol:
        if modifier not in MODIFIERS:
            raise GrammarError(
                "Invalid modifier %r for symbol %s" % (modifier, name)
            )
        optional, repeatable, ignore = MODIFIERS[modifier]
        return cls(name, alias, optional, repeatable, ignore)

    @classmethod
    def parse(cls, spec: str) -> Symbol:
        """
        Build a symbol from its shorthand, [alias]:name[modifier], e.g.
        'TERMS:term*', ':factor' or 'LPAREN!'.
        """
        m = Symbol.shorthand_re.match(spec.strip())
        if m is None:
            raise GrammarError("Invalid symbol specification: %r" % spec)
        alias = None
        if m.group(2):
            alias = m.group(1) or ""
        return cls.from_modifier(m.group(3), m.group(4), alias)

    @property
    def modifier(self) -> str:
        if self.ignore:
            return "!"
        if self.optional:
            return "*" if self.repeatable else "?"
        return "+" if self.repeatable else ""

    def _key(self) -> Tuple[str, str, bool, bool, bool]:
        return (
            self.name,
            self.alias,
            self.optional,
            self.repeatable,
            self.ignore,
        )

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Symbol):
            return self._key() == other._key()
        else:
            return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        alias = "%s:" % self.alias if self.alias != self.name else ""
        return "%s%s%s" % (alias, self.name, self.modifier)

    __str__ = __repr__


class ProductionRule:
    """
    One alternative of a named rule.  Several ProductionRule instances may
    share a name; the grammar tries them in declaration order.
    """

    def __init__(
        self,
        name: str,
        kind: str,
        symbols: Iterable[Symbol],
    ) -> None:
        assert kind in [LEXER, PARSER]

        self.name = name
        self.kind = kind
        self.symbols = tuple(symbols)
        if not self.symbols:
            raise GrammarError("Production rule %s has no symbols" % name)
        if kind == LEXER and len(self.symbols) != 1:
            raise GrammarError(
                "Lexer rule %s must have exactly one symbol" % name
            )

        # Aliases whose matches accumulate into a list: those of repeatable
        # symbols, and those shared by several stored symbols.
        seen: set[str] = set()
        enumerated: set[str] = set()
        for symbol in self.symbols:
            if symbol.ignore:
                continue
            if symbol.repeatable or symbol.alias in seen:
                enumerated.add(symbol.alias)
            seen.add(symbol.alias)
        self.enumerated = frozenset(enumerated)
        if "" in seen and len(seen) > 1:
            raise GrammarError(
                "Production rule %s mixes the empty alias with named "
                "properties: %s" % (name, ", ".join(sorted(seen - {""})))
            )

    @classmethod
    def lexer(cls, name: str, pattern: str) -> ProductionRule:
        return cls(name, LEXER, [Symbol(pattern)])

    @classmethod
    def parser(cls, name: str, *symbols: Symbol | str) -> ProductionRule:
        return cls(
            name,
            PARSER,
            [
                Symbol.parse(sym) if isinstance(sym, str) else sym
                for sym in symbols
            ],
        )

    @property
    def pattern(self) -> str:
        assert self.kind == LEXER
        return self.symbols[0].name

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ProductionRule):
            return (self.name, self.kind, self.symbols) == (
                other.name,
                other.kind,
                other.symbols,
            )
        else:
            return NotImplemented

    def __hash__(self) -> int:
        return hash((self.name, self.kind, self.symbols))

    def __repr__(self) -> str:
        if self.kind == LEXER:
            return '%s = "%s";' % (self.name, self.pattern)
        return "%s = %s;" % (
            self.name,
            ", ".join(["%r" % sym for sym in self.symbols]),
        )


class Grammar:
    """
    A compiled grammar.  The rules are grouped once, at construction time,
    into the ordered lexer rules and the ordered alternatives of every
    parser rule name; the grammar is read-only afterwards, so any number of
    parses may share it.

    ignored : Token kinds that the scanner matches but drops, e.g. comments.

    ignore_case : Match lexer patterns case-insensitively (the default).
    """

    def __init__(
        self,
        rules: Iterable[ProductionRule],
        ignored: Iterable[str] = (),
        *,
        ignore_case: bool = True,
    ) -> None:
        self._rules = tuple(rules)
        if not self._rules:
            raise GrammarError("Invalid grammar. No production rules found.")
        self._ignored = frozenset(ignored)
        self._ignore_case = ignore_case

        lexer_rules = []
        alternatives: Dict[str, List[ProductionRule]] = {}
        for rule in self._rules:
            if rule.kind == LEXER:
                lexer_rules.append(rule)
            else:
                alternatives.setdefault(rule.name, []).append(rule)
        self._lexer_rules = tuple(lexer_rules)
        self._token_kinds = frozenset([rule.name for rule in lexer_rules])
        self._alternatives = {
            name: tuple(alts) for name, alts in alternatives.items()
        }

        clashes = sorted(self._token_kinds.intersection(self._alternatives))
        if clashes:
            raise GrammarError(
                "Names used for both lexer and parser rules: %s"
                % ", ".join(clashes)
            )

        undefined = sorted(
            {
                symbol.name
                for rule in self._rules
                if rule.kind == PARSER
                for symbol in rule.symbols
                if symbol.name not in self._token_kinds
                and symbol.name not in self._alternatives
            }
        )
        if undefined:
            raise GrammarError(
                "Undefined names used in parser rules: %s"
                % ", ".join(undefined)
            )

        self._scanner = Scanner(self._lexer_rules, self._ignored, ignore_case)

    @classmethod
    def from_source(
        cls, source: GrammarSource, *, ignore_case: bool = True
    ) -> Grammar:
        return cls(
            source.get_rules(), source.get_ignored(), ignore_case=ignore_case
        )

    @property
    def rules(self) -> Tuple[ProductionRule, ...]:
        return self._rules

    @property
    def ignored(self) -> frozenset[str]:
        return self._ignored

    @property
    def ignore_case(self) -> bool:
        return self._ignore_case

    @property
    def lexer_rules(self) -> Tuple[ProductionRule, ...]:
        return self._lexer_rules

    def alternatives_of(self, name: str) -> Tuple[ProductionRule, ...]:
        """The parser alternatives for name, in declaration order."""
        return self._alternatives.get(name, ())

    def is_token_kind(self, name: str) -> bool:
        return name in self._token_kinds

    def has_rule(self, name: str) -> bool:
        return name in self._token_kinds or name in self._alternatives

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return "\n".join(["%r" % rule for rule in self._rules])

    def tokenize(self, text: str) -> List[Token]:
        return self._scanner.scan(text)

    def parse(
        self,
        root: str,
        text: str,
        *,
        verbose: bool = False,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> Node:
        """
        Tokenize text and match it against the rule named root.  The whole
        of the input has to be consumed.
        """
        if not self.has_rule(root):
            raise GrammarError("Production rule %s not found." % root)
        tokens = self.tokenize(text)
        matcher = Matcher(self, verbose=verbose, max_depth=max_depth)
        return matcher.parse(root, tokens)
