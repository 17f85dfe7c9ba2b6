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
The scanner turns input text into tokens, using the lexer rules of a
grammar.  At every position the lexer rules are tried in declaration
order, and the first one that matches wins (first match, not longest
match, so rule order matters).  Whitespace in front of a token is
skipped, and input that only has whitespace left is done.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from re import IGNORECASE, compile as re_compile, error as re_error
from bnfish.ast import Token
from bnfish.errors import GrammarError, LexError

if TYPE_CHECKING:
    from re import Match
    from bnfish.grammar import ProductionRule

# Longest slice of unmatched input quoted in a LexError.
PREVIEW_LENGTH = 50


class Scanner:
    def __init__(
        self,
        rules: Iterable[ProductionRule],
        ignored: Iterable[str] = (),
        ignore_case: bool = True,
    ) -> None:
        flags = IGNORECASE if ignore_case else 0
        self.regexes = []
        for rule in rules:
            try:
                rgx = re_compile(r"\s*(%s)" % rule.pattern, flags)
            except re_error as e:
                raise GrammarError(
                    "Invalid pattern for lexer rule %s: %s" % (rule.name, e)
                ) from e
            self.regexes.append((rgx, rule.name))
        self.ignored = frozenset(ignored)
        self.whitespace = re_compile(r"\s*\Z")

    def _match(
        self, string: str, idx: int
    ) -> Optional[Tuple[str, Match[str]]]:
        for rgx, kind in self.regexes:
            m = rgx.match(string, idx)
            # An empty match would never advance.
            if m is not None and m.end(1) > m.start(1):
                return kind, m
        return None

    def scan(self, string: str) -> List[Token]:
        tokens = []
        idx = 0
        while idx < len(string):
            if self.whitespace.match(string, idx):
                break
            match = self._match(string, idx)
            if match is None:
                offset = len(string) - len(string[idx:].lstrip())
                remainder = string[offset:offset + PREVIEW_LENGTH]
                raise LexError(
                    "Syntax error at offset %d near [%s...]"
                    % (offset, remainder),
                    offset,
                    remainder,
                )
            kind, m = match
            if kind not in self.ignored:
                tokens.append(Token(kind, m.group(1), m.start(1)))
            idx = m.end()
        return tokens
