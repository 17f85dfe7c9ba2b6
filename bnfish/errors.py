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
The bnfish package implements the following exception classes:

  * BnfishError
  * GrammarError
  * ParseError
  * LexError
  * TypeMismatch
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from bnfish.ast import Token


# ============================================================================
# Begin exceptions.
#
class BnfishError(Exception):
    """
    Top-level class for all exceptions thrown within the bnfish package.
    """


class GrammarError(BnfishError):
    """
    Grammar error exception.  GrammarError arises when grammar text cannot
    be compiled (no rules, or a syntax error in the notation), when rules
    are constructed inconsistently, or when a parse is requested for a
    root rule that the grammar does not define.  A grammar is never
    partially returned.
    """


class ParseError(BnfishError):
    """
    Input could not be parsed.  ParseError arises when no alternative of
    the root rule consumes the entire token stream.  The index attribute
    holds the furthest token index reached by any attempted alternative,
    and token the token found there (None at end of input).
    """

    def __init__(
        self,
        message: str,
        index: int = 0,
        token: Optional[Token] = None,
    ) -> None:
        super().__init__(message)
        self.index = index
        self.token = token


class LexError(ParseError):
    """
    Tokenizer error.  LexError arises when no lexer rule matches at the
    current position of the input.  The offset attribute is the position
    in the input, remainder holds a truncated preview of the unmatched
    text.
    """

    def __init__(self, message: str, offset: int, remainder: str) -> None:
        super().__init__(message)
        self.offset = offset
        self.remainder = remainder


class TypeMismatch(BnfishError, TypeError):
    """
    AST accessor error.  TypeMismatch arises when a visitor asks a Node
    for a property that is absent, or that has a different shape (single
    value vs. sequence, Token vs. Node) than requested.
    """


#
# End exceptions.
# ============================================================================
