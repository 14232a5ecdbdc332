# lexer.py

"""
Tokenizer for integer arithmetic expressions.

Produces INTEGER tokens for runs of decimal digits and one token per operator
or parenthesis. Tokens do not copy their text: they record an offset and a
length into the source held by the TokenList that owns them.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List

from .errors import LexError

logger = logging.getLogger(__name__)


# ---------------------------
# Tokens
# ---------------------------

class TokenType:
    """Enumeration of token types."""
    END = 'END'
    INTEGER = 'INTEGER'
    PLUS = 'PLUS'
    MINUS = 'MINUS'
    STAR = 'STAR'
    SLASH = 'SLASH'
    PERCENT = 'PERCENT'
    CARET = 'CARET'
    LPAREN = 'LPAREN'
    RPAREN = 'RPAREN'


_SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '%': TokenType.PERCENT,
    '^': TokenType.CARET,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
}

# '\0' is accepted as whitespace so NUL-terminated input lexes the same way.
_WHITESPACE = ' \t\r\0'
_DIGITS = '0123456789'


@dataclass(frozen=True)
class Token:
    """A token: its type and the span of source text it covers."""
    type: str
    offset: int
    length: int
    line: int

    def __repr__(self) -> str:
        return f"Token({self.type}, offset={self.offset}, length={self.length})"


class TokenList:
    """
    Ordered tokens plus the source text they point into.

    The last token is always END, even for empty input.
    """

    def __init__(self, source: str, tokens: List[Token]):
        self.source = source
        self.tokens = tokens

    def lexeme(self, token: Token) -> str:
        """Return the text covered by ``token``."""
        return self.source[token.offset:token.offset + token.length]

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def types(self) -> List[str]:
        return [token.type for token in self.tokens]


# ---------------------------
# Lexer
# ---------------------------

class Lexer:
    """Single left-to-right scanner over a private copy of the input."""

    def __init__(self, text: str):
        # str is immutable, so holding the reference is already a private copy.
        self.text = text
        self.pos = 0
        self.line = 1
        self.tokens: List[Token] = []

    def _add(self, type_: str, offset: int, length: int) -> None:
        self.tokens.append(Token(type_, offset, length, self.line))

    def _read_integer(self) -> None:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in _DIGITS:
            self.pos += 1
        self._add(TokenType.INTEGER, start, self.pos - start)

    def tokenize(self) -> TokenList:
        """
        Convert the input into a TokenList.

        Raises:
            LexError: on any character that is not whitespace, a digit,
                an operator or a parenthesis.
        """
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == '\n':
                self.line += 1
                self.pos += 1
            elif ch in _WHITESPACE:
                self.pos += 1
            elif ch in _DIGITS:
                self._read_integer()
            elif ch in _SINGLE_CHAR_TOKENS:
                self._add(_SINGLE_CHAR_TOKENS[ch], self.pos, 1)
                self.pos += 1
            else:
                raise LexError(ch, self.line)
        self._add(TokenType.END, len(text), 0)
        return TokenList(text, self.tokens)


def tokenize(text: str) -> TokenList:
    """Tokenize ``text``; see :class:`Lexer`."""
    tokens = Lexer(text).tokenize()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Tokens: {format_tokens(tokens)}")
    return tokens


def format_tokens(tokens: TokenList) -> str:
    """Render tokens as ``(INTEGER: 12), (PLUS: +), (END: )`` for debugging."""
    return ", ".join(f"({token.type}: {tokens.lexeme(token)})" for token in tokens)
