"""
Lexical analyzer for the Ember language.

This module turns raw source text into a lazy stream of tokens:

Classes:
    CharacterStream: Character cursor over the source with line/column tracking.
    Token: A single lexical unit, either an atom (literal or identifier) or an operator.
    Lexer: Pull-based tokenizer with one token of lookahead.
    LexError: Raised when a character fits no lexical category.

Features:
    - Skips whitespace and line comments (`#` to end of line), in any interleaving
    - Recognizes:
        * Numbers (`\\d+(\\.\\d+)?`, no sign, no exponent)
        * Identifiers, the `true`/`false`/`unit` literals, and reserved keywords
        * Text literals with backslash escapes (raw lexeme kept, quotes included)
        * Punctuation operators, longest match first for `==`, `>=`, `<=`

Raises:
    LexError: For a character outside every category or an unterminated text
        literal. Lexical failure is fatal; the cursor cannot move past it.

Example:
    >>> lexer = Lexer(CharacterStream("x + 1"))
    >>> lexer.peek()
    Token(id, x)
    >>> [tok.text for tok in lexer]
    ['x', '+', '1']

Exports:
    - CharacterStream
    - Token
    - Lexer
    - LexError
    - tokenize
"""

import logging
import re
from collections.abc import Iterator
from typing import Any

from ember.ember_constants import (
    BOOL_WORDS,
    COMMENT_MARKER,
    KEYWORDS,
    MULTI_CHAR_OPERATORS,
    NUMBER_PATTERN,
    OPERATOR_KIND,
    PUNCTUATION,
    TEXT_PATTERN,
    UNIT_WORD,
)

logger = logging.getLogger(__name__)


class LexError(SyntaxError):
    """Fatal lexical failure.

    Attributes:
        char (str): The character the lexer could not classify.
        line (int): 1-based line of the character.
        col (int): 1-based column of the character.
    """

    def __init__(self, message: str, char: str, line: int, col: int) -> None:
        super().__init__(f"{message} at line {line}, col {col}")
        self.char = char
        self.line = line
        self.col = col


class CharacterStream:
    """
    A cursor over source text with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def advance(self, count: int) -> str:
        """Consumes `count` characters and returns them as one string."""
        return "".join(self.next() for _ in range(count))

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def startswith(self, text: str) -> bool:
        return self.source.startswith(text, self.position)

    def match(self, pattern: re.Pattern[str]) -> str | None:
        """Matches `pattern` at the current position without advancing.

        Returns:
            str | None: The matched text, or None if the pattern does not match here.
        """
        m = pattern.match(self.source, self.position)
        return m.group(0) if m else None

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """A single lexical token.

    Ember has two token variants sharing this class:

    - atoms, whose `kind` is one of ``number``, ``bool``, ``unit``, ``text``, ``id``;
    - operators (punctuation and keywords), whose `kind` is ``op``.

    Attributes:
        kind (str): Atom kind, or ``op`` for operators.
        text (str): The exact lexeme as it appears in the source.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, kind: str, text: str, line: int = 0, col: int = 0):
        self.kind = kind
        self.text = text
        self.line = line
        self.col = col

    @classmethod
    def operator(cls, text: str, line: int = 0, col: int = 0) -> "Token":
        return cls(OPERATOR_KIND, text, line, col)

    @property
    def is_operator(self) -> bool:
        return self.kind == OPERATOR_KIND

    @property
    def is_atom(self) -> bool:
        return self.kind != OPERATOR_KIND

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.text})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.kind == other.kind
            and self.text == other.text
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.text, self.line, self.col))


def _is_ident_start(ch: str) -> bool:
    return ch.isidentifier()


def _is_ident_continue(ch: str) -> bool:
    return ch != "" and f"_{ch}".isidentifier()


class Lexer:
    """Pull-based tokenizer for Ember source text.

    Tokens are scanned on demand. `peek` fills a single-token buffer that the
    following `next` hands out, so both always agree on the upcoming token.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self._lookahead: Token | None = None
        self._buffered = False

    def peek(self) -> Token | None:
        """Returns the next token without consuming it, or None at end of input."""
        if not self._buffered:
            self._lookahead = self.next_token()
            self._buffered = True
        return self._lookahead

    def next(self) -> Token | None:
        """Consumes and returns the next token, or None at end of input."""
        if self._buffered:
            tok = self._lookahead
            self._lookahead = None
            self._buffered = False
            return tok
        return self.next_token()

    def __iter__(self) -> Iterator[Token]:
        while (tok := self.next()) is not None:
            yield tok

    def skip_whitespace(self) -> None:
        """Skips whitespace and comments; the two may alternate freely."""
        while not self.stream.end_of_file():
            ch = self.stream.peek()
            if ch.isspace():
                self.stream.next()
            elif ch == COMMENT_MARKER:
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        """Advances through the stream until the end of a comment line."""
        while not self.stream.end_of_file() and self.stream.peek() != "\n":
            self.stream.next()

    def match_operator(self) -> str | None:
        """Matches a punctuation operator, trying multi-character operators first."""
        for op in MULTI_CHAR_OPERATORS:
            if self.stream.startswith(op):
                return op
        if self.stream.peek() in PUNCTUATION:
            return self.stream.peek()
        return None

    def next_token(self) -> Token | None:
        """Scans the next token directly from the stream, bypassing the lookahead buffer.

        Returns:
            Token | None: The scanned token, or None at end of input.

        Raises:
            LexError: If the upcoming character cannot start any token.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return None

        ch = self.stream.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Number
        number = self.stream.match(NUMBER_PATTERN)
        if number is not None:
            tok = Token("number", self.stream.advance(len(number)), line, col)

        # 2. Identifier, literal word or keyword
        elif _is_ident_start(ch):
            word = self.stream.next()
            while _is_ident_continue(self.stream.peek()):
                word += self.stream.next()
            if word in BOOL_WORDS:
                tok = Token("bool", word, line, col)
            elif word == UNIT_WORD:
                tok = Token("unit", word, line, col)
            elif word in KEYWORDS:
                tok = Token.operator(word, line, col)
            else:
                tok = Token("id", word, line, col)

        # 3. Text literal
        elif ch == '"':
            text = self.stream.match(TEXT_PATTERN)
            if text is None:
                raise LexError("Unterminated text literal", ch, line, col)
            tok = Token("text", self.stream.advance(len(text)), line, col)

        # 4. Punctuation operator
        elif (op := self.match_operator()) is not None:
            tok = Token.operator(self.stream.advance(len(op)), line, col)

        # 5. Anything else cannot be lexed
        else:
            raise LexError(f"Bad character {ch!r}", ch, line, col)

        logger.debug("token: %r", tok.text)
        return tok


def tokenize(source: str) -> list[Token]:
    """Scans the whole source eagerly and returns its tokens."""
    return list(Lexer(CharacterStream(source)))


__all__ = ["CharacterStream", "LexError", "Lexer", "Token", "tokenize"]
