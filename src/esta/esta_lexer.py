"""
Lexical analyzer for the Esta scripting language.

This module provides the token-stream collaborator consumed by the parser:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Functions:
    tokenize: Lexes a whole source string into a list ending with an EOF token.

Features:
    - Skips whitespace and single-line comments (`#`)
    - Longest-match recognition of operators and punctuation
    - Recognizes:
        * Identifiers and keywords (`True`/`False` as BOOLEAN, `Nil` as NIL)
        * Decimal integer literals (digits only, converted later by the parser)
        * Double-quoted strings with no escapes; the token keeps its quotes

Raises:
    LexicalError: On unknown characters or unterminated strings.

Example:
    >>> lexer = Lexer(CharacterStream("var x = 1;"))
    >>> lexer.next_token()
    Token(VAR, var)
"""

from typing import Any

from esta.esta_constants import MAX_OPERATOR_LENGTH, keywords, token_hashmap
from esta.esta_errors import LexicalError


class CharacterStream:
    """
    Reads characters from a source string while tracking line and column.

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
            LexicalError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise LexicalError(
                "Attempted to read past end of source", self.line, self.column
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token in the Esta language.

    Attributes:
        type (str): The token type (e.g. 'IDENT', 'NUMBER', 'SEMI', 'EOF').
        value (str): The raw source text of the token.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, type_: str, value: str, line: int = 0, col: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))


class Lexer:
    """Lexical analyzer for the Esta language.

    The Lexer takes a CharacterStream and converts it into Token objects, one
    per call to `next_token()`. Once the input is exhausted every further call
    returns an EOF token.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips all whitespace and comments in the stream."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r\n":
                self.advance()
            elif self.peek() == "#":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        match_len = 0
        candidate = ""

        for i in range(MAX_OPERATOR_LENGTH):
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate
                match_len = i + 1

        if max_token:
            for _ in range(match_len):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            LexicalError: On an unterminated string or a character that starts no token.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token("EOF", "EOF", self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if ch.isascii() and ch.isalpha():
            ident = ""
            while not self.stream.end_of_file() and (
                self.peek().isascii() and (self.peek().isalnum() or self.peek() == "_")
            ):
                ident += self.advance()
            if ident in keywords:
                return Token(keywords[ident], ident, line, col)
            return Token("IDENT", ident, line, col)

        # 2. Number
        if ch.isascii() and ch.isdigit():
            num = ""
            while not self.stream.end_of_file() and (
                self.peek().isascii() and self.peek().isdigit()
            ):
                num += self.advance()
            return Token("NUMBER", num, line, col)

        # 3. String, quotes included
        if ch == '"':
            val = self.advance()
            while not self.stream.end_of_file() and self.peek() != '"':
                val += self.advance()
            if self.peek() == '"':
                val += self.advance()
                return Token("STRING", val, line, col)
            raise LexicalError("Unterminated string", line, col)

        # 4. Compound or symbolic operator
        token = self.match_operator()
        if token:
            return token

        # 5. Unknown character
        raise LexicalError(f"Unexpected character {ch!r}", line, col)


def tokenize(source: str) -> list[Token]:
    """Lexes `source` completely; the returned list always ends with EOF."""
    lexer = Lexer(CharacterStream(source))
    tokens = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type == "EOF":
            return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
