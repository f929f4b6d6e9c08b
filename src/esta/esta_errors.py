"""
Exception types raised while turning Esta source into an AST.

Classes:
    EstaError: Base class; a `SyntaxError` carrying the offending position and token.
    LexicalError: A character sequence matches no terminal.
    ParseError: The token stream matches no production of the current rule.
    LiteralConversionError: A numeric literal does not fit a 32-bit signed integer.
    ConfigError: A parser configuration could not be loaded or validated.

Every parse failure is fatal: nothing in this package catches these to resume.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:  # pragma: no cover
    from esta.esta_lexer import Token

E = TypeVar("E", bound="EstaError")


class EstaError(SyntaxError):
    """Base class for all Esta front-end failures.

    Attributes:
        line (int): 1-based line of the failure (0 when unknown).
        col (int): 1-based column of the failure (0 when unknown).
        token (Token | None): The token the parser was looking at, if any.
    """

    def __init__(
        self,
        message: str,
        line: int = 0,
        col: int = 0,
        token: Token | None = None,
    ) -> None:
        if line:
            message = f"{message} at line {line}, col {col}"
        super().__init__(message)
        self.line = line
        self.col = col
        self.token = token

    @classmethod
    def at(cls: type[E], message: str, token: Token) -> E:
        """Builds an error positioned at `token`."""
        return cls(message, token.line, token.col, token)


class LexicalError(EstaError):
    """Raised by the lexer for unknown characters and unterminated strings."""


class ParseError(EstaError):
    """Raised by the parser when no production accepts the current token."""


class LiteralConversionError(EstaError):
    """Raised when a number literal falls outside the i32 range."""


class ConfigError(Exception):
    """Raised when a `ParserConfig` cannot be built.

    Attributes:
        problems (list[str]): One entry per rejected key or value.
    """

    def __init__(self, message: str, problems: list[str] | None = None):
        super().__init__(message)
        self.problems = problems or []


__all__ = [
    "ConfigError",
    "EstaError",
    "LexicalError",
    "LiteralConversionError",
    "ParseError",
]
