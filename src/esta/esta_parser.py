"""
Esta Language Parser

Parses Esta source tokens into an abstract syntax tree (AST).

This module implements a hand-written recursive-descent parser over the flat
list of `Token` objects produced by `esta.esta_lexer`. Each grammar rule is a
method; the AST is built while the tokens are consumed, in a single pass.

Supported Constructs
--------------------
- Statements:
    * Declarations: `var x;`, `var x = expr;`
    * Assignments: `target = expr;` (any expression may be the target)
    * Control flow: `while`, `if`/`else` (with `else if` chains), `for`
    * Functions: `fun name(a, b,) { ... }`, `return expr?;`
    * Loop control: `break;`, `continue;`
    * Calls and bare expressions used as statements: `f(x);`, `1;`
    * Blocks: `{ ... }`

- Expressions, lowest to highest precedence:
    * Logical `and` `or`
    * Equality `==` `!=`
    * Comparison `<` `>` `<=` `>=`
    * Additive `+` `-`
    * Multiplicative `*` `/`
    * Prefix `not` and `-` (stackable)
    * Calls `f(args)`, literals, identifiers and `( expr )`

  Every binary layer is left-associative.

Entry Points
------------
- `parse()`: Parse a full program into a list of statements.
- `parse_statement()`: Parse a single statement.
- `parse_expr_entrypoint()`: Parse one expression that must span the whole input.
- `parse_source()`: Lex and parse a source string in one call.

Raises
------
ParseError
    When the tokens match no production; there is no error recovery.
LiteralConversionError
    When a number literal does not fit in a 32-bit signed integer.
LexicalError
    Propagated from the lexer by `parse_source()`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from esta.esta_ast import (
    Assignment,
    BinaryOp,
    Block,
    Boolean,
    Break,
    Continue,
    Declaration,
    Expression,
    ExprStmt,
    For,
    FunCall,
    FunDecl,
    Identifier,
    If,
    ImpureCall,
    Literal,
    Nil,
    Number,
    Operator,
    Return,
    Statement,
    String,
    UnaryOp,
    While,
)
from esta.esta_config import ParserConfig
from esta.esta_constants import I32_MAX, I32_MIN, keywords, token_hashmap
from esta.esta_errors import EstaError, LiteralConversionError, ParseError
from esta.esta_lexer import Token, tokenize

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Spelling of each token type, for error messages.
_SPELLING: dict[str, str] = {v: k for k, v in token_hashmap.items()}
_SPELLING.update({v: k for k, v in keywords.items() if v not in ("BOOLEAN",)})
_SPELLING.update(
    {
        "IDENT": "identifier",
        "NUMBER": "number",
        "STRING": "string",
        "BOOLEAN": "boolean",
        "EOF": "end of input",
    }
)

# Ten digits is the most an i32 can need once leading zeros are dropped.
_MAX_I32_DIGITS = 10


class Parser:
    """
    Esta Parser Class

    Turns a list of lexical tokens into `Statement` and `Expression` nodes.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream to be parsed.
    position : int
        Current index into the token stream.
    config : ParserConfig
        Grammar switches and limits.
    depth : int
        Current nesting depth of blocks, parenthesized and prefix expressions.
    logical_ops, equality_ops, comparison_ops, additive_ops, multiplicative_ops : dict[str, Operator]
        Token type to operator tables, one per binary precedence layer.
    unary_ops : dict[str, Operator]
        Token types accepted as prefix operators.
    """

    def __init__(self, tokens: list[Token], config: ParserConfig | None = None) -> None:
        self.tokens: list[Token] = tokens
        self.position: int = 0
        self.config: ParserConfig = config or ParserConfig()
        self.depth: int = 0

        # TOKEN MAPPINGS (PARSER)

        self.logical_ops: dict[str, Operator] = {
            "AND": Operator.AND,
            "OR": Operator.OR,
        }
        self.equality_ops: dict[str, Operator] = {
            "EQ": Operator.EQ,
            "NE": Operator.NE,
        }
        self.comparison_ops: dict[str, Operator] = {
            "LT": Operator.LT,
            "GT": Operator.GT,
            "LE": Operator.LE,
            "GE": Operator.GE,
        }
        self.additive_ops: dict[str, Operator] = {
            "PLUS": Operator.ADD,
            "SUB": Operator.SUB,
        }
        self.multiplicative_ops: dict[str, Operator] = {
            "MULT": Operator.MUL,
            "DIV": Operator.DIV,
        }
        self.unary_ops: dict[str, Operator] = {
            "NOT": Operator.NOT,
            "SUB": Operator.SUB,
        }

    def _eof(self) -> Token:
        # Past the end, report at the last real token.
        last = self.tokens[-1] if self.tokens else None
        return Token("EOF", "EOF", last.line if last else 0, last.col if last else 0)

    def current(self) -> Token:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return self._eof()

    def peek(self, offset: int = 1) -> Token:
        index = self.position + offset
        return self.tokens[index] if index < len(self.tokens) else self._eof()

    def advance(self) -> Token:
        self.position += 1
        return self.current()

    def match(self, *types: str) -> Token:
        """Consumes the current token if its type is one of `types`."""
        tok = self.current()
        if tok.type in types:
            self.advance()
            return tok
        expected = " or ".join(f"'{_SPELLING.get(t, t)}'" for t in types)
        got = "end of input" if tok.type == "EOF" else repr(tok.value)
        raise ParseError.at(f"Expected {expected}, got {got}", tok)

    @contextmanager
    def nested(self) -> Iterator[None]:
        """Tracks one level of nesting and rejects input deeper than the configured limit."""
        self.depth += 1
        try:
            if self.depth > self.config.max_nesting_depth:
                raise ParseError.at(
                    f"Nesting deeper than {self.config.max_nesting_depth} levels",
                    self.current(),
                )
            yield
        finally:
            self.depth -= 1

    # ---------- TOP LEVEL ----------

    def parse(self) -> list[Statement]:
        """Parse a full Esta program and return its statements in order."""
        logger.debug("Parsing %d tokens", len(self.tokens))
        program: list[Statement] = []
        try:
            while self.current().type != "EOF":
                program.append(self.parse_statement())
        except RecursionError as e:
            err = self._too_deep()
            logger.debug("Parse failed: %s", err)
            raise err from e
        except EstaError as e:
            logger.debug("Parse failed: %s", e)
            raise
        logger.debug("Parsed %d top-level statements", len(program))
        return program

    def parse_expr_entrypoint(self) -> Expression:
        """Parse a single expression that must consume the whole token stream."""
        try:
            expr = self.parse_expression()
        except RecursionError as e:
            raise self._too_deep() from e
        self.match("EOF")
        return expr

    def _too_deep(self) -> ParseError:
        """Turns the interpreter running out of stack into a positioned parse error."""
        return ParseError.at("Nesting too deep for the interpreter stack", self.current())

    # ---------- STATEMENTS ----------

    def parse_statement(self) -> Statement:
        """Parse a single top-level or block-level statement."""
        tok = self.current()

        if tok.type == "VAR":
            return self.parse_declaration()
        if tok.type == "WHILE":
            return self.parse_while()
        if tok.type == "IF":
            return self.parse_if()
        if tok.type == "FOR":
            return self.parse_for()
        if tok.type == "FUN":
            return self.parse_fun_decl()
        if tok.type == "RETURN":
            return self.parse_return()
        if tok.type == "BREAK":
            self.advance()
            self.match("SEMI")
            return Break(line=tok.line, col=tok.col)
        if tok.type == "CONTINUE":
            self.advance()
            self.match("SEMI")
            return Continue(line=tok.line, col=tok.col)
        if tok.type == "LBRACE":
            return self.parse_block()

        return self.parse_expression_statement()

    def parse_declaration(self) -> Declaration:
        """Parse `var name;` or `var name = expr;`."""
        var_tok = self.match("VAR")
        name_tok = self.match("IDENT")

        init: Expression
        if self.current().type == "ASSIGN":
            self.advance()
            init = self.parse_expression()
        else:
            init = Literal(Nil(), line=name_tok.line, col=name_tok.col)
        self.match("SEMI")

        return Declaration(name_tok.value, init, line=var_tok.line, col=var_tok.col)

    def parse_expression_statement(self) -> Statement:
        """Parse an assignment, a call statement or a bare expression statement.

        `=` belongs to no expression rule, so the left-hand side is parsed as an
        ordinary expression and the next token decides which statement it is.
        """
        tok = self.current()
        expr = self.parse_expression()

        if self.current().type == "ASSIGN":
            self.advance()
            value = self.parse_expression()
            self.match("SEMI")
            return Assignment(expr, value, line=tok.line, col=tok.col)

        self.match("SEMI")
        if isinstance(expr, FunCall):
            return ImpureCall(expr, line=tok.line, col=tok.col)
        return ExprStmt(expr, line=tok.line, col=tok.col)

    def parse_block(self) -> Block:
        """Parse a `{}`-enclosed block of statements."""
        open_tok = self.match("LBRACE")
        stmts: list[Statement] = []

        with self.nested():
            while self.current().type != "RBRACE":
                if self.current().type == "EOF":
                    raise ParseError.at("Expected '}', got end of input", self.current())
                stmts.append(self.parse_statement())

        self.match("RBRACE")
        return Block(tuple(stmts), line=open_tok.line, col=open_tok.col)

    def parse_while(self) -> While:
        """Parse `while <expr> { ... }`."""
        while_tok = self.match("WHILE")
        condition = self.parse_expression()
        body = self.parse_block()
        return While(condition, body, line=while_tok.line, col=while_tok.col)

    def parse_if(self) -> If:
        """Parse an `if` with an optional `else` statement.

        The else branch is any statement, so `else if` nests another `If`.
        Without `else` the branch is an empty block.
        """
        if_tok = self.match("IF")
        condition = self.parse_expression()
        then = self.parse_block()

        orelse: Statement
        if self.current().type == "ELSE":
            self.match("ELSE")
            # else-if links do not count towards max_nesting_depth
            orelse = self.parse_statement()
        else:
            else_tok = self.current()
            orelse = Block(line=else_tok.line, col=else_tok.col)

        return If(condition, then, orelse, line=if_tok.line, col=if_tok.col)

    def parse_for(self) -> For:
        """Parse `for init?; test?; increment? { ... }`.

        With `legacy_for_syntax` a `;` must also follow the increment slot.
        """
        for_tok = self.match("FOR")

        init = self._optional_expression("SEMI")
        self.match("SEMI")
        test = self._optional_expression("SEMI")
        self.match("SEMI")

        if self.config.legacy_for_syntax:
            increment = self._optional_expression("SEMI")
            self.match("SEMI")
        else:
            increment = self._optional_expression("LBRACE")

        body = self.parse_block()
        return For(init, test, increment, body, line=for_tok.line, col=for_tok.col)

    def _optional_expression(self, stop: str) -> Expression | None:
        if self.current().type == stop:
            return None
        return self.parse_expression()

    def parse_fun_decl(self) -> FunDecl:
        """Parse `fun name(params) { ... }`; duplicate parameter names are kept as written."""
        fun_tok = self.match("FUN")
        name_tok = self.match("IDENT")
        self.match("LPAREN")
        params = self.parse_comma(lambda: self.match("IDENT").value, "RPAREN")
        body = self.parse_block()
        return FunDecl(
            name_tok.value, tuple(params), body, line=fun_tok.line, col=fun_tok.col
        )

    def parse_return(self) -> Return:
        """Parse `return;` or `return <expr>;`."""
        return_tok = self.match("RETURN")
        value = self._optional_expression("SEMI")
        self.match("SEMI")
        return Return(value, line=return_tok.line, col=return_tok.col)

    def parse_comma(self, item: Callable[[], T], close: str) -> list[T]:
        """Parse `item (, item)* ,?` up to and including the `close` token.

        An empty list and a trailing comma are both accepted; a lone comma is not.
        """
        items: list[T] = []
        while self.current().type != close:
            items.append(item())
            if self.current().type != "COMMA":
                break
            self.advance()
        self.match(close)
        return items

    # ---------- EXPRESSIONS ----------

    def parse_expression(self) -> Expression:
        """Parse an expression starting at the lowest precedence layer."""
        with self.nested():
            return self.parse_logical()

    def _left_assoc(
        self, operand: Callable[[], Expression], ops: dict[str, Operator]
    ) -> Expression:
        left = operand()
        while self.current().type in ops:
            op = ops[self.current().type]
            self.advance()
            right = operand()
            left = BinaryOp(left, op, right, line=left.line, col=left.col)
        return left

    def parse_logical(self) -> Expression:
        return self._left_assoc(self.parse_equality, self.logical_ops)

    def parse_equality(self) -> Expression:
        return self._left_assoc(self.parse_comparison, self.equality_ops)

    def parse_comparison(self) -> Expression:
        return self._left_assoc(self.parse_additive, self.comparison_ops)

    def parse_additive(self) -> Expression:
        return self._left_assoc(self.parse_multiplicative, self.additive_ops)

    def parse_multiplicative(self) -> Expression:
        return self._left_assoc(self.parse_unary, self.multiplicative_ops)

    def parse_unary(self) -> Expression:
        """Parse any number of prefix `not` / `-` operators before a call or primary."""
        tok = self.current()
        if tok.type not in self.unary_ops:
            return self.parse_call()

        self.advance()
        with self.nested():
            operand = self.parse_unary()
        return UnaryOp(self.unary_ops[tok.type], operand, line=tok.line, col=tok.col)

    def parse_call(self) -> Expression:
        """Parse `name(args)`, or fall through to a primary expression."""
        tok = self.current()
        if tok.type == "IDENT" and self.peek().type == "LPAREN":
            self.advance()
            self.advance()
            args = self.parse_comma(self.parse_expression, "RPAREN")
            return FunCall(tok.value, tuple(args), line=tok.line, col=tok.col)
        return self.parse_primary()

    def parse_primary(self) -> Expression:
        """Parse a literal, an identifier, or a parenthesized expression."""
        tok = self.current()

        if tok.type == "NUMBER":
            self.advance()
            return Literal(self.convert_number(tok), line=tok.line, col=tok.col)
        if tok.type == "STRING":
            self.advance()
            return Literal(String(tok.value), line=tok.line, col=tok.col)
        if tok.type == "BOOLEAN":
            self.advance()
            return Literal(Boolean(tok.value == "True"), line=tok.line, col=tok.col)
        if tok.type == "NIL":
            self.advance()
            return Literal(Nil(), line=tok.line, col=tok.col)
        if tok.type == "IDENT":
            self.advance()
            return Identifier(tok.value, line=tok.line, col=tok.col)
        if tok.type == "LPAREN":
            self.advance()
            expr = self.parse_expression()
            self.match("RPAREN")
            return expr

        got = "end of input" if tok.type == "EOF" else repr(tok.value)
        raise ParseError.at(f"Expected expression, got {got}", tok)

    def convert_number(self, tok: Token) -> Number:
        """Converts a NUMBER token to an i32 literal, failing on overflow."""
        digits = tok.value.lstrip("0") or "0"
        if len(digits) > _MAX_I32_DIGITS or not I32_MIN <= int(digits) <= I32_MAX:
            raise LiteralConversionError.at(
                f"Number literal {tok.value} does not fit in a 32-bit signed integer",
                tok,
            )
        return Number(int(digits))


def parse_source(source: str, config: ParserConfig | None = None) -> list[Statement]:
    """Lex and parse `source` into a list of statements."""
    return Parser(tokenize(source), config).parse()


__all__ = ["Parser", "parse_source"]
