"""
Defines the abstract syntax tree (AST) for the Esta scripting language.

The tree is made of two closed families of frozen dataclasses:

Expressions:
    Literal, Identifier, BinaryOp, UnaryOp, FunCall

Statements:
    Declaration, Assignment, While, If, For, FunDecl, Return, Break,
    Continue, ImpureCall, ExprStmt, Block

`Literal.value` is one of the literal payloads `Number`, `Boolean`, `String`
or `Nil`, and every operator is an `Operator` member. Sequences are stored as
tuples so a tree cannot be changed once the parser has built it.

Each node tracks:
    line (int): Source line of the node's leading token.
    col (int): Source column of the node's leading token.

Positions are left out of equality and hashing, so two trees compare equal
when they have the same shape, whatever the layout of the source.

Usage:
    >>> BinaryOp(Literal(Number(1)), Operator.ADD, Identifier("x")).to_dict()["kind"]
    'binary'
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, TypedDict, Union


class ASTDict(TypedDict, total=False):
    """
    Dictionary shape produced by `to_dict()`, suitable for JSON output.

    Fields:
        kind (str): The node kind (e.g. "binary", "if", "fun_decl").
        line (int): Line number of the node.
        col (int): Column number of the node.

    The remaining keys are the node's own fields, with child nodes converted
    recursively and tuples turned into lists.
    """

    kind: str
    line: int
    col: int


class Operator(enum.Enum):
    """Binary and unary operators, valued by their source spelling.

    `SUB` is shared by subtraction and unary negation; the tree position
    (`BinaryOp` or `UnaryOp`) tells them apart.
    """

    AND = "and"
    OR = "or"
    EQ = "=="
    NE = "!="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    NOT = "not"

    def __str__(self) -> str:
        return self.value


def _plain(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_plain(v) for v in value]
    if isinstance(value, Operator):
        return value.value
    return value


@dataclass(frozen=True)
class Node:
    """Common base for every AST node; not instantiated directly."""

    kind: ClassVar[str] = "node"

    def to_dict(self) -> ASTDict:
        out: dict[str, Any] = {"kind": self.kind}
        for f in fields(self):
            out[f.name] = _plain(getattr(self, f.name))
        return out  # type: ignore[return-value]


# Literal payloads


@dataclass(frozen=True)
class Number(Node):
    kind: ClassVar[str] = "number"
    value: int


@dataclass(frozen=True)
class Boolean(Node):
    kind: ClassVar[str] = "boolean"
    value: bool


@dataclass(frozen=True)
class String(Node):
    """A string literal; `value` keeps the surrounding double quotes."""

    kind: ClassVar[str] = "string"
    value: str


@dataclass(frozen=True)
class Nil(Node):
    kind: ClassVar[str] = "nil"


LiteralValue = Union[Number, Boolean, String, Nil]


# Expressions


@dataclass(frozen=True)
class Literal(Node):
    kind: ClassVar[str] = "literal"
    value: LiteralValue
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Identifier(Node):
    kind: ClassVar[str] = "identifier"
    name: str
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class BinaryOp(Node):
    kind: ClassVar[str] = "binary"
    left: Expression
    op: Operator
    right: Expression
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class UnaryOp(Node):
    kind: ClassVar[str] = "unary"
    op: Operator
    operand: Expression
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class FunCall(Node):
    kind: ClassVar[str] = "fun_call"
    name: str
    args: tuple[Expression, ...] = ()
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


Expression = Union[Literal, Identifier, BinaryOp, UnaryOp, FunCall]


# Statements


@dataclass(frozen=True)
class Block(Node):
    """A brace-delimited body; statements keep their source order."""

    kind: ClassVar[str] = "block"
    statements: tuple[Statement, ...] = ()
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Declaration(Node):
    """`var name = init;` where a missing initializer is a `Nil` literal."""

    kind: ClassVar[str] = "declaration"
    name: str
    init: Expression = field(default_factory=lambda: Literal(Nil()))
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Assignment(Node):
    """`target = value;` where the target may be any expression."""

    kind: ClassVar[str] = "assignment"
    target: Expression
    value: Expression
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class While(Node):
    kind: ClassVar[str] = "while"
    condition: Expression
    body: Block
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class If(Node):
    """Conditional; `orelse` is always present and is an empty Block when absent in source."""

    kind: ClassVar[str] = "if"
    condition: Expression
    then: Block
    orelse: Statement = field(default_factory=Block)
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class For(Node):
    kind: ClassVar[str] = "for"
    init: Expression | None
    test: Expression | None
    increment: Expression | None
    body: Block
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class FunDecl(Node):
    kind: ClassVar[str] = "fun_decl"
    name: str
    params: tuple[str, ...]
    body: Block
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Return(Node):
    kind: ClassVar[str] = "return"
    value: Expression | None = None
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Break(Node):
    kind: ClassVar[str] = "break"
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Continue(Node):
    kind: ClassVar[str] = "continue"
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ImpureCall(Node):
    """A call evaluated only for its side effects."""

    kind: ClassVar[str] = "impure_call"
    call: FunCall
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ExprStmt(Node):
    """Any non-call expression used as a statement, e.g. `1;`."""

    kind: ClassVar[str] = "expr_stmt"
    expr: Expression
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


Statement = Union[
    Declaration,
    Assignment,
    While,
    If,
    For,
    FunDecl,
    Return,
    Break,
    Continue,
    ImpureCall,
    ExprStmt,
    Block,
]


def program_to_dicts(program: list[Statement]) -> list[ASTDict]:
    """Serializes a whole program for JSON output."""
    return [stmt.to_dict() for stmt in program]


__all__ = [
    "ASTDict",
    "Assignment",
    "BinaryOp",
    "Block",
    "Boolean",
    "Break",
    "Continue",
    "Declaration",
    "ExprStmt",
    "Expression",
    "For",
    "FunCall",
    "FunDecl",
    "Identifier",
    "If",
    "ImpureCall",
    "Literal",
    "LiteralValue",
    "Nil",
    "Node",
    "Number",
    "Operator",
    "Return",
    "Statement",
    "String",
    "UnaryOp",
    "While",
    "program_to_dicts",
]
