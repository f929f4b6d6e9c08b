from typing import Any

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

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
    Node,
    Number,
    Operator,
    Return,
    Statement,
    String,
    UnaryOp,
    While,
)
from esta.esta_config import ParserConfig
from esta.esta_constants import keywords
from esta.esta_lexer import tokenize
from esta.esta_parser import Parser
from esta.esta_printer import SourcePrinter, print_source


def parse(source: str, config: ParserConfig | None = None) -> list[Statement]:
    return Parser(tokenize(source), config).parse()


def roundtrip(source: str, config: ParserConfig | None = None) -> str:
    return print_source(parse(source, config), config)


# ---------- strategies ----------

names = st.from_regex(r"[a-z][a-z0-9_]{0,5}", fullmatch=True).filter(
    lambda s: s not in keywords
)

literals = st.one_of(
    st.integers(min_value=0, max_value=2**31 - 1).map(Number),
    st.booleans().map(Boolean),
    st.from_regex(r'"[a-zA-Z0-9 ]{0,6}"', fullmatch=True).map(String),
    st.just(Nil()),
).map(Literal)

binary_ops = st.sampled_from([op for op in Operator if op is not Operator.NOT])
unary_ops = st.sampled_from([Operator.NOT, Operator.SUB])


def extend_expressions(children: Any) -> Any:
    return st.one_of(
        st.builds(BinaryOp, children, binary_ops, children),
        st.builds(UnaryOp, unary_ops, children),
        st.builds(FunCall, names, st.lists(children, max_size=3).map(tuple)),
    )


expressions = st.recursive(
    st.one_of(literals, names.map(Identifier)), extend_expressions, max_leaves=8
)
optional_expressions = st.none() | expressions


@composite  # type: ignore[misc]
def calls(draw: Any) -> FunCall:
    args = draw(st.lists(expressions, max_size=3))
    return FunCall(draw(names), tuple(args))


simple_statements = st.one_of(
    st.builds(Declaration, names, expressions),
    st.builds(Assignment, expressions, expressions),
    st.builds(Return, optional_expressions),
    st.builds(Break),
    st.builds(Continue),
    calls().map(ImpureCall),
    expressions.filter(lambda e: not isinstance(e, FunCall)).map(ExprStmt),
)


def extend_statements(children: Any) -> Any:
    blocks = st.lists(children, max_size=3).map(lambda s: Block(tuple(s)))
    return st.one_of(
        blocks,
        st.builds(While, expressions, blocks),
        st.builds(If, expressions, blocks, children),
        st.builds(
            For, optional_expressions, optional_expressions, optional_expressions, blocks
        ),
        st.builds(FunDecl, names, st.lists(names, max_size=3).map(tuple), blocks),
    )


statements = st.recursive(simple_statements, extend_statements, max_leaves=6)
programs = st.lists(statements, max_size=4)


# ---------- round trip ----------


@settings(max_examples=200, deadline=None)  # type: ignore[misc]
@given(programs)
def test_print_then_parse_is_identity(program: list[Statement]) -> None:
    assert parse(print_source(program)) == program


@settings(max_examples=100, deadline=None)  # type: ignore[misc]
@given(programs)
def test_roundtrip_with_legacy_for_syntax(program: list[Statement]) -> None:
    config = ParserConfig(legacy_for_syntax=True)
    assert parse(print_source(program, config), config) == program


@settings(deadline=None)  # type: ignore[misc]
@given(expressions)
def test_expression_roundtrip(expression: Expression) -> None:
    text = SourcePrinter().emit_expr(expression)
    assert Parser(tokenize(text)).parse_expr_entrypoint() == expression


def test_canonical_form_is_a_fixed_point(sample_source: str) -> None:
    once = roundtrip(sample_source)
    assert roundtrip(once) == once
    assert parse(once) == parse(sample_source)


# ---------- canonical formatting ----------


def test_prints_nested_if_chain() -> None:
    source = (
        'fun f(a, b,) { if a < b { return a; } '
        'else if a == b { print("eq"); } else { return b; } }'
    )
    assert roundtrip(source) == "\n".join(
        [
            "fun f(a, b) {",
            "    if (a < b) {",
            "        return a;",
            "    } else if (a == b) {",
            '        print("eq");',
            "    } else {",
            "        return b;",
            "    }",
            "}",
        ]
    )


def test_empty_else_is_omitted() -> None:
    assert roundtrip("if x {} else {}") == "if x {\n}"


def test_else_with_plain_statement() -> None:
    assert roundtrip("if x {} else y = 1;") == "if x {\n} else\n    y = 1;"


def test_prints_declarations_and_unary() -> None:
    assert roundtrip("var a; var b = - - 1; var c = not (x or y);") == "\n".join(
        ["var a;", "var b = - - 1;", "var c = not (x or y);"]
    )


def test_prints_strings_verbatim() -> None:
    assert roundtrip('s = "a  b";') == 's = "a  b";'


def test_prints_for_headers() -> None:
    assert roundtrip("for i; i < 3; i + 1 { }") == "for i; (i < 3); (i + 1) {\n}"
    assert roundtrip("for ; ; { }") == "for ; ; {\n}"


def test_prints_legacy_for_headers(legacy_config: ParserConfig) -> None:
    assert roundtrip("for i; i; i; { }", legacy_config) == "for i; i; i; {\n}"
    assert roundtrip("for ; ; ; { }", legacy_config) == "for ; ; ; {\n}"


def test_prints_blocks_and_loop_control() -> None:
    source = "while True { { break; } continue; return; }"
    assert roundtrip(source) == "\n".join(
        [
            "while True {",
            "    {",
            "        break;",
            "    }",
            "    continue;",
            "    return;",
            "}",
        ]
    )


def test_unknown_statement_kind_raises() -> None:
    class Mystery(Node):
        kind = "mystery"

    with pytest.raises(NotImplementedError, match="no emitter for mystery"):
        print_source([Mystery()])  # type: ignore[list-item]
    with pytest.raises(NotImplementedError, match="No expression emitter"):
        SourcePrinter().emit_expr(Mystery())  # type: ignore[arg-type]
