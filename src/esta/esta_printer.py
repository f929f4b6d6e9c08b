"""
Prints Esta ASTs back out as canonical Esta source.

This module defines the `SourcePrinter` class, which walks the statement and
expression nodes built by the parser and emits source text that parses back
to a structurally identical tree. It is used by the CLI's `--format source`
output and as the oracle for round-trip tests.

Canonical Form:
    - Four-space indentation, one statement per line.
    - Binary operations fully parenthesized: `(a + (b * c))`.
    - Prefix operators separated from their operand: `- x`, `not x`.
    - String literals printed verbatim, quotes included.
    - An empty else branch is omitted; `else if` chains stay on one line.
    - `for` headers follow the printer's `legacy_for_syntax` flag.

Raises:
    - `NotImplementedError`: If a node has no corresponding emitter.
"""

from esta.esta_ast import (
    Assignment,
    BinaryOp,
    Block,
    Boolean,
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
    Return,
    Statement,
    String,
    UnaryOp,
    While,
)
from esta.esta_config import ParserConfig


class SourcePrinter:
    """Emits Esta source from AST nodes.

    Attributes:
        lines (list[str]): Accumulated lines of emitted source.
        indent (int): Current indentation level for emitted blocks.
        legacy_for_syntax (bool): Emit the extra `;` before a `for` body.

    Methods:
        print_program(program): Emits a whole program and returns it as a string.
        get_output(): Returns the emitted source as a string.
        emit_expr(node): Emits a single expression.
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        self.lines: list[str] = []
        self.indent = 0
        self.legacy_for_syntax = (config or ParserConfig()).legacy_for_syntax

    def indent_str(self) -> str:
        return "    " * self.indent

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def print_program(self, program: list[Statement]) -> str:
        for stmt in program:
            self._visit(stmt)
        return self.get_output()

    # ---------- EXPRESSIONS ----------

    def emit_expr(self, node: Expression) -> str:
        """
        Emits an expression as a single string.

        Parameters
        ----------
        node : Expression
            Any expression node.

        Returns
        -------
        str
            Source text that parses back to `node`.
        """
        meth = getattr(self, f"emit_expr_{node.kind}", None)
        if meth is None:
            raise NotImplementedError(f"No expression emitter for kind '{node.kind}'")
        return str(meth(node))

    def emit_expr_literal(self, node: Literal) -> str:
        val = node.value
        if isinstance(val, Number):
            return str(val.value)
        if isinstance(val, Boolean):
            return "True" if val.value else "False"
        if isinstance(val, String):
            return val.value
        if isinstance(val, Nil):
            return "Nil"
        raise NotImplementedError(f"Unknown literal: {val!r}")

    def emit_expr_identifier(self, node: Identifier) -> str:
        return node.name

    def emit_expr_binary(self, node: BinaryOp) -> str:
        left = self.emit_expr(node.left)
        right = self.emit_expr(node.right)
        return f"({left} {node.op} {right})"

    def emit_expr_unary(self, node: UnaryOp) -> str:
        return f"{node.op} {self.emit_expr(node.operand)}"

    def emit_expr_fun_call(self, node: FunCall) -> str:
        args = ", ".join(self.emit_expr(a) for a in node.args)
        return f"{node.name}({args})"

    # ---------- STATEMENTS ----------

    def _visit(self, node: Statement) -> None:
        """
        Dispatches a statement to its `emit_*` method.

        Raises
        ------
        NotImplementedError
            If no emitter is defined for the node kind.
        """
        meth = getattr(self, f"emit_{node.kind}", None)
        if not meth:
            raise NotImplementedError(f"SourcePrinter: no emitter for {node.kind}")
        meth(node)

    def _line(self, text: str) -> None:
        self.lines.append(f"{self.indent_str()}{text}")

    def _body(self, header: str, body: Block) -> None:
        """Emits `header {`, the indented statements, and the closing brace."""
        self._line(f"{header} {{")
        self.indent += 1
        for stmt in body.statements:
            self._visit(stmt)
        self.indent -= 1
        self._line("}")

    def emit_declaration(self, node: Declaration) -> None:
        if isinstance(node.init, Literal) and isinstance(node.init.value, Nil):
            self._line(f"var {node.name};")
        else:
            self._line(f"var {node.name} = {self.emit_expr(node.init)};")

    def emit_assignment(self, node: Assignment) -> None:
        self._line(f"{self.emit_expr(node.target)} = {self.emit_expr(node.value)};")

    def emit_while(self, node: While) -> None:
        self._body(f"while {self.emit_expr(node.condition)}", node.body)

    def emit_if(self, node: If, prefix: str = "") -> None:
        self._body(f"{prefix}if {self.emit_expr(node.condition)}", node.then)
        orelse = node.orelse
        if isinstance(orelse, Block) and not orelse.statements:
            return

        # `else` continues the line of the closing brace
        self.lines.pop()
        if isinstance(orelse, If):
            self.emit_if(orelse, prefix="} else ")
        elif isinstance(orelse, Block):
            self._body("} else", orelse)
        else:
            self._line("} else")
            self.indent += 1
            self._visit(orelse)
            self.indent -= 1

    def emit_for(self, node: For) -> None:
        init = self.emit_expr(node.init) if node.init is not None else ""
        test = self.emit_expr(node.test) if node.test is not None else ""
        inc = self.emit_expr(node.increment) if node.increment is not None else ""
        clauses = [init, test, inc]
        if self.legacy_for_syntax:
            clauses.append("")
        self._body(f"for {'; '.join(clauses)}".rstrip(), node.body)

    def emit_fun_decl(self, node: FunDecl) -> None:
        self._body(f"fun {node.name}({', '.join(node.params)})", node.body)

    def emit_return(self, node: Return) -> None:
        if node.value is None:
            self._line("return;")
        else:
            self._line(f"return {self.emit_expr(node.value)};")

    def emit_break(self, node: Statement) -> None:
        self._line("break;")

    def emit_continue(self, node: Statement) -> None:
        self._line("continue;")

    def emit_impure_call(self, node: ImpureCall) -> None:
        self._line(f"{self.emit_expr(node.call)};")

    def emit_expr_stmt(self, node: ExprStmt) -> None:
        self._line(f"{self.emit_expr(node.expr)};")

    def emit_block(self, node: Block) -> None:
        self.lines.append(f"{self.indent_str()}{{")
        self.indent += 1
        for stmt in node.statements:
            self._visit(stmt)
        self.indent -= 1
        self._line("}")


def print_source(program: list[Statement], config: ParserConfig | None = None) -> str:
    """Renders `program` in canonical form."""
    return SourcePrinter(config).print_program(program)


__all__ = ["SourcePrinter", "print_source"]
