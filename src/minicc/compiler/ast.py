"""
minicc Abstract Syntax Tree (AST) Definitions
=============================================

This module defines the AST node types produced by the parser and
consumed by the code generator.

Node Hierarchy
--------------
ASTNode (base)
├── ProgramNode - root node, wraps exactly one function
├── FunctionNode - function name and body statement
├── Statements
│   └── ReturnStatement - return of one expression
└── Expressions
    ├── UnaryExpression - unary operator applied to one operand
    ├── BinaryExpression - binary operator applied to left and right
    └── IntConstant - integer literal

Design Notes
------------
- All nodes are frozen dataclasses; a tree is read-only once built
- Each node owns its children; there is no sharing and no cycles
- `location` is keyword-only and excluded from equality, so trees built
  by hand in tests compare equal to parsed ones
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional

from minicc.errors import SourceLocation


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node starts (if known)
    """
    location: Optional[SourceLocation] = field(
        default=None, compare=False, repr=False, kw_only=True
    )


@dataclass(frozen=True)
class Expression(ASTNode):
    """Base class for all expression nodes."""
    pass


@dataclass(frozen=True)
class Statement(ASTNode):
    """Base class for all statement nodes."""
    pass


# =============================================================================
# Operators
# =============================================================================

class UnaryOperator(Enum):
    """Unary operator types."""
    NEGATE = auto()              # -x
    BITWISE_COMPLEMENT = auto()  # ~x
    LOGICAL_NOT = auto()         # !x


class BinaryOperator(Enum):
    """Binary operator types."""
    ADD = auto()        # +
    SUBTRACT = auto()   # -
    MULTIPLY = auto()   # *
    DIVIDE = auto()     # /


UNARY_SYMBOLS: dict[UnaryOperator, str] = {
    UnaryOperator.NEGATE: "-",
    UnaryOperator.BITWISE_COMPLEMENT: "~",
    UnaryOperator.LOGICAL_NOT: "!",
}

BINARY_SYMBOLS: dict[BinaryOperator, str] = {
    BinaryOperator.ADD: "+",
    BinaryOperator.SUBTRACT: "-",
    BinaryOperator.MULTIPLY: "*",
    BinaryOperator.DIVIDE: "/",
}


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class IntConstant(Expression):
    """
    Integer literal expression.

    Attributes:
        value: The literal value (0 .. 2**64-1)
    """
    value: int


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    Unary operation expression (op x).

    Attributes:
        operator: The unary operator
        operand: The operand expression
    """
    operator: UnaryOperator
    operand: Expression


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Binary operation expression (a op b).

    Attributes:
        operator: The binary operator
        left: Left operand expression (evaluated first)
        right: Right operand expression
    """
    operator: BinaryOperator
    left: Expression
    right: Expression


# =============================================================================
# Statement and Declaration Nodes
# =============================================================================

@dataclass(frozen=True)
class ReturnStatement(Statement):
    """
    Return statement.

    Attributes:
        value: The returned expression
    """
    value: Expression


@dataclass(frozen=True)
class FunctionNode(ASTNode):
    """
    Function definition: `int name() { body }`.

    Attributes:
        name: Function name
        body: The single statement making up the function body
    """
    name: str
    body: ReturnStatement


@dataclass(frozen=True)
class ProgramNode(ASTNode):
    """
    Root node of the AST.

    Attributes:
        function: The program's only function
    """
    function: FunctionNode


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about; anything else falls through to generic_visit.

    Usage:
        class MyVisitor(ASTVisitor):
            def visit_IntConstant(self, node):
                ...

        MyVisitor().visit(program)
    """

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to visit_<ClassName>, or generic_visit if absent."""
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit all child nodes."""
        for field_value in node.__dict__.values():
            if isinstance(field_value, ASTNode):
                self.visit(field_value)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        print(ASTPrinter().print(ast))

    Output for `int main() { return -(1 + 2); }`:
        Program
          Function: main
            Return -(1 + 2)
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def visit_ProgramNode(self, node: ProgramNode):
        self._emit("Program")
        self._visit_children(node)

    def visit_FunctionNode(self, node: FunctionNode):
        self._emit(f"Function: {node.name}")
        self._visit_children(node)

    def visit_ReturnStatement(self, node: ReturnStatement):
        self._emit(f"Return {expression_to_string(node.value)}")

    def _visit_children(self, node: ASTNode) -> None:
        self.indent_level += 1
        self.generic_visit(node)
        self.indent_level -= 1


def expression_to_string(expr: Expression) -> str:
    """
    Render an expression fully parenthesized, e.g. `(1 + (2 * 3))`.

    Uses an explicit work stack, so arbitrarily long operator chains
    render without recursion.
    """
    rendered: list[str] = []
    pending: list[tuple[Expression, bool]] = [(expr, False)]

    while pending:
        node, operands_rendered = pending.pop()

        if isinstance(node, IntConstant):
            rendered.append(str(node.value))
        elif isinstance(node, UnaryExpression):
            if operands_rendered:
                rendered.append(f"{UNARY_SYMBOLS[node.operator]}{rendered.pop()}")
            else:
                pending.append((node, True))
                pending.append((node.operand, False))
        elif isinstance(node, BinaryExpression):
            if operands_rendered:
                right = rendered.pop()
                left = rendered.pop()
                rendered.append(f"({left} {BINARY_SYMBOLS[node.operator]} {right})")
            else:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
        else:
            rendered.append(f"<{type(node).__name__}>")

    return rendered.pop()
