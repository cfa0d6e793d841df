# =============================================================================
# test_parser.py - Parser Unit Tests
# =============================================================================
# Tests for the minicc recursive descent parser.
#
# Test coverage includes:
#   - Function and return statement structure
#   - Operator precedence and left associativity
#   - Unary operator nesting and parentheses
#   - Syntax errors and their locations
#   - Trailing tokens (ignored by default, rejected in strict mode)
# =============================================================================

import pytest
from minicc.compiler.lexer import lex
from minicc.compiler.parser import CParser, parse, parse_source
from minicc.compiler.ast import (
    ProgramNode,
    FunctionNode,
    ReturnStatement,
    IntConstant,
    UnaryExpression,
    BinaryExpression,
    UnaryOperator,
    BinaryOperator,
    ASTPrinter,
    ASTVisitor,
    expression_to_string,
)
from minicc.compiler.errors import (
    WarningCollector,
    ParseError,
    UnexpectedTokenError,
    UnexpectedEndError,
)


# =============================================================================
# Helper Functions
# =============================================================================

def parse_expr(expr: str):
    """Parse `int main() { return <expr>; }` and return the expression."""
    program = parse_source(f"int main() {{ return {expr}; }}")
    return program.function.body.value


def c(value: int) -> IntConstant:
    return IntConstant(value)


def binary(op: BinaryOperator, left, right) -> BinaryExpression:
    return BinaryExpression(op, left, right)


def unary(op: UnaryOperator, operand) -> UnaryExpression:
    return UnaryExpression(op, operand)


# =============================================================================
# Program Structure Tests
# =============================================================================

class TestProgramStructure:
    """Test parsing of the function and statement."""

    def test_return_constant(self):
        program = parse_source("int main() { return 2; }")
        assert program == ProgramNode(
            FunctionNode("main", ReturnStatement(IntConstant(2)))
        )

    def test_function_name_preserved(self):
        program = parse_source("int foo() { return 0; }")
        assert program.function.name == "foo"

    def test_parse_from_tokens(self):
        program = parse(lex("int main(){return 7;}"))
        assert program.function.body.value == c(7)

    def test_locations(self):
        program = parse_source("int main() {\n    return 2;\n}", "prog.c")
        assert str(program.function.location) == "prog.c:1:1"
        assert str(program.function.body.location) == "prog.c:2:5"
        assert str(program.function.body.value.location) == "prog.c:2:12"

    def test_multiline_layout(self):
        source = "int\nmain\n(\n)\n{\nreturn\n3\n;\n}\n"
        assert parse_source(source).function.body.value == c(3)


# =============================================================================
# Expression Tests
# =============================================================================

class TestExpressions:
    """Test expression parsing, precedence and associativity."""

    def test_addition(self):
        assert parse_expr("1 + 2") == binary(BinaryOperator.ADD, c(1), c(2))

    def test_multiplication_binds_tighter(self):
        assert parse_expr("1 + 2 * 3") == binary(
            BinaryOperator.ADD, c(1), binary(BinaryOperator.MULTIPLY, c(2), c(3))
        )

    def test_multiplication_first(self):
        assert parse_expr("2 * 3 + 4") == binary(
            BinaryOperator.ADD, binary(BinaryOperator.MULTIPLY, c(2), c(3)), c(4)
        )

    def test_subtraction_left_associative(self):
        """8 - 3 - 2 parses as (8 - 3) - 2."""
        assert parse_expr("8 - 3 - 2") == binary(
            BinaryOperator.SUBTRACT,
            binary(BinaryOperator.SUBTRACT, c(8), c(3)),
            c(2),
        )

    def test_division_left_associative(self):
        """12 / 2 / 3 parses as (12 / 2) / 3."""
        assert parse_expr("12 / 2 / 3") == binary(
            BinaryOperator.DIVIDE,
            binary(BinaryOperator.DIVIDE, c(12), c(2)),
            c(3),
        )

    def test_parentheses_override_precedence(self):
        assert parse_expr("(1 + 2) * 3") == binary(
            BinaryOperator.MULTIPLY, binary(BinaryOperator.ADD, c(1), c(2)), c(3)
        )

    def test_redundant_parentheses(self):
        assert parse_expr("((((5))))") == c(5)

    @pytest.mark.parametrize("symbol,operator", [
        ("-", UnaryOperator.NEGATE),
        ("~", UnaryOperator.BITWISE_COMPLEMENT),
        ("!", UnaryOperator.LOGICAL_NOT),
    ])
    def test_unary(self, symbol, operator):
        assert parse_expr(f"{symbol}5") == unary(operator, c(5))

    def test_stacked_unary(self):
        assert parse_expr("-~!3") == unary(
            UnaryOperator.NEGATE,
            unary(UnaryOperator.BITWISE_COMPLEMENT, unary(UnaryOperator.LOGICAL_NOT, c(3))),
        )

    def test_double_negation(self):
        """'- -5' is two negations; '--' is not a token."""
        assert parse_expr("--5") == unary(
            UnaryOperator.NEGATE, unary(UnaryOperator.NEGATE, c(5))
        )

    def test_unary_binds_tighter_than_binary(self):
        assert parse_expr("-2 * 3") == binary(
            BinaryOperator.MULTIPLY, unary(UnaryOperator.NEGATE, c(2)), c(3)
        )

    def test_unary_on_parenthesized(self):
        assert parse_expr("-(2 + 3)") == unary(
            UnaryOperator.NEGATE, binary(BinaryOperator.ADD, c(2), c(3))
        )

    def test_binary_minus_after_operand(self):
        assert parse_expr("2 - -3") == binary(
            BinaryOperator.SUBTRACT, c(2), unary(UnaryOperator.NEGATE, c(3))
        )

    def test_expression_to_string(self):
        assert expression_to_string(parse_expr("1 + 2 * -3 / 4")) == "(1 + ((2 * -3) / 4))"


# =============================================================================
# Syntax Error Tests
# =============================================================================

class TestSyntaxErrors:
    """Test that malformed programs are rejected."""

    @pytest.mark.parametrize("source", [
        "int main() { return 2 }",
        "int main() { return; }",
        "int main( { return 2; }",
        "int () { return 2; }",
        "main() { return 2; }",
        "int main() { 2; }",
        "int main() { return 2 + ; }",
        "int main() { return (2; }",
        "int main() { return 2 3; }",
        "int main() return 2; }",
        "int return() { return 2; }",
        "int main() { return 2;",
        "",
    ])
    def test_rejected(self, source):
        with pytest.raises(ParseError):
            parse_source(source)

    def test_missing_semicolon_location(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("int main(){return 2}", "prog.c")
        error = exc_info.value
        assert error.found == "}"
        assert error.expected == "';'"
        assert str(error.location) == "prog.c:1:20"
        assert "prog.c:1:20: error: unexpected token '}'" in str(error)
        assert "hint: expected ';'" in str(error)

    def test_missing_operand(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("int main() { return * 2; }")
        assert exc_info.value.found == "*"
        assert exc_info.value.expected == "expression"

    def test_empty_input(self):
        with pytest.raises(UnexpectedEndError) as exc_info:
            parse([])
        assert exc_info.value.expected == "'int'"
        assert exc_info.value.location is None

    def test_truncated_input(self):
        with pytest.raises(UnexpectedEndError) as exc_info:
            parse_source("int main() { return")
        assert exc_info.value.expected == "expression"
        assert exc_info.value.location.column == 14

    def test_missing_closing_brace(self):
        with pytest.raises(UnexpectedEndError) as exc_info:
            parse_source("int main() { return 2;")
        assert exc_info.value.expected == "'}'"

    def test_dropped_operand_becomes_syntax_error(self):
        """A lone '&' swallows the operand, leaving the parser short."""
        with pytest.raises(ParseError):
            parse_source("int main() { return &2; }")


# =============================================================================
# Trailing Token Tests
# =============================================================================

class TestTrailingTokens:
    """Test handling of tokens after the closing brace."""

    def test_trailing_tokens_ignored(self):
        program = parse_source("int main() { return 2; } int foo() { return 3; }")
        assert program.function.name == "main"
        assert program.function.body.value == c(2)

    def test_trailing_tokens_warning(self):
        collector = WarningCollector()
        parser = CParser(lex("int main() { return 2; } 5 6", "prog.c"), "prog.c", collector=collector)
        parser.parse()
        assert collector.warnings == [
            "prog.c:1:26: warning: ignored 2 token(s) after end of function 'main'"
        ]

    def test_trailing_tokens_strict(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("int main() { return 2; } }", strict=True)
        assert exc_info.value.expected == "end of input"

    def test_strict_accepts_exact_program(self):
        program = parse_source("int main() { return 2; }", strict=True)
        assert program.function.body.value == c(2)


# =============================================================================
# AST Printer Tests
# =============================================================================

class TestASTPrinter:
    """Test the debugging printer."""

    def test_print(self):
        program = parse_source("int main() { return -(1 + 2); }")
        assert ASTPrinter().print(program) == (
            "Program\n"
            "  Function: main\n"
            "    Return -(1 + 2)"
        )

    def test_print_reuses_printer(self):
        printer = ASTPrinter()
        printer.print(parse_source("int main() { return 1; }"))
        assert printer.print(parse_source("int foo() { return 2; }")) == (
            "Program\n"
            "  Function: foo\n"
            "    Return 2"
        )


class ConstantCollector(ASTVisitor):
    """Visitor that only knows about literals."""

    def __init__(self):
        self.values = []

    def visit_IntConstant(self, node):
        self.values.append(node.value)


class TestASTVisitor:
    """Test visitor dispatch and the child-walking fallback."""

    def test_fallback_reaches_every_literal(self):
        collector = ConstantCollector()
        collector.visit(parse_source("int main() { return -(1 + 2) * ~3 / !4; }"))
        assert collector.values == [1, 2, 3, 4]

    def test_dispatch_by_class_name(self):
        collector = ConstantCollector()
        collector.visit(IntConstant(9))
        assert collector.values == [9]
