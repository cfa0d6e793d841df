"""
minicc Recursive Descent Parser
===============================

This module implements a recursive descent parser for the minicc
language. It takes the token list from the lexer and builds an
Abstract Syntax Tree (AST).

Grammar (EBNF)
--------------
program     ::= function
function    ::= 'int' IDENTIFIER '(' ')' '{' statement '}'
statement   ::= 'return' expression ';'
expression  ::= term (('+' | '-') term)*
term        ::= factor (('*' | '/') factor)*
factor      ::= NUMBER
              | '(' expression ')'
              | ('-' | '~' | '!') factor

Expression Precedence (lowest to highest)
-----------------------------------------
1. additive        + -     (left-associative)
2. multiplicative  * /     (left-associative)
3. unary           - ~ !   (prefix, stackable)
4. primary         NUMBER, '(' expression ')'

Binary levels are folded left in a loop, so `8 - 3 - 2` parses as
`(8 - 3) - 2`.

Error Handling
--------------
Any mismatch raises a ParseError immediately and abandons the whole
parse; no partial tree is returned. Tokens after the closing '}' are
ignored with a warning, or rejected in strict mode. Parentheses and
unary operators nested deeper than the interpreter stack allows are
reported as a ParseError as well.

Example Usage
-------------
>>> from minicc.compiler.lexer import lex
>>> from minicc.compiler.parser import CParser
>>> ast = CParser(lex('int main() { return 2 + 3 * 4; }')).parse()
>>> ast.function.body.value.operator
<BinaryOperator.ADD: 1>
"""

from typing import Callable, Optional
import logging

from minicc.compiler.lexer import CLexer, CToken, TokenType
from minicc.compiler.ast import (
    ProgramNode,
    FunctionNode,
    ReturnStatement,
    Expression,
    BinaryExpression,
    UnaryExpression,
    IntConstant,
    BinaryOperator,
    UnaryOperator,
)
from minicc.compiler.errors import (
    WarningCollector,
    ParseError,
    UnexpectedTokenError,
    UnexpectedEndError,
)

logger = logging.getLogger(__name__)


UNARY_OPERATORS: dict[TokenType, UnaryOperator] = {
    TokenType.MINUS: UnaryOperator.NEGATE,
    TokenType.TILDE: UnaryOperator.BITWISE_COMPLEMENT,
    TokenType.NOT: UnaryOperator.LOGICAL_NOT,
}

ADDITIVE_OPERATORS: dict[TokenType, BinaryOperator] = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUBTRACT,
}

MULTIPLICATIVE_OPERATORS: dict[TokenType, BinaryOperator] = {
    TokenType.STAR: BinaryOperator.MULTIPLY,
    TokenType.SLASH: BinaryOperator.DIVIDE,
}


class CParser:
    """
    Recursive descent parser for minicc.

    Each grammar rule is a method that advances a shared cursor over the
    token list, with one token of lookahead.

    Attributes:
        tokens: List of tokens to parse
        filename: Source filename for error reporting
        strict: Reject tokens after the function instead of ignoring them
    """

    def __init__(
        self,
        tokens: list[CToken],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
        strict: bool = False,
        collector: Optional[WarningCollector] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from the lexer
            filename: Source filename for error messages
            source_lines: Original source lines for error context
            strict: Reject trailing tokens after the function body
            collector: Receives a warning when trailing tokens are ignored
        """
        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []
        self.strict = strict
        self.collector = collector

        # Current position in token stream
        self._pos = 0

    def parse(self) -> ProgramNode:
        """
        Parse the token list into an AST.

        Returns:
            ProgramNode wrapping the program's function

        Raises:
            ParseError: If the tokens do not form a valid program
        """
        self._pos = 0
        try:
            function = self._parse_function()
        except RecursionError:
            raise self._nested_too_deeply() from None

        if not self._at_end():
            trailing = self._peek()
            if self.strict:
                raise self._unexpected(trailing, "end of input")
            remaining = len(self.tokens) - self._pos
            message = f"ignored {remaining} token(s) after end of function '{function.name}'"
            logger.debug(f"{trailing.location}: {message}")
            if self.collector is not None:
                self.collector.add_warning(message, trailing.location)

        return ProgramNode(function, location=function.location)

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.tokens)

    def _peek(self) -> Optional[CToken]:
        """Look at the current token; None once the list is exhausted."""
        if self._at_end():
            return None
        return self.tokens[self._pos]

    def _advance(self) -> CToken:
        token = self.tokens[self._pos]
        self._pos += 1
        return token

    def _check(self, *types: TokenType) -> bool:
        token = self._peek()
        return token is not None and token.type in types

    def _expect(self, token_type: TokenType, description: str) -> CToken:
        """
        Consume a token of the given type.

        Args:
            token_type: The expected token type
            description: How the expected token is named in error messages

        Raises:
            UnexpectedEndError: If there are no tokens left
            UnexpectedTokenError: If the current token has another type
        """
        token = self._peek()
        if token is None:
            raise self._unexpected_end(description)
        if token.type != token_type:
            raise self._unexpected(token, description)
        return self._advance()

    def _unexpected(self, token: CToken, expected: str) -> UnexpectedTokenError:
        return UnexpectedTokenError(
            token.text,
            expected=expected,
            location=token.location,
            source_line=self._get_source_line(token.line),
        )

    def _unexpected_end(self, expected: str) -> UnexpectedEndError:
        location = self.tokens[-1].location if self.tokens else None
        return UnexpectedEndError(expected, location)

    def _nested_too_deeply(self) -> ParseError:
        """Error for parentheses or unary operators nested past the call stack."""
        token = self._peek() or (self.tokens[-1] if self.tokens else None)
        if token is None:
            return ParseError("expression nested too deeply")
        return ParseError(
            "expression nested too deeply",
            location=token.location,
            hint="split the expression or reduce the nesting of '(' and unary operators",
            source_line=self._get_source_line(token.line),
        )

    def _get_source_line(self, line: int) -> Optional[str]:
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    # =========================================================================
    # Function and Statement Parsing
    # =========================================================================

    def _parse_function(self) -> FunctionNode:
        """Parse `int name() { statement }`."""
        int_token = self._expect(TokenType.INT, "'int'")
        name_token = self._expect(TokenType.IDENTIFIER, "function name")
        self._expect(TokenType.LPAREN, "'('")
        self._expect(TokenType.RPAREN, "')'")
        self._expect(TokenType.LBRACE, "'{'")
        body = self._parse_statement()
        self._expect(TokenType.RBRACE, "'}'")

        logger.debug(f"Parsed function '{name_token.value}'")
        return FunctionNode(name_token.value, body, location=int_token.location)

    def _parse_statement(self) -> ReturnStatement:
        """Parse `return expression ;`."""
        return_token = self._expect(TokenType.RETURN, "'return'")
        value = self._parse_expression()
        self._expect(TokenType.SEMICOLON, "';'")
        return ReturnStatement(value, location=return_token.location)

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """Parse additive expression (+ -)."""
        return self._parse_binary(self._parse_term, ADDITIVE_OPERATORS)

    def _parse_term(self) -> Expression:
        """Parse multiplicative expression (* /)."""
        return self._parse_binary(self._parse_factor, MULTIPLICATIVE_OPERATORS)

    def _parse_binary(
        self,
        operand_parser: Callable[[], Expression],
        operators: dict[TokenType, BinaryOperator],
    ) -> Expression:
        """
        Generic left-associative binary expression parser.

        Each operator found makes the tree built so far the left operand
        of a new node.

        Args:
            operand_parser: Function to parse operands
            operators: Map of token types to binary operators
        """
        expr = operand_parser()

        while self._check(*operators):
            op_token = self._advance()
            right = operand_parser()
            expr = BinaryExpression(
                operators[op_token.type],
                expr,
                right,
                location=expr.location,
            )

        return expr

    def _parse_factor(self) -> Expression:
        """Parse a literal, a parenthesized expression, or a unary operation."""
        token = self._peek()

        if token is None:
            raise self._unexpected_end("expression")

        if token.type == TokenType.NUMBER:
            self._advance()
            return IntConstant(token.value, location=token.location)

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._expect(TokenType.RPAREN, "')'")
            return expr

        if token.type in UNARY_OPERATORS:
            self._advance()
            operand = self._parse_factor()
            return UnaryExpression(
                UNARY_OPERATORS[token.type],
                operand,
                location=token.location,
            )

        raise self._unexpected(token, "expression")


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(tokens: list[CToken], strict: bool = False) -> ProgramNode:
    """
    Parse a token list into an AST.

    Raises:
        ParseError: If the tokens do not form a valid program
    """
    return CParser(tokens, strict=strict).parse()


def parse_source(source: str, filename: str = "<input>", strict: bool = False) -> ProgramNode:
    """
    Lex and parse source text in one step.

    Args:
        source: Program text
        filename: Source filename for error messages
        strict: Strict lexing and parsing

    Returns:
        The root ProgramNode of the AST

    Raises:
        CompilerError: If lexing (strict mode) or parsing fails
    """
    lexer = CLexer(source, filename, strict=strict)
    tokens = list(lexer.tokenize())
    parser = CParser(tokens, filename, source.splitlines(), strict=strict)
    return parser.parse()
