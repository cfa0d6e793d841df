"""
minicc Compiler
===============

A three-stage translator from a tiny C subset to x86-64 assembly:

- A lexer (tokenizer) for the source text
- A recursive descent parser producing an AST
- A code generator emitting AT&T-syntax assembly

Pipeline
--------
    Source → Lexer → Parser → AST → Code Generator → Assembly

The stages run strictly in sequence; each consumes the whole output of
the previous one. The generated assembly is assembled and linked by
the system C compiler (see minicc.toolchain).

Language
--------
A program is exactly one function returning one integer expression:

    int main() { return -(2 + 3) * ~4 / !0; }

Supported:
- Unsigned decimal literals
- Unary operators: - ~ !
- Binary operators: + - * / (left-associative, * / bind tighter)
- Parentheses

Not supported:
- Variables, statements other than return, control flow
- More than one function

Usage
-----
>>> from minicc.compiler import compile_c
>>> asm_output = compile_c('int main() { return 42; }')
"""

from minicc.compiler.compiler import (
    MiniCCompiler,
    CompilerOptions,
    CompilerResult,
    compile_c,
    compile_file,
)
from minicc.compiler.errors import (
    CompilerError,
    LexerError,
    InvalidCharacterError,
    NumberOverflowError,
    InvalidEncodingError,
    ParseError,
    UnexpectedTokenError,
    UnexpectedEndError,
    CodeGenError,
    UnsupportedNodeError,
    WarningCollector,
)
from minicc.compiler.lexer import CLexer, TokenType, CToken, lex
from minicc.compiler.parser import CParser, parse, parse_source
from minicc.compiler.codegen import CodeGenerator, generate
from minicc.compiler.ast import (
    ASTNode,
    ProgramNode,
    FunctionNode,
    ReturnStatement,
    Expression,
    UnaryExpression,
    BinaryExpression,
    IntConstant,
    UnaryOperator,
    BinaryOperator,
    ASTPrinter,
)

__all__ = [
    # Main API
    "MiniCCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_c",
    "compile_file",
    # Errors
    "CompilerError",
    "LexerError",
    "InvalidCharacterError",
    "NumberOverflowError",
    "InvalidEncodingError",
    "ParseError",
    "UnexpectedTokenError",
    "UnexpectedEndError",
    "CodeGenError",
    "UnsupportedNodeError",
    "WarningCollector",
    # Lexer
    "CLexer",
    "TokenType",
    "CToken",
    "lex",
    # Parser
    "CParser",
    "parse",
    "parse_source",
    # Code Generator
    "CodeGenerator",
    "generate",
    # AST Nodes
    "ASTNode",
    "ProgramNode",
    "FunctionNode",
    "ReturnStatement",
    "Expression",
    "UnaryExpression",
    "BinaryExpression",
    "IntConstant",
    "UnaryOperator",
    "BinaryOperator",
    "ASTPrinter",
]
