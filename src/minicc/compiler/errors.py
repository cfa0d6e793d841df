"""
Compiler Error Hierarchy
========================

This module defines the exception hierarchy for the minicc compiler
pipeline. All exceptions inherit from CompilerError, which itself
inherits from MiniCCError.

Exception Hierarchy
-------------------
CompilerError (base for all compiler errors)
├── LexerError - source text could not be read or tokenized
│   ├── InvalidCharacterError - character that starts no token
│   ├── NumberOverflowError - literal does not fit in 64 bits
│   └── InvalidEncodingError - source file is not valid UTF-8
├── ParseError - token stream does not match the grammar
│   ├── UnexpectedTokenError - wrong token at this position
│   └── UnexpectedEndError - token stream ended too early
└── CodeGenError - AST could not be turned into assembly
    └── UnsupportedNodeError - node type unknown to the generator

Error Message Format
--------------------
    prog.c:1:19: error: unexpected token '}'
        int main(){return 2}
                          ^
    hint: expected ';'
"""

from typing import Optional, List

from minicc.errors import MiniCCError, SourceLocation


# =============================================================================
# Base Compiler Exception
# =============================================================================

class CompilerError(MiniCCError):
    """
    Base exception for all compiler errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with location, source context, and hint."""
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Lexical Errors
# =============================================================================

class LexerError(CompilerError):
    """
    Source text could not be read or tokenized.

    Apart from undecodable source files, these are only raised in strict
    mode. By default a span that cannot be classified is dropped and
    reported as a warning.
    """
    pass


class InvalidCharacterError(LexerError):
    """A character that does not begin any token."""

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"invalid character '{char}' (0x{ord(char):02X})",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class NumberOverflowError(LexerError):
    """Integer literal larger than an unsigned 64-bit value."""

    def __init__(
        self,
        text: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.text = text
        super().__init__(
            f"integer literal '{text}' does not fit in 64 bits",
            location=location,
            hint="the largest accepted literal is 18446744073709551615",
            source_line=source_line,
        )


class InvalidEncodingError(LexerError):
    """
    Source file bytes that do not decode as UTF-8.

    The location is the line and byte column of the first bad byte.
    """

    def __init__(self, data: bytes, offset: int, filename: str):
        self.offset = offset
        line_start = data.rfind(b"\n", 0, offset) + 1
        location = SourceLocation(
            filename,
            data.count(b"\n", 0, offset) + 1,
            offset - line_start + 1,
        )
        super().__init__(
            f"invalid UTF-8 byte 0x{data[offset]:02X} at offset {offset}",
            location=location,
            hint="save the source file as UTF-8",
        )


# =============================================================================
# Syntax Errors (Parser)
# =============================================================================

class ParseError(CompilerError):
    """
    Token stream does not match the grammar.

    Any mismatch aborts the whole parse; no partial tree is returned.
    """
    pass


class UnexpectedTokenError(ParseError):
    """Parser found a token that does not fit the grammar rule."""

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}"

        super().__init__(
            f"unexpected token '{found}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnexpectedEndError(ParseError):
    """Token stream ended while a grammar rule still needed input."""

    def __init__(
        self,
        expected: str,
        location: Optional[SourceLocation] = None,
    ):
        self.expected = expected
        super().__init__(
            f"unexpected end of input, expected {expected}",
            location=location,
        )


# =============================================================================
# Code Generation Errors
# =============================================================================

class CodeGenError(CompilerError):
    """Error during code generation."""
    pass


class UnsupportedNodeError(CodeGenError):
    """
    The code generator was handed a node it has no rule for.

    Unreachable for trees built by the parser.
    """

    def __init__(self, node: object, location: Optional[SourceLocation] = None):
        self.node = node
        super().__init__(
            f"cannot generate code for {type(node).__name__}",
            location=location,
        )


# =============================================================================
# Warning Collection
# =============================================================================

class WarningCollector:
    """
    Collects the non-fatal findings of the lexer and parser.

    Dropped spans and ignored trailing tokens are recorded here so the
    caller can show them after a successful compile.

    Example:
        collector = WarningCollector()
        tokens = lex(source, collector=collector)
        if collector.warning_count():
            print(collector.report())
    """

    def __init__(self):
        self.warnings: List[str] = []

    def add_warning(self, message: str, location: Optional[SourceLocation] = None) -> None:
        """Add a warning message."""
        if location:
            self.warnings.append(f"{location}: warning: {message}")
        else:
            self.warnings.append(f"warning: {message}")

    def warning_count(self) -> int:
        return len(self.warnings)

    def report(self) -> str:
        """Format all warnings followed by a count line."""
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        return "\n".join([*self.warnings, f"{len(self.warnings)} {warning_word}"])

    def clear(self) -> None:
        self.warnings.clear()
