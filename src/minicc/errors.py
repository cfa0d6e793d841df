"""
minicc Error Hierarchy
======================

This module defines the root of the exception hierarchy for minicc.
All exceptions inherit from MiniCCError, allowing callers to catch every
minicc-related failure with a single except clause if desired.

Exception Hierarchy
-------------------
MiniCCError (base)
├── CompilerError (see minicc.compiler.errors)
│   ├── LexerError
│   ├── ParseError
│   └── CodeGenError
└── ToolchainError - the native assembler/linker failed or is missing

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional, Sequence


# =============================================================================
# Base Exception Class
# =============================================================================

class MiniCCError(Exception):
    """
    Base exception for all minicc errors.

    Catch this to handle every failure raised by the compiler pipeline
    and the toolchain wrapper:

        try:
            compile_file("prog.c")
        except MiniCCError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in source code, used for diagnostics.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Toolchain Exceptions
# =============================================================================

class ToolchainError(MiniCCError):
    """
    The external C compiler driver could not assemble or link the output.

    Attributes:
        command: The command line that was run (empty if it never started)
        returncode: Exit status of the command, or None if it never ran
        stderr: Captured standard error of the command
    """

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        self.message = message
        self.command = list(command or [])
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.command:
            parts.append(f"command: {' '.join(self.command)}")
        if self.stderr:
            parts.append(self.stderr.rstrip())
        return "\n".join(parts)
