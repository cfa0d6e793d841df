"""
minicc - A Tiny C Compiler for x86-64
=====================================

This package compiles a minimal subset of C, a single function that
returns one integer expression, into x86-64 assembly in AT&T syntax,
and drives the system C compiler to turn that assembly into a native
executable.

    int main() { return (2 + 3) * ~4 / !0; }

Main Components
---------------
- **compiler**: Lexer, recursive descent parser, AST and code generator
    Converts source text (.c) to assembly text (.s)

- **toolchain**: Native toolchain wrapper
    Assembles and links the .s file with gcc/cc/clang and runs the result

- **cli**: The `minicc` command-line tool

Quick Start
-----------
Compile a string:
    >>> from minicc import compile_c
    >>> asm = compile_c("int main() { return 2; }", target_platform="linux")

Build and run an executable:
    >>> from minicc import compile_file, assemble_and_link, run_executable
    >>> compile_file("prog.c", "prog.s")
    >>> assemble_and_link("prog.s", "prog")
    >>> run_executable("prog")
    2

Or use the command-line tool:
    $ minicc prog.c --run

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from minicc.errors import MiniCCError, SourceLocation, ToolchainError
from minicc.compiler import (
    MiniCCompiler,
    CompilerOptions,
    CompilerResult,
    CompilerError,
    compile_c,
    compile_file,
)
from minicc.toolchain import assemble_and_link, find_c_compiler, run_executable

__all__ = [
    "__version__",
    # Errors
    "MiniCCError",
    "SourceLocation",
    "ToolchainError",
    "CompilerError",
    # Compiler
    "MiniCCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_c",
    "compile_file",
    # Toolchain
    "assemble_and_link",
    "find_c_compiler",
    "run_executable",
]
