"""
minicc Compiler Main Module
===========================

This module provides the main compiler interface. It orchestrates the
complete compilation process:

    Source → Lex → Parse → Generate → Assembly

Usage
-----
Command line:
    $ minicc -S prog.c

Programmatic:
    >>> from minicc.compiler import compile_c
    >>> asm = compile_c('int main() { return 5; }', target_platform="linux")
    >>> print(asm)
        .globl main
    main:
        movl $5, %eax
        ret
        .section .note.GNU-stack,"",@progbits

Error Handling
--------------
A failing stage raises its CompilerError and nothing after it runs.
Non-fatal findings from the lexer and parser (dropped spans, ignored
trailing tokens) are returned as warnings on the CompilerResult.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import logging

from minicc.compiler.lexer import CLexer, CToken
from minicc.compiler.parser import CParser
from minicc.compiler.codegen import CodeGenerator
from minicc.compiler.ast import ProgramNode
from minicc.compiler.errors import InvalidEncodingError, WarningCollector

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        strict: Turn lexical gaps and trailing tokens into errors instead
                of warnings
        target_platform: "linux" or "darwin"; None means the host platform
        cc: C compiler driver used to assemble and link (None = look up
            $MINICC_CC, then gcc/cc/clang)
    """
    strict: bool = False
    target_platform: Optional[str] = None
    cc: Optional[str] = None


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        success: True if compilation succeeded
        lines: Generated assembly lines
        assembly: Generated assembly text (lines joined, trailing newline)
        tokens: Tokens produced by the lexer
        ast: Abstract syntax tree (if parsing succeeded)
        warnings: Non-fatal diagnostics
    """
    filename: str = ""
    success: bool = False
    lines: list[str] = field(default_factory=list)
    assembly: str = ""
    tokens: list[CToken] = field(default_factory=list)
    ast: Optional[ProgramNode] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def token_count(self) -> int:
        return len(self.tokens)


class MiniCCompiler:
    """
    The minicc compiler.

    Example:
        compiler = MiniCCompiler()
        result = compiler.compile_file("prog.c")
        print(result.assembly)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()
        self._warnings = WarningCollector()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile source text to assembly.

        Args:
            source: Program text
            filename: Source filename for error messages

        Returns:
            CompilerResult containing assembly output and diagnostics

        Raises:
            CompilerError: If any stage fails
        """
        self._warnings.clear()
        result = CompilerResult(filename=filename)

        # Stage 1: Lexical analysis
        result.tokens = self._lex(source, filename)
        logger.info(f"{filename}: {result.token_count} tokens")

        # Stage 2: Parsing
        result.ast = self._parse(result.tokens, filename, source.splitlines())

        # Stage 3: Code generation
        result.lines = self._generate(result.ast)
        result.assembly = "\n".join(result.lines) + "\n"
        result.success = True

        result.warnings = list(self._warnings.warnings)
        for warning in result.warnings:
            logger.info(warning)
        logger.info(f"{filename}: generated {len(result.lines)} lines of assembly")

        return result

    def compile_file(self, filepath: str | Path) -> CompilerResult:
        """
        Compile a source file to assembly.

        Raises:
            CompilerError: If compilation fails, including
                           InvalidEncodingError for non-UTF-8 source
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        data = path.read_bytes()
        try:
            source = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidEncodingError(data, e.start, str(filepath)) from e

        return self.compile_source(source, str(filepath))

    def _lex(self, source: str, filename: str) -> list[CToken]:
        lexer = CLexer(source, filename, strict=self.options.strict, collector=self._warnings)
        return list(lexer.tokenize())

    def _parse(self, tokens: list[CToken], filename: str, source_lines: list[str]) -> ProgramNode:
        parser = CParser(
            tokens,
            filename,
            source_lines,
            strict=self.options.strict,
            collector=self._warnings,
        )
        return parser.parse()

    def _generate(self, ast: ProgramNode) -> list[str]:
        generator = CodeGenerator(target_platform=self.options.target_platform)
        return generator.generate(ast)


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_c(
    source: str,
    filename: str = "<input>",
    strict: bool = False,
    target_platform: Optional[str] = None,
) -> str:
    """
    Compile source text to x86-64 assembly.

    Returns:
        Generated assembly text

    Raises:
        CompilerError: If compilation fails
    """
    options = CompilerOptions(strict=strict, target_platform=target_platform)
    return MiniCCompiler(options).compile_source(source, filename).assembly


def compile_file(
    filepath: str | Path,
    output_path: Optional[str | Path] = None,
    strict: bool = False,
    target_platform: Optional[str] = None,
) -> str:
    """
    Compile a source file to x86-64 assembly.

    Args:
        filepath: Path to the source file
        output_path: Optional path to write assembly output
        strict: Strict lexing and parsing
        target_platform: "linux" or "darwin" (default: host)

    Returns:
        Generated assembly text

    Raises:
        CompilerError: If compilation fails
        FileNotFoundError: If source file not found
    """
    options = CompilerOptions(strict=strict, target_platform=target_platform)
    result = MiniCCompiler(options).compile_file(filepath)

    if output_path:
        Path(output_path).write_text(result.assembly, encoding="utf-8")
        logger.info(f"Wrote assembly to {output_path}")

    return result.assembly
