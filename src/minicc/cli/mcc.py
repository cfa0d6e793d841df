"""
minicc - Compiler Command-Line Interface
========================================

This module implements the `minicc` command. It compiles a source file
to x86-64 assembly, then hands the assembly to the system C compiler
to produce a native executable.

Usage Examples
--------------
Build an executable:
    $ minicc prog.c                  # writes prog.s and prog

Assembly only:
    $ minicc -S prog.c               # writes prog.s

Build and run:
    $ minicc prog.c --run
    prog exited with code 42

Debugging:
    $ minicc --tokens prog.c
    $ minicc --ast prog.c
    $ minicc -v prog.c
"""

import logging
from pathlib import Path
from typing import Optional

import click

from minicc import __version__
from minicc.compiler import MiniCCompiler, CompilerOptions
from minicc.compiler.ast import ASTPrinter
from minicc.toolchain import assemble_and_link, run_executable
from minicc.cli.errors import handle_cli_exception

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def default_executable_path(input_file: Path) -> Path:
    """Executable path for a source file: the input without its suffix."""
    output = input_file.with_suffix("")
    if output == input_file:
        output = input_file.with_name(f"{input_file.name}.out")
    return output


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output executable (default: input without suffix)",
)
@click.option(
    "-S", "--assembly-only",
    is_flag=True,
    help="Write the assembly file only, do not assemble or link",
)
@click.option(
    "--asm-output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output assembly file (default: input.s)",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print AST and exit (for debugging)",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print tokens and exit (for debugging)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Treat unrecognised characters and trailing tokens as errors",
)
@click.option(
    "--target",
    type=click.Choice(["linux", "darwin"], case_sensitive=False),
    default=None,
    help="Symbol naming convention of the target (default: host platform)",
)
@click.option(
    "--cc",
    default=None,
    help="C compiler driver used to assemble and link (default: $MINICC_CC, gcc, cc, clang)",
)
@click.option(
    "--run",
    is_flag=True,
    help="Run the executable and print its exit code",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="minicc")
def main(
    input_file: Path,
    output: Optional[Path],
    assembly_only: bool,
    asm_output: Optional[Path],
    ast: bool,
    tokens: bool,
    strict: bool,
    target: Optional[str],
    cc: Optional[str],
    run: bool,
    verbose: bool,
) -> None:
    """
    Compile a minicc program to an x86-64 executable.

    INPUT_FILE is the C source file (.c) to compile. The program is a
    single function returning one integer expression; the executable
    exits with that value modulo 256.

    \b
    Examples:
        minicc prog.c                # Outputs prog.s and prog
        minicc -S prog.c             # Outputs prog.s only
        minicc prog.c -o build/prog  # Specify executable
        minicc prog.c --run          # Build, run, print exit code
        minicc --ast prog.c          # Show the parse tree

    \b
    Supported C features:
        - int main() { return EXPR; }
        - Unsigned decimal literals
        - Unary - ~ !, binary + - * /, parentheses
    """
    setup_logging(verbose)

    if asm_output is None:
        asm_output = input_file.with_suffix(".s")
    if output is None:
        output = default_executable_path(input_file)

    options = CompilerOptions(
        strict=strict,
        target_platform=target.lower() if target else None,
        cc=cc,
    )
    logger.debug(f"{options}")

    try:
        if verbose:
            click.echo(f"Compiling {input_file}...")

        compiler = MiniCCompiler(options)
        result = compiler.compile_file(input_file)

        for warning in result.warnings:
            click.echo(warning, err=True)

        # Debug dump modes
        if tokens:
            for token in result.tokens:
                click.echo(repr(token))
        if ast:
            click.echo(ASTPrinter().print(result.ast))
        if tokens or ast:
            return

        asm_output.write_text(result.assembly, encoding="utf-8")

        if verbose:
            click.echo(f"Tokenized: {result.token_count} tokens")
            click.echo(f"Wrote {len(result.lines)} lines to {asm_output}")

        if assembly_only:
            click.echo(f"Compiled {input_file} -> {asm_output}")
            return

        assemble_and_link(asm_output, output, options.cc)
        click.echo(f"Built {input_file} -> {output}")

        if run:
            exit_code = run_executable(output)
            click.echo(f"{output} exited with code {exit_code}")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
