# =============================================================================
# test_cli.py - Command-Line Interface Tests
# =============================================================================
# Tests for the minicc command. Everything here stops before the native
# toolchain (-S, --ast, --tokens) or points --cc at a missing compiler, so
# no assembler or linker is needed.
# =============================================================================

from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from minicc import __version__
from minicc.cli.mcc import main, default_executable_path
from minicc.cli.errors import ExitCode, handle_cli_exception
from minicc.compiler.errors import UnexpectedTokenError
from minicc.errors import ToolchainError


PROGRAM = "int main() { return 2 + 3; }\n"


@pytest.fixture
def runner():
    return CliRunner()


# =============================================================================
# Assembly Output Tests
# =============================================================================

class TestAssemblyOutput:
    """Test -S and the assembly file location."""

    def test_assembly_only(self, runner):
        with runner.isolated_filesystem():
            Path("prog.c").write_text(PROGRAM)
            result = runner.invoke(main, ["-S", "--target", "linux", "prog.c"])

            assert result.exit_code == ExitCode.SUCCESS, result.output
            assert "Compiled prog.c -> prog.s" in result.output
            asm = Path("prog.s").read_text()
            assert asm.startswith("\t.globl main\nmain:\n")
            assert not Path("prog").exists()

    def test_asm_output_path(self, runner):
        with runner.isolated_filesystem():
            Path("prog.c").write_text(PROGRAM)
            result = runner.invoke(main, ["-S", "--asm-output", "out.s", "prog.c"])

            assert result.exit_code == 0, result.output
            assert Path("out.s").exists()
            assert not Path("prog.s").exists()

    def test_darwin_target(self, runner):
        with runner.isolated_filesystem():
            Path("prog.c").write_text(PROGRAM)
            result = runner.invoke(main, ["-S", "--target", "darwin", "prog.c"])

            assert result.exit_code == 0, result.output
            assert "_main:" in Path("prog.s").read_text()

    def test_verbose(self, runner):
        with runner.isolated_filesystem():
            Path("prog.c").write_text(PROGRAM)
            result = runner.invoke(main, ["-S", "-v", "prog.c"])

            assert result.exit_code == 0, result.output
            assert "Compiling prog.c..." in result.output
            assert "Tokenized: 11 tokens" in result.output

    def test_warning_printed(self, runner):
        with runner.isolated_filesystem():
            Path("prog.c").write_text("int main() { return 2 $; }\n")
            result = runner.invoke(main, ["-S", "prog.c"])

            assert result.exit_code == 0, result.output
            assert "prog.c:1:23: warning: ignored character '$'" in result.output


# =============================================================================
# Debug Dump Tests
# =============================================================================

class TestDebugDumps:
    """Test --tokens and --ast."""

    def test_tokens(self, runner):
        with runner.isolated_filesystem():
            Path("prog.c").write_text("int main() { return 42; }")
            result = runner.invoke(main, ["--tokens", "prog.c"])

            assert result.exit_code == 0, result.output
            assert "Token(INT, 1:1)" in result.output
            assert "Token(IDENTIFIER, 'main', 1:5)" in result.output
            assert "Token(NUMBER, 42, 1:21)" in result.output
            assert not Path("prog.s").exists()

    def test_ast(self, runner):
        with runner.isolated_filesystem():
            Path("prog.c").write_text("int main() { return -(1 + 2) * 3; }")
            result = runner.invoke(main, ["--ast", "prog.c"])

            assert result.exit_code == 0, result.output
            assert "Program\n  Function: main\n    Return (-(1 + 2) * 3)" in result.output
            assert not Path("prog.s").exists()

    def test_ast_long_chain(self, runner):
        with runner.isolated_filesystem():
            terms = " + ".join(["1"] * 2000)
            Path("prog.c").write_text(f"int main() {{ return {terms}; }}")
            result = runner.invoke(main, ["--ast", "prog.c"])

            assert result.exit_code == 0, result.output
            assert "    Return " + "(" * 1999 + "1 + 1) + 1)" in result.output

    def test_long_chain_assembly(self, runner):
        with runner.isolated_filesystem():
            terms = " - ".join(["3"] * 2000)
            Path("prog.c").write_text(f"int main() {{ return {terms}; }}")
            result = runner.invoke(main, ["-S", "--target", "linux", "prog.c"])

            assert result.exit_code == 0, result.output
            assert Path("prog.s").read_text().count("\tsubl %eax, %ecx") == 1999


# =============================================================================
# Error Handling Tests
# =============================================================================

class TestErrors:
    """Test exit codes and messages for failures."""

    def test_syntax_error(self, runner):
        with runner.isolated_filesystem():
            Path("prog.c").write_text("int main(){return 2}")
            result = runner.invoke(main, ["-S", "prog.c"])

            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "prog.c:1:20: error: unexpected token '}'" in result.output
            assert not Path("prog.s").exists()

    def test_strict_rejects_unknown_character(self, runner):
        with runner.isolated_filesystem():
            Path("prog.c").write_text("int main() { return 2 $; }")
            result = runner.invoke(main, ["-S", "--strict", "prog.c"])

            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "invalid character '$'" in result.output

    def test_invalid_utf8_source(self, runner):
        """Undecodable source is a compile error, not an internal error."""
        with runner.isolated_filesystem():
            Path("prog.c").write_bytes(b"int main() { return 2; }\n\xff")
            result = runner.invoke(main, ["-S", "prog.c"])

            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "prog.c:2:1: error: invalid UTF-8 byte 0xFF at offset 25" in result.output
            assert "Internal error" not in result.output

    def test_deep_nesting(self, runner):
        with runner.isolated_filesystem():
            Path("prog.c").write_text(
                "int main() { return " + "(" * 1000 + "1" + ")" * 1000 + "; }"
            )
            result = runner.invoke(main, ["-S", "prog.c"])

            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "error: expression nested too deeply" in result.output

    def test_missing_input(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["missing.c"])
            assert result.exit_code == ExitCode.INVALID_ARGS

    def test_bad_target(self, runner):
        with runner.isolated_filesystem():
            Path("prog.c").write_text(PROGRAM)
            result = runner.invoke(main, ["--target", "windows", "prog.c"])
            assert result.exit_code == ExitCode.INVALID_ARGS

    def test_missing_c_compiler(self, runner):
        with runner.isolated_filesystem():
            Path("prog.c").write_text(PROGRAM)
            result = runner.invoke(main, ["--cc", "no-such-compiler-xyz", "prog.c"])

            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "C compiler 'no-such-compiler-xyz' not found" in result.output
            # Assembly is written before linking is attempted
            assert Path("prog.s").exists()

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestHandleCliException:
    """Test the exception to exit code mapping directly."""

    @pytest.mark.parametrize("error,code", [
        (UnexpectedTokenError("}", "';'"), ExitCode.BUILD_ERROR),
        (ToolchainError("link failed"), ExitCode.BUILD_ERROR),
        (click.BadParameter("bad"), ExitCode.INVALID_ARGS),
        (FileNotFoundError("gone"), ExitCode.INVALID_ARGS),
        (PermissionError("denied"), ExitCode.INVALID_ARGS),
        (RuntimeError("bug"), ExitCode.INTERNAL_ERROR),
    ])
    def test_exit_code(self, error, code):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(error)
        assert exc_info.value.code == code

    def test_toolchain_message(self, capsys):
        with pytest.raises(SystemExit):
            handle_cli_exception(ToolchainError("link failed", ["cc", "p.s"]))
        assert capsys.readouterr().err == "Error: link failed\ncommand: cc p.s\n"

    def test_compiler_error_unprefixed(self, capsys):
        with pytest.raises(SystemExit):
            handle_cli_exception(UnexpectedTokenError("}", "';'"))
        assert capsys.readouterr().err.startswith("error: unexpected token '}'")


# =============================================================================
# Output Path Tests
# =============================================================================

class TestDefaultExecutablePath:
    """Test the default executable location."""

    def test_strips_suffix(self):
        assert default_executable_path(Path("dir/prog.c")) == Path("dir/prog")

    def test_no_suffix(self):
        """A source without suffix must not be overwritten."""
        assert default_executable_path(Path("prog")) == Path("prog.out")
