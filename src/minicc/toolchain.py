"""
Native Toolchain Wrapper
========================

Turns the assembly written by the compiler into an executable by
handing it to the system C compiler driver, and runs the result.

    prog.s ──cc -o prog prog.s──▶ prog ──run──▶ exit status

The C compiler driver is resolved in this order:

1. an explicit name or path passed by the caller (--cc on the CLI)
2. the MINICC_CC environment variable
3. gcc, cc, clang (first one found on PATH)

The driver supplies the C runtime start-up code, which calls `main`
and passes its return value to exit(), so the program's exit status
is the returned value modulo 256.
"""

from pathlib import Path
from typing import Optional
import logging
import os
import shutil
import subprocess

from minicc.errors import ToolchainError

logger = logging.getLogger(__name__)

# Environment variable naming the C compiler driver
CC_ENV_VAR = "MINICC_CC"

# Drivers tried when nothing is configured
DEFAULT_COMPILERS = ("gcc", "cc", "clang")


def find_c_compiler(preferred: Optional[str] = None) -> str:
    """
    Locate the C compiler driver used to assemble and link.

    Args:
        preferred: Name or path of a specific driver to use

    Returns:
        Full path of the driver

    Raises:
        ToolchainError: If the requested (or any default) driver is missing
    """
    requested = preferred or os.environ.get(CC_ENV_VAR)
    if requested:
        path = shutil.which(requested)
        if path is None:
            raise ToolchainError(f"C compiler '{requested}' not found")
        return path

    for name in DEFAULT_COMPILERS:
        path = shutil.which(name)
        if path is not None:
            logger.debug(f"Using C compiler {path}")
            return path

    raise ToolchainError(
        f"no C compiler found (tried {', '.join(DEFAULT_COMPILERS)}); "
        f"set {CC_ENV_VAR} or pass --cc"
    )


def assemble_and_link(
    asm_path: str | Path,
    binary_path: str | Path,
    cc: Optional[str] = None,
) -> Path:
    """
    Assemble and link an assembly file into an executable.

    Args:
        asm_path: The .s file to assemble
        binary_path: Where to write the executable
        cc: C compiler driver (see find_c_compiler)

    Returns:
        Path of the executable

    Raises:
        ToolchainError: If the driver is missing or exits with an error
    """
    compiler = find_c_compiler(cc)
    command = [compiler, "-o", str(binary_path), str(asm_path)]
    logger.info(f"Running {' '.join(command)}")

    try:
        completed = subprocess.run(command, capture_output=True, text=True, check=False)
    except OSError as e:
        raise ToolchainError(f"could not run C compiler: {e}", command) from e

    if completed.returncode != 0:
        raise ToolchainError(
            f"C compiler exited with status {completed.returncode}",
            command,
            completed.returncode,
            completed.stderr,
        )

    if completed.stderr:
        logger.warning(completed.stderr.rstrip())

    return Path(binary_path)


def run_executable(binary_path: str | Path, timeout: float = 10.0) -> int:
    """
    Run a compiled program and return its exit status.

    A negative status means the program was killed by that signal
    (for example -8, SIGFPE, after a division by zero).

    Raises:
        ToolchainError: If the program cannot be started or times out
    """
    path = Path(binary_path).resolve()
    command = [str(path)]
    logger.debug(f"Running {path}")

    try:
        completed = subprocess.run(command, capture_output=True, timeout=timeout, check=False)
    except subprocess.TimeoutExpired as e:
        raise ToolchainError(f"program timed out after {timeout} seconds", command) from e
    except OSError as e:
        raise ToolchainError(f"could not run program: {e}", command) from e

    logger.debug(f"{path} exited with status {completed.returncode}")
    return completed.returncode
