"""
minicc Command-Line Interface
=============================

- **minicc**: compile, assemble, link and optionally run a program

The tool is a Click application; shared exit codes and exception
handling live in minicc.cli.errors.
"""

__all__ = ["mcc"]
