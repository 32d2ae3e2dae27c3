"""
VC8000 Command-Line Interface
=============================

This package provides the command-line tool for the VC8000 toolchain:

- **vcasm**: assemble a program, show its symbol table and translation,
  then run it on the emulator

The tool is a Click-based CLI application with help and error reporting.
"""

__all__ = ["vcasm"]
