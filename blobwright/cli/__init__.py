"""Blobwright CLI — Typer-based command-line interface.

Provides the ``blobwright`` command. ``upgrade`` is the main entry point;
``status`` and ``resolve`` are read-only helpers.

All output uses Rich for formatted terminal display.
"""
