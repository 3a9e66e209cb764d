"""
Command-line Layer.

This package contains the Typer application and its Rich-based console
output: tables, summary panels and the transfer progress display.
"""
