"""
BigRedact - Python package for rotating, annotating and redacting document pages

This package provides the editor core (pages, viewport, drawing tool,
exporter) and a command line front end for it.
"""

import sys

__version__ = "1.0.0"
__author__ = "BigLinux Team"
__license__ = "GPL-3.0"


def main() -> int:
    """Entry point for the application."""
    from bigredact.cli import main as cli_main

    return cli_main(sys.argv[1:])
