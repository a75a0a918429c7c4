#!/usr/bin/env python3
"""
BigRedact - Entry point for python -m bigredact

This module allows the package to be run as a module:
    python -m bigredact export scan.pdf -o out/
"""

import sys

from bigredact import main

if __name__ == "__main__":
    sys.exit(main())
