#!/usr/bin/env python3
"""
Management script for running CLI commands
"""

import sys

if __name__ == "__main__":
    from docmapper.interfaces.cli.main import main

    sys.exit(main())
