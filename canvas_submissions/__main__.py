"""
Entry point for running the CLI as a module.

This allows running: python -m canvas_submissions --course 12345
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
