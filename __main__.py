"""
Main entry point for running as a package.

This allows running the CLI directly from the project directory:
    python . solve first_example
"""

import sys
from cli import main

if __name__ == "__main__":
    sys.exit(main())
