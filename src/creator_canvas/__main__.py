"""
Entry point for running Creator Canvas as a module.

Usage:
    python -m creator_canvas
"""

import sys

from creator_canvas.main import main

if __name__ == "__main__":
    sys.exit(main())
