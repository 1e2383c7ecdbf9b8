"""
Module execution entry point.

Allows running with: python -m imtree_cli
"""

import sys
from imtree_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
