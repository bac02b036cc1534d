"""
Module execution entry point.

Allows running with: python -m mmr_cli
"""

import sys
from mmr_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
