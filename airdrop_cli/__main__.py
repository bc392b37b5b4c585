"""
Module execution entry point.

Allows running with: python -m airdrop_cli
"""

import sys
from airdrop_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
