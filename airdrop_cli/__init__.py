"""
Airdrop CLI

Command-line interface for the cumulative Merkle airdrop engine.

Usage:
    python -m airdrop_cli generate allocations.csv --out distribution.json
    python -m airdrop_cli proof 0xabc... --dist distribution.json
    python -m airdrop_cli verify distribution.json
    python -m airdrop_cli status 0xabc...
    python -m airdrop_cli claim
    python -m airdrop_cli root publish --dist distribution.json
"""

__version__ = "0.1.0"
