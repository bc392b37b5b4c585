"""
CLI command modules.
"""

from airdrop_cli.commands import claim, common, generate, proof, root, status, verify

__all__ = ["claim", "common", "generate", "proof", "root", "status", "verify"]
