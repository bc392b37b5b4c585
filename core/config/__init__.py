"""
Runtime Configuration Module

Provides configuration loading and management for the airdrop engine.
"""

from .runtime import (
    BSC_TESTNET_CHAIN_ID,
    DEFAULT_CONTRACT_ADDRESS,
    DistributionConfig,
    HttpConfig,
    LedgerConfig,
    NetworkConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "BSC_TESTNET_CHAIN_ID",
    "DEFAULT_CONTRACT_ADDRESS",
    "RuntimeConfig",
    "NetworkConfig",
    "LedgerConfig",
    "HttpConfig",
    "DistributionConfig",
    "get_default_config",
    "set_default_config",
]
