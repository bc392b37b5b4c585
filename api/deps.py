"""
API Dependencies

Dependency injection for the API. Routes receive the runtime config, the
ledger client and the current distribution through Depends, so tests can
swap any of them with app.dependency_overrides.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from fastapi import Depends

from api.errors import ConfigurationError
from core.config.runtime import RuntimeConfig
from core.distribution import Distribution, DistributionIOError, load_distribution
from core.ledger import JsonRpcLedger, LedgerClient

logger = logging.getLogger(__name__)


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from config file, then overlay environment variables.

    Search order for config file:
      1. ./airdrop.json
      2. ./.airdrop.json
      3. ~/.config/airdrop/config.json

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    search_paths = [
        Path.cwd() / "airdrop.json",
        Path.cwd() / ".airdrop.json",
        Path.home() / ".config" / "airdrop" / "config.json",
    ]

    config: RuntimeConfig | None = None

    for path in search_paths:
        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                logger.info(f"Loaded config from {path}")
                config = RuntimeConfig.from_dict(data)
                break
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"Failed to parse {path}: {e}")

    if config is None:
        # No config file found, start with defaults
        config = RuntimeConfig()

    return config.with_env_overrides()


def get_runtime_config() -> RuntimeConfig:
    return _load_runtime_config()


def get_ledger(config: RuntimeConfig = Depends(get_runtime_config)) -> LedgerClient:
    """
    JSON-RPC ledger bound to the configured sender.

    Raises:
        ConfigurationError: If RPC URL, contract or sender is missing
    """
    if not config.ledger_configured:
        missing = [
            name
            for name, value in (
                ("rpc_url", config.network.rpc_url),
                ("contract_address", config.ledger.contract_address),
                ("sender", config.ledger.sender),
            )
            if not value
        ]
        raise ConfigurationError(
            "Server configuration error: Missing environment variables",
            details={"missing": missing},
        )
    return JsonRpcLedger.from_config(config)


def get_ledger_reader(config: RuntimeConfig = Depends(get_runtime_config)) -> LedgerClient:
    """Read-only JSON-RPC ledger; a sender account is not required."""
    if not (config.network.rpc_url and config.ledger.contract_address):
        raise ConfigurationError(
            "Server configuration error: Missing environment variables",
            details={"missing": ["rpc_url"] if not config.network.rpc_url else ["contract_address"]},
        )
    return JsonRpcLedger.from_config(config)


def get_distribution(config: RuntimeConfig = Depends(get_runtime_config)) -> Distribution:
    """
    Distribution served by the claim endpoints.

    Raises:
        ConfigurationError: If the dump file cannot be read
    """
    try:
        return load_distribution(
            config.distribution.path,
            verify=config.distribution.verify_on_load,
        )
    except DistributionIOError as e:
        raise ConfigurationError(
            f"Distribution not available: {e}",
            details={"path": config.distribution.path},
        ) from e
