"""
CLI Configuration

Configuration management for the airdrop CLI.
Supports environment variables and configuration files.

The config file is shared with the API: flat keys configure the CLI, and
the "network", "ledger", "http" and "distribution" sections are handed to
RuntimeConfig.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from core.config.runtime import RuntimeConfig


# Environment variable prefix
ENV_PREFIX = "AIRDROP_"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Amount input unit for generate: "wei" or "ether"
    unit: str = "wei"

    # Compare the ledger root with the dump root before claiming
    check_root: bool = True

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    # Ledger, network and distribution settings
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data: dict[str, Any] = json.load(f)

    config = CLIConfig()
    config.unit = data.get("unit", config.unit)
    config.check_root = data.get("check_root", config.check_root)
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.default_output_format = data.get(
        "default_output_format", config.default_output_format
    )
    config.runtime = RuntimeConfig.from_dict(data)
    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / "airdrop.json",
            Path.cwd() / ".airdrop.json",
            Path.home() / ".config" / "airdrop" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    if os.getenv(f"{ENV_PREFIX}UNIT"):
        config.unit = os.getenv(f"{ENV_PREFIX}UNIT", "wei").lower()
    if os.getenv(f"{ENV_PREFIX}CHECK_ROOT"):
        config.check_root = os.getenv(f"{ENV_PREFIX}CHECK_ROOT", "true").lower() == "true"
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    config.runtime = config.runtime.with_env_overrides()
    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "unit": "wei",
  "check_root": true,
  "log_level": "INFO",
  "log_file": null,
  "network": {
    "name": "BNB Smart Chain Testnet",
    "chain_id": 97,
    "rpc_url": "https://data-seed-prebsc-1-s1.binance.org:8545",
    "explorer_url": "https://testnet.bscscan.com"
  },
  "ledger": {
    "contract_address": "0x381D7b174ae75B98F189eF26052a97BABDEDd263",
    "sender": null,
    "confirmation_timeout": 120
  },
  "distribution": {
    "path": "distribution.json"
  }
}
"""
