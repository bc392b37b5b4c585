"""
Runtime Configuration Unit Tests
Tests for core/config/runtime.py
"""

import pytest

from core.config import (
    DEFAULT_CONTRACT_ADDRESS,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

from fixtures import OWNER


class TestRuntimeConfig:
    """Tests for RuntimeConfig loading."""

    def test_defaults(self):
        config = RuntimeConfig()
        assert config.network.chain_id == 97
        assert config.network.rpc_url is None
        assert config.ledger.contract_address == DEFAULT_CONTRACT_ADDRESS
        assert config.distribution.path == "distribution.json"
        assert not config.ledger_configured

    def test_from_dict_partial(self):
        config = RuntimeConfig.from_dict({
            "network": {"rpc_url": "https://rpc.test"},
            "ledger": {"sender": OWNER, "gas": 300000},
            "log_level": "debug",
        })
        assert config.network.rpc_url == "https://rpc.test"
        assert config.network.chain_id == 97
        assert config.ledger.gas == 300000
        assert config.log_level == "DEBUG"
        assert config.ledger_configured

    def test_from_dict_unknown_key(self):
        with pytest.raises(TypeError):
            RuntimeConfig.from_dict({"network": {"rpc": "x"}})

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "airdrop.yaml"
        path.write_text(
            "network:\n"
            "  rpc_url: https://rpc.test\n"
            "  chain_id: 56\n"
            "distribution:\n"
            "  path: /data/dist.json\n"
            "  verify_on_load: true\n"
        )
        config = RuntimeConfig.from_yaml(path)
        assert config.network.chain_id == 56
        assert config.distribution.path == "/data/dist.json"
        assert config.distribution.verify_on_load is True

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "missing.yaml")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("AIRDROP_RPC_URL", "https://rpc.env")
        monkeypatch.setenv("AIRDROP_CHAIN_ID", "56")
        monkeypatch.setenv("AIRDROP_SENDER", OWNER)
        monkeypatch.setenv("AIRDROP_LOG_LEVEL", "warning")

        config = RuntimeConfig.from_env()
        assert config.network.rpc_url == "https://rpc.env"
        assert config.network.chain_id == 56
        assert config.ledger.sender == OWNER
        assert config.log_level == "WARNING"

    def test_rpc_url_fallback(self, monkeypatch):
        monkeypatch.setenv("RPC_URL", "https://rpc.plain")
        assert RuntimeConfig.from_env().network.rpc_url == "https://rpc.plain"

    def test_env_overrides_file_values(self, monkeypatch):
        base = RuntimeConfig.from_dict({
            "network": {"rpc_url": "https://rpc.file"},
            "distribution": {"path": "file.json"},
        })
        monkeypatch.setenv("AIRDROP_DISTRIBUTION_PATH", "env.json")

        config = base.with_env_overrides()
        assert config.distribution.path == "env.json"
        assert config.network.rpc_url == "https://rpc.file"
        assert base.distribution.path == "file.json"

    def test_no_overrides_returns_self(self):
        config = RuntimeConfig()
        assert config.with_env_overrides() is config

    def test_to_dict_round_trip(self):
        config = RuntimeConfig.from_dict({"ledger": {"sender": OWNER}})
        assert RuntimeConfig.from_dict(config.to_dict()).ledger.sender == OWNER

    def test_distribution_section(self):
        config = RuntimeConfig.from_dict({"distribution": {"path": "out/dist.json"}})
        assert config.to_dict()["distribution"] == {
            "path": "out/dist.json",
            "verify_on_load": False,
        }

    def test_tx_url(self):
        config = RuntimeConfig()
        assert config.network.tx_url("0xabc") == "https://testnet.bscscan.com/tx/0xabc"


class TestDefaultConfig:
    """Tests for the process-wide default."""

    def test_set_and_reset(self):
        custom = RuntimeConfig.from_dict({"log_level": "ERROR"})
        set_default_config(custom)
        try:
            assert get_default_config() is custom
        finally:
            set_default_config(None)
        assert get_default_config() is not custom
        set_default_config(None)
