"""
配置加载与日志配置单元测试
"""

import logging

import pytest

from floralgallery.config import PLACEHOLDER_ADDRESS, SEPOLIA_CHAIN_ID, AppConfig, LoggingConfig
from floralgallery.infrastructure.logging import configure_logging

CONFIG_YAML = """
ledger:
  contract_address: "0xC0417AC700000000000000000000000000000003"
  rpc_url: https://sepolia.example.org
storage:
  api_key: yaml-key
  secret_api_key: yaml-secret
gallery:
  max_batch_quantity: 10
unknown_section:
  anything: true
"""

_ENV_VARS = (
    "FLORAL_CONTRACT_ADDRESS",
    "FLORAL_RPC_URL",
    "FLORAL_CHAIN_ID",
    "PINATA_API_KEY",
    "PINATA_SECRET_API_KEY",
    "FLORAL_IPFS_GATEWAY",
    "FLORAL_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestAppConfig:
    def test_defaults(self):
        config = AppConfig()

        assert config.ledger.chain_id == SEPOLIA_CHAIN_ID
        assert config.gallery.max_batch_quantity == 100
        assert config.missing(require_storage=True) == [
            "ledger.contract_address",
            "storage.api_key/secret_api_key",
        ]

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_YAML, encoding="utf-8")

        config = AppConfig.from_yaml(path)

        assert config.ledger.is_configured
        assert config.ledger.rpc_url == "https://sepolia.example.org"
        assert config.storage.api_key == "yaml-key"
        assert config.gallery.max_batch_quantity == 10
        assert config.raw["unknown_section"] == {"anything": True}
        assert config.missing(require_storage=True) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.from_yaml(tmp_path / "nope.yaml")

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert AppConfig.from_yaml(path).missing() == ["ledger.contract_address"]

    def test_environment_overrides_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_YAML, encoding="utf-8")
        monkeypatch.setenv("PINATA_API_KEY", "env-key")
        monkeypatch.setenv("FLORAL_CHAIN_ID", "0xaa36a7")
        monkeypatch.setenv("FLORAL_IPFS_GATEWAY", "https://ipfs.example.org")
        monkeypatch.setenv("FLORAL_LOG_LEVEL", "DEBUG")

        config = AppConfig.load(path)

        assert config.storage.api_key == "env-key"
        assert config.storage.secret_api_key == "yaml-secret"
        assert config.ledger.chain_id == SEPOLIA_CHAIN_ID
        assert config.storage.gateway_url("QmX") == "https://ipfs.example.org/ipfs/QmX"
        assert config.logging.level == "DEBUG"

    def test_environment_only(self, monkeypatch):
        monkeypatch.setenv("FLORAL_CONTRACT_ADDRESS", "0xC0417AC700000000000000000000000000000003")
        config = AppConfig.load()
        assert config.ledger.is_configured
        assert config.missing() == []

    @pytest.mark.parametrize("address", [None, "", "   ", PLACEHOLDER_ADDRESS])
    def test_unconfigured_addresses(self, address):
        config = AppConfig.from_dict({"ledger": {"contract_address": address}})
        assert not config.ledger.is_configured

    def test_explorer_url(self):
        config = AppConfig.from_dict({"ledger": {"explorer_base_url": "https://explorer.test/"}})
        assert config.ledger.explorer_url("0xabc") == "https://explorer.test/tx/0xabc"

    def test_invalid_quantity_limit(self):
        with pytest.raises(ValueError):
            AppConfig.from_dict({"gallery": {"max_batch_quantity": 0}})

    def test_quantity_limit_is_capped(self):
        with pytest.raises(ValueError):
            AppConfig.from_dict({"gallery": {"max_batch_quantity": 150}})
        assert AppConfig.from_dict({"gallery": {"max_batch_quantity": 100}}).gallery.max_batch_quantity == 100


class TestConfigureLogging:
    def test_level_and_quiet_loggers(self):
        configure_logging(LoggingConfig(level="debug"))

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("web3").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        configure_logging(LoggingConfig(level="chatty"))
        assert logging.getLogger().level == logging.INFO
