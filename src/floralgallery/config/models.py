"""
Pydantic 配置模型，提供类型安全的配置与 yaml/环境变量加载。

Nothing here is validated at startup: the workflows ask ``missing()`` before
doing any work and fail with ``ConfigurationError`` when a setting is absent.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

PLACEHOLDER_ADDRESS = "0x..."

SEPOLIA_CHAIN_ID = 11155111

# ledger-side cap on copies per publish
MAX_BATCH_QUANTITY = 100


class LedgerConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    rpc_url: str = "http://127.0.0.1:8545"
    contract_address: Optional[str] = None
    chain_id: int = SEPOLIA_CHAIN_ID
    chain_name: str = "sepolia"
    explorer_base_url: str = "https://sepolia.etherscan.io"
    confirmation_timeout: float = Field(default=600.0, gt=0)
    poll_latency: float = Field(default=2.0, gt=0)
    request_timeout: int = Field(default=30, gt=0)

    @property
    def is_configured(self) -> bool:
        address = (self.contract_address or "").strip()
        return bool(address) and address != PLACEHOLDER_ADDRESS

    def explorer_url(self, tx_hash: str) -> str:
        return f"{self.explorer_base_url.rstrip('/')}/tx/{tx_hash}"


class StorageConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    api_base: str = "https://api.pinata.cloud"
    gateway_base: str = "https://gateway.pinata.cloud"
    api_key: Optional[str] = None
    secret_api_key: Optional[str] = None
    timeout: int = Field(default=120, gt=0)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and bool(self.secret_api_key)

    def gateway_url(self, content_hash: str) -> str:
        return f"{self.gateway_base.rstrip('/')}/ipfs/{content_hash}"


class GalleryConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    max_batch_quantity: int = Field(default=MAX_BATCH_QUANTITY, ge=1, le=MAX_BATCH_QUANTITY)
    metadata_timeout: int = Field(default=30, gt=0)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    gallery: GalleryConfig = Field(default_factory=GalleryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    raw: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "AppConfig":
        file_path = Path(path).expanduser()
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {file_path}")
        data = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        # 保留原始数据便于兼容
        return cls(**data, raw=data)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "AppConfig":
        """yaml 文件（可选）+ 环境变量覆盖"""
        config = cls.from_yaml(path) if path else cls()
        config.load_environment_variables()
        return config

    def load_environment_variables(self) -> None:
        """加载环境变量"""
        self.ledger.contract_address = os.getenv("FLORAL_CONTRACT_ADDRESS", self.ledger.contract_address)
        self.ledger.rpc_url = os.getenv("FLORAL_RPC_URL", self.ledger.rpc_url)
        env_chain = os.getenv("FLORAL_CHAIN_ID")
        if env_chain:
            self.ledger.chain_id = int(env_chain, 0)
        self.storage.api_key = os.getenv("PINATA_API_KEY", self.storage.api_key)
        self.storage.secret_api_key = os.getenv("PINATA_SECRET_API_KEY", self.storage.secret_api_key)
        self.storage.gateway_base = os.getenv("FLORAL_IPFS_GATEWAY", self.storage.gateway_base)
        self.logging.level = os.getenv("FLORAL_LOG_LEVEL", self.logging.level)

    def missing(self, *, require_storage: bool = False) -> List[str]:
        """Names of required settings that are absent."""
        missing: List[str] = []
        if not self.ledger.is_configured:
            missing.append("ledger.contract_address")
        if require_storage and not self.storage.is_configured:
            missing.append("storage.api_key/secret_api_key")
        return missing
