"""
外部 HTTP 客户端。
"""

from .base import APIClient
from .metadata_client import GatewayMetadataFetcher
from .pinata_client import PinataPublisher

__all__ = ["APIClient", "GatewayMetadataFetcher", "PinataPublisher"]
