"""
描述文件获取：对 descriptor locator 发起普通 GET 并解析 JSON
"""

from __future__ import annotations

from typing import Optional

import aiohttp

from floralgallery.core.errors import MetadataError
from floralgallery.domain import Descriptor

from .base import APIClient


class GatewayMetadataFetcher(APIClient):
    error_type = MetadataError

    def __init__(self, timeout: int = 30, session: Optional[aiohttp.ClientSession] = None):
        super().__init__(timeout=timeout, session=session)

    async def fetch_descriptor(self, locator: str) -> Descriptor:
        if not locator or not locator.startswith(("http://", "https://")):
            raise MetadataError(message=f"Unsupported descriptor locator: {locator!r}")
        data = await self.get(locator)
        return Descriptor.from_json(data)
