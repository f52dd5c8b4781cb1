"""
通用 API 客户端封装
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Type

import aiohttp
from aiohttp import ClientTimeout

from floralgallery.core.errors import FloralGalleryError, TransportError

logger = logging.getLogger(__name__)


class APIClient:
    """
    通用异步 HTTP API 客户端

    Failures are raised as ``error_type`` (a taxonomy error) so callers never
    see aiohttp exceptions. No request is retried.
    """

    error_type: Type[FloralGalleryError] = TransportError

    def __init__(
        self,
        base_url: str = "",
        headers: Optional[Dict[str, str]] = None,
        timeout: int = 30,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.headers = dict(headers or {})
        self.timeout = ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout, headers={"User-Agent": "FloralGallery/1.0"}
            )
            self._owns_session = True
        return self._session

    def _url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _fail(self, message: str, **context: Any) -> FloralGalleryError:
        return self.error_type(message=message, context=context or None)

    async def _read_json(self, response: aiohttp.ClientResponse, url: str) -> Any:
        if response.status < 200 or response.status >= 300:
            text = await response.text(errors="replace")
            logger.error(f"API error {response.status} from {url}: {text[:200]}")
            raise self._fail(f"API error: {response.status}", url=url, status=response.status)
        try:
            # gateways often serve JSON as text/plain
            return await response.json(content_type=None)
        except ValueError as exc:
            raise self._fail(f"Malformed JSON from {url}", url=url) from exc

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """发送 GET 请求"""
        url = self._url(endpoint)
        session = await self._get_session()

        try:
            async with session.get(url, params=params, headers=self.headers or None) as response:
                return await self._read_json(response, url)
        except asyncio.TimeoutError as exc:
            logger.error(f"Request timeout: {url}")
            raise self._fail(f"Request timeout: {url}", url=url) from exc
        except aiohttp.ClientError as exc:
            logger.error(f"Request failed: {url} - {exc}")
            raise self._fail(f"Request failed: {exc}", url=url) from exc

    async def post(
        self,
        endpoint: str,
        data: Any = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """发送 POST 请求"""
        url = self._url(endpoint)
        session = await self._get_session()

        try:
            async with session.post(url, data=data, json=json_data, headers=self.headers or None) as response:
                return await self._read_json(response, url)
        except asyncio.TimeoutError as exc:
            logger.error(f"Request timeout: {url}")
            raise self._fail(f"Request timeout: {url}", url=url) from exc
        except aiohttp.ClientError as exc:
            logger.error(f"Request failed: {url} - {exc}")
            raise self._fail(f"Request failed: {exc}", url=url) from exc

    async def close(self):
        """关闭 session"""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
