"""
Pinata 内容发布客户端：图片与 JSON 描述文件上传到 IPFS
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import aiohttp

from floralgallery.config import StorageConfig
from floralgallery.core.errors import FloralGalleryError, PublicationError
from floralgallery.domain import AssetPayload, Descriptor

from .base import APIClient

logger = logging.getLogger(__name__)


class PinataPublisher(APIClient):
    """Content publisher backed by the Pinata pinning API."""

    error_type = PublicationError

    PIN_FILE_ENDPOINT = "pinning/pinFileToIPFS"
    PIN_JSON_ENDPOINT = "pinning/pinJSONToIPFS"

    def __init__(self, config: StorageConfig, session: Optional[aiohttp.ClientSession] = None):
        super().__init__(
            base_url=config.api_base,
            headers={
                "pinata_api_key": config.api_key or "",
                "pinata_secret_api_key": config.secret_api_key or "",
            },
            timeout=config.timeout,
            session=session,
        )
        self.config = config

    def _locator(self, response: Any, stage: str) -> str:
        content_hash = response.get("IpfsHash") if isinstance(response, dict) else None
        if not isinstance(content_hash, str) or not content_hash.strip():
            raise PublicationError(
                message=f"Storage service response has no content hash ({stage})",
                context={"stage": stage},
            )
        return self.config.gateway_url(content_hash.strip())

    async def publish_asset(self, payload: AssetPayload) -> str:
        payload.validate()

        form = aiohttp.FormData()
        form.add_field(
            "file",
            payload.content,
            filename=payload.filename or "upload",
            content_type=payload.mime_type or "application/octet-stream",
        )
        form.add_field("pinataMetadata", json.dumps({"name": payload.filename or "upload"}))

        try:
            response = await self.post(self.PIN_FILE_ENDPOINT, data=form)
        except FloralGalleryError as exc:
            logger.error(f"Error uploading file to IPFS: {exc}")
            raise PublicationError(
                message="Failed to upload image to IPFS",
                context={"stage": "asset", **(exc.context or {})},
            ) from exc

        locator = self._locator(response, "asset")
        logger.info(f"Uploaded {payload.filename} ({len(payload.content)} bytes) -> {locator}")
        return locator

    async def publish_descriptor(self, descriptor: Descriptor) -> str:
        descriptor.validate()

        body = {
            "pinataContent": descriptor.to_json(),
            "pinataMetadata": {"name": descriptor.name},
        }
        try:
            response = await self.post(self.PIN_JSON_ENDPOINT, json_data=body)
        except FloralGalleryError as exc:
            logger.error(f"Error uploading metadata to IPFS: {exc}")
            raise PublicationError(
                message="Failed to upload metadata to IPFS",
                context={"stage": "descriptor", **(exc.context or {})},
            ) from exc

        locator = self._locator(response, "descriptor")
        logger.info(f"Uploaded descriptor '{descriptor.name}' -> {locator}")
        return locator
