from __future__ import annotations

from typing import Protocol, runtime_checkable

from floralgallery.domain import Descriptor


@runtime_checkable
class MetadataFetcherPort(Protocol):
    async def fetch_descriptor(self, locator: str) -> Descriptor:
        """GET the descriptor at ``locator``; raise ``MetadataError`` when it is unusable."""
