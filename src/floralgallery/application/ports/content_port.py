from __future__ import annotations

from typing import Protocol, runtime_checkable

from floralgallery.domain import AssetPayload, Descriptor


@runtime_checkable
class ContentPublisherPort(Protocol):
    """
    Content-addressed store for the picture and its JSON descriptor.

    Both calls return a locator that dereferences to byte-identical content.
    Failures raise ``PublicationError``; nothing is retried or rolled back.
    """

    async def publish_asset(self, payload: AssetPayload) -> str:
        """Store the binary payload, return its image locator."""

    async def publish_descriptor(self, descriptor: Descriptor) -> str:
        """Store the JSON descriptor, return its descriptor locator."""
