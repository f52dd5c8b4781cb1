from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional

from floralgallery.domain import AssetIdentifier, GalleryEntry

from .gallery_builder import GalleryReadModelBuilder, GallerySnapshot

logger = logging.getLogger(__name__)


class Gallery:
    """
    In-memory gallery view.

    Each ``refresh()`` replaces the entry list wholesale; ``patch_price`` is
    the only in-place change and is overwritten by the next refresh.
    """

    def __init__(self, builder: GalleryReadModelBuilder):
        self._builder = builder
        self._entries: List[GalleryEntry] = []
        self.last_snapshot: Optional[GallerySnapshot] = None

    @property
    def entries(self) -> List[GalleryEntry]:
        return list(self._entries)

    async def refresh(self) -> List[GalleryEntry]:
        snapshot = await self._builder.refresh_snapshot()
        self.last_snapshot = snapshot
        self._entries = list(snapshot.entries)
        return self.entries

    def get(self, identifier: AssetIdentifier) -> Optional[GalleryEntry]:
        for entry in self._entries:
            if entry.identifier == identifier:
                return entry
        return None

    def for_sale(self) -> List[GalleryEntry]:
        return [e for e in self._entries if e.for_sale]

    def owned_by(self, identity: str) -> List[GalleryEntry]:
        key = identity.lower()
        return [e for e in self._entries if e.current_owner.lower() == key]

    def created_by(self, identity: str) -> List[GalleryEntry]:
        key = identity.lower()
        return [e for e in self._entries if e.creator.lower() == key]

    def patch_price(self, identifier: AssetIdentifier, price: Decimal) -> bool:
        for index, entry in enumerate(self._entries):
            if entry.identifier == identifier:
                self._entries[index] = entry.with_price(price)
                return True
        logger.debug(f"Price patch skipped; asset {identifier} not in gallery")
        return False
