"""
Gallery read-model builder.

Rebuilds the whole gallery from the ledger on every pass:

1. no contract configured -> empty gallery
2. ``getTotalMinted() == 0`` -> empty gallery, no enumeration
3. enumerate identifiers
4. per identifier, concurrently: locator/owner/info from the ledger, then the
   descriptor from its locator
5. drop identifiers whose sub-pipeline failed, newest (last enumerated) first

A pass never raises; a failure degrades to a partial or empty gallery.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from floralgallery.application.ports import LedgerPort, MetadataFetcherPort
from floralgallery.config import AppConfig
from floralgallery.core.pipeline import gather_settled
from floralgallery.domain import AssetIdentifier, GalleryEntry

logger = logging.getLogger(__name__)


@dataclass
class GallerySnapshot:
    entries: List[GalleryEntry] = field(default_factory=list)
    identifiers: List[AssetIdentifier] = field(default_factory=list)
    failures: Dict[AssetIdentifier, Exception] = field(default_factory=dict)

    @property
    def partial(self) -> bool:
        return bool(self.failures)


class GalleryReadModelBuilder:
    def __init__(
        self,
        config: AppConfig,
        ledger: Optional[LedgerPort],
        fetcher: MetadataFetcherPort,
    ):
        self.config = config
        self.ledger = ledger
        self.fetcher = fetcher

    async def refresh(self) -> List[GalleryEntry]:
        snapshot = await self.refresh_snapshot()
        return snapshot.entries

    async def refresh_snapshot(self) -> GallerySnapshot:
        if self.ledger is None or not self.config.ledger.is_configured:
            logger.info("Contract address not configured; gallery is empty")
            return GallerySnapshot()

        try:
            total = await self.ledger.get_total_minted()
            if total == 0:
                return GallerySnapshot()
            identifiers = list(await self.ledger.list_all_identifiers())
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Failed to enumerate assets: {exc}")
            return GallerySnapshot()

        results = await gather_settled([self._load_entry(self.ledger, i) for i in identifiers])

        snapshot = GallerySnapshot(identifiers=identifiers)
        for identifier, result in zip(identifiers, results):
            if result.is_ok():
                snapshot.entries.append(result.unwrap())
            else:
                snapshot.failures[identifier] = result.error
                logger.warning(f"Skipping asset {identifier}: {result.error}")

        snapshot.entries.reverse()
        logger.info(
            f"Gallery refreshed: {len(snapshot.entries)} of {len(identifiers)} assets"
            + (f", {len(snapshot.failures)} skipped" if snapshot.failures else "")
        )
        return snapshot

    async def _load_entry(self, ledger: LedgerPort, identifier: AssetIdentifier) -> GalleryEntry:
        # all three queries settle before the entry fails
        queried = await gather_settled(
            [
                ledger.get_descriptor_locator(identifier),
                ledger.get_owner(identifier),
                ledger.get_asset_info(identifier),
            ]
        )
        for result in queried:
            if not result.is_ok():
                raise result.error
        locator, owner, info = (result.unwrap() for result in queried)
        descriptor = await self.fetcher.fetch_descriptor(locator)
        return GalleryEntry.assemble(identifier, descriptor, owner, info)
