from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional, Protocol, runtime_checkable

from floralgallery.domain import AssetIdentifier, AssetInfo, Confirmation, SessionContext


class Submission:
    """
    Handle of a submitted ledger mutation.

    ``tx_hash`` is known as soon as the ledger accepted the submission and
    never changes. ``wait()`` resolves after inclusion; it is memoized so
    several awaiters share one confirmation.
    """

    def __init__(self, tx_hash: str, waiter: Callable[[], Awaitable[Confirmation]]):
        self.tx_hash = tx_hash
        self._waiter = waiter
        self._task: Optional[asyncio.Future] = None

    async def wait(self) -> Confirmation:
        if self._task is None:
            self._task = asyncio.ensure_future(self._waiter())
        return await asyncio.shield(self._task)

    def __repr__(self) -> str:
        return f"Submission(tx_hash={self.tx_hash!r})"


@runtime_checkable
class LedgerPort(Protocol):
    """
    Mutation and query surface of the asset contract.

    Mutations raise ``UserDeclined``, ``LedgerRejected`` or ``TransportError``
    either when submitting or while waiting for confirmation.
    """

    async def mint(self, session: SessionContext, descriptor_locator: str, price: int) -> Submission:
        """Mint one asset; the confirmation carries the new identifier."""

    async def purchase(self, session: SessionContext, identifier: AssetIdentifier, payment: int) -> Submission:
        """Buy a listed asset paying ``payment`` base units."""

    async def relist(self, session: SessionContext, identifier: AssetIdentifier, new_price: int) -> Submission:
        """List (or reprice) an owned asset."""

    async def delist(self, session: SessionContext, identifier: AssetIdentifier) -> Submission:
        """Take an owned asset off sale."""

    async def retire(self, session: SessionContext, identifier: AssetIdentifier) -> Submission:
        """Burn an owned asset."""

    async def list_all_identifiers(self) -> List[AssetIdentifier]:
        """Every identifier currently known to the ledger, in ledger order."""

    async def list_for_sale_identifiers(self) -> List[AssetIdentifier]:
        """Identifiers currently listed for sale."""

    async def get_descriptor_locator(self, identifier: AssetIdentifier) -> str:
        """Descriptor locator stored at mint time."""

    async def get_owner(self, identifier: AssetIdentifier) -> str:
        """Current owner."""

    async def get_asset_info(self, identifier: AssetIdentifier) -> AssetInfo:
        """Creator, price and sale flag."""

    async def get_total_minted(self) -> int:
        """Number of assets ever minted."""
