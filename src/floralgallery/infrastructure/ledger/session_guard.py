"""
Session/network guard backed by the web3 provider.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from web3 import AsyncWeb3

from floralgallery.core.errors import ValidationError
from floralgallery.domain import SessionContext

from .errors import translate_ledger_exception

logger = logging.getLogger(__name__)


class Web3SessionGuard:
    """
    Reads the connected account and chain id from the provider.

    With a local ``signer`` (an ``eth_account`` account) the identity is the
    signer's address; otherwise it is the first account the provider exposes
    (``eth_accounts``). ``account_changed`` / ``network_changed`` invalidate
    every context built before the change.
    """

    def __init__(self, w3: AsyncWeb3, signer: Optional[Any] = None):
        self.w3 = w3
        self._signer = signer
        self.generation = 0

    async def current_identity(self) -> Optional[str]:
        if self._signer is not None:
            return self._signer.address
        try:
            accounts = await self.w3.eth.accounts
        except Exception as exc:  # noqa: BLE001
            raise translate_ledger_exception(exc, "eth_accounts") from exc
        return accounts[0] if accounts else None

    async def current_network(self) -> Optional[int]:
        try:
            return int(await self.w3.eth.chain_id)
        except Exception as exc:  # noqa: BLE001
            raise translate_ledger_exception(exc, "eth_chainId") from exc

    async def require_network(self, expected: int) -> bool:
        return await self.current_network() == expected

    async def snapshot(self) -> SessionContext:
        identity = await self.current_identity()
        if not identity:
            raise ValidationError("Please connect your wallet first")
        network_id = await self.current_network()
        return SessionContext(
            identity=identity,
            network_id=network_id or 0,
            generation=self.generation,
            signer=self._signer,
        )

    def is_current(self, session: SessionContext) -> bool:
        return session.generation == self.generation

    def account_changed(self, signer: Optional[Any] = None) -> None:
        if signer is not None:
            self._signer = signer
        self.generation += 1
        logger.info("Account changed; existing sessions invalidated")

    def network_changed(self) -> None:
        self.generation += 1
        logger.info("Network changed; existing sessions invalidated")
