"""
web3 账本客户端：资产合约的交易与查询
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, List, Optional, TypeVar

from aiohttp import ClientTimeout
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.logs import DISCARD

from floralgallery.application.ports import Submission
from floralgallery.config import LedgerConfig
from floralgallery.core.errors import ConfigurationError, classify_ledger_failure
from floralgallery.domain import AssetIdentifier, AssetInfo, Confirmation, SessionContext

from .abi import ASSET_CONTRACT_ABI
from .errors import translate_ledger_exception

logger = logging.getLogger(__name__)

T = TypeVar("T")


def build_web3(config: LedgerConfig) -> AsyncWeb3:
    timeout = ClientTimeout(total=config.request_timeout)
    return AsyncWeb3(AsyncHTTPProvider(config.rpc_url, request_kwargs={"timeout": timeout}))


class Web3LedgerClient:
    """
    Ledger transaction client over an ``AsyncWeb3`` contract.

    When the session carries a local signer the transaction is built and
    signed here; otherwise the node/wallet behind the provider signs for
    ``session.identity``.
    """

    def __init__(self, config: LedgerConfig, w3: Optional[AsyncWeb3] = None):
        if not config.is_configured:
            raise ConfigurationError("Contract address not configured. Please contact the administrator.")
        self.config = config
        self.w3 = w3 or build_web3(config)
        self.contract = self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(config.contract_address),
            abi=ASSET_CONTRACT_ABI,
        )

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except Exception as exc:  # noqa: BLE001
            error = translate_ledger_exception(exc, operation)
            if error.is_fault:
                logger.warning(f"Ledger {operation} failed: {exc}")
            raise error from exc

    # ---- mutations ----

    async def _send(self, session: SessionContext, function: Any, value: int) -> str:
        tx_params = {"from": AsyncWeb3.to_checksum_address(session.identity)}
        if value:
            tx_params["value"] = value

        if session.signer is None:
            tx_hash = await function.transact(tx_params)
        else:
            tx_params["nonce"] = await self.w3.eth.get_transaction_count(tx_params["from"], "pending")
            tx_params["chainId"] = session.network_id
            tx = await function.build_transaction(tx_params)
            signed = session.signer.sign_transaction(tx)
            tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        return AsyncWeb3.to_hex(tx_hash)

    async def _submit(
        self,
        session: SessionContext,
        operation: str,
        function: Any,
        *,
        value: int = 0,
        returns_identifier: bool = False,
    ) -> Submission:
        tx_hash = await self._call(operation, self._send(session, function, value))
        logger.info(f"Submitted {operation} from {session.short_identity}: {tx_hash}")

        async def confirm() -> Confirmation:
            return await self._confirm(operation, tx_hash, returns_identifier)

        return Submission(tx_hash, confirm)

    async def _confirm(self, operation: str, tx_hash: str, returns_identifier: bool) -> Confirmation:
        receipt = await self._call(
            operation,
            self.w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self.config.confirmation_timeout,
                poll_latency=self.config.poll_latency,
            ),
        )
        if receipt["status"] == 0:
            raise classify_ledger_failure("CALL_EXCEPTION", f"transaction {tx_hash} reverted", operation=operation)

        identifier = None
        if returns_identifier:
            events = self.contract.events.Transfer().process_receipt(receipt, errors=DISCARD)
            if events:
                identifier = int(events[0]["args"]["tokenId"])

        logger.info(f"Confirmed {operation} {tx_hash} in block {receipt['blockNumber']}")
        return Confirmation(tx_hash=tx_hash, block_number=receipt["blockNumber"], identifier=identifier)

    async def mint(self, session: SessionContext, descriptor_locator: str, price: int) -> Submission:
        function = self.contract.functions.mint(descriptor_locator, price)
        return await self._submit(session, "mint", function, returns_identifier=True)

    async def purchase(self, session: SessionContext, identifier: AssetIdentifier, payment: int) -> Submission:
        function = self.contract.functions.purchaseNFT(identifier)
        return await self._submit(session, "purchase", function, value=payment)

    async def relist(self, session: SessionContext, identifier: AssetIdentifier, new_price: int) -> Submission:
        function = self.contract.functions.listForSale(identifier, new_price)
        return await self._submit(session, "relist", function)

    async def delist(self, session: SessionContext, identifier: AssetIdentifier) -> Submission:
        function = self.contract.functions.removeFromSale(identifier)
        return await self._submit(session, "delist", function)

    async def retire(self, session: SessionContext, identifier: AssetIdentifier) -> Submission:
        function = self.contract.functions.burn(identifier)
        return await self._submit(session, "retire", function)

    # ---- queries ----

    async def list_all_identifiers(self) -> List[AssetIdentifier]:
        ids = await self._call("getAllNFTs", self.contract.functions.getAllNFTs().call())
        return [int(i) for i in ids]

    async def list_for_sale_identifiers(self) -> List[AssetIdentifier]:
        ids = await self._call("getNFTsForSale", self.contract.functions.getNFTsForSale().call())
        return [int(i) for i in ids]

    async def get_descriptor_locator(self, identifier: AssetIdentifier) -> str:
        return await self._call("tokenURI", self.contract.functions.tokenURI(identifier).call())

    async def get_owner(self, identifier: AssetIdentifier) -> str:
        return await self._call("ownerOf", self.contract.functions.ownerOf(identifier).call())

    async def get_asset_info(self, identifier: AssetIdentifier) -> AssetInfo:
        creator, price, for_sale = await self._call(
            "nftInfo", self.contract.functions.nftInfo(identifier).call()
        )
        return AssetInfo(creator=creator, price=int(price), for_sale=bool(for_sale))

    async def get_total_minted(self) -> int:
        return int(await self._call("getTotalMinted", self.contract.functions.getTotalMinted().call()))
