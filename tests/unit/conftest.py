"""
In-memory fakes of the external collaborators (ledger, content store,
metadata gateway, session guard).
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

import pytest

from floralgallery.application.ports import Submission
from floralgallery.application.workflows import Gallery, GalleryReadModelBuilder, TransactionOrchestrator
from floralgallery.config import AppConfig
from floralgallery.core.errors import MetadataError, PublicationError
from floralgallery.domain import AssetInfo, AssetPayload, Confirmation, Descriptor, SessionContext

ALICE = "0xA11CE00000000000000000000000000000000001"
BOB = "0xB0B0000000000000000000000000000000000002"
CONTRACT = "0xC0417AC700000000000000000000000000000003"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class FakeLedger:
    """
    Ledger with synchronous bookkeeping.

    ``events`` records ("submit", op, n) and ("confirm", op, n) in the order
    they happened; ``submit_errors`` / ``confirm_errors`` map an operation to
    {call number: exception}.
    """

    def __init__(self):
        self.records: Dict[int, dict] = {}
        self.order: List[int] = []
        self.total_minted = 0
        self.events: List[tuple] = []
        self.counts: Dict[str, int] = {}
        self.submit_errors: Dict[str, Dict[int, Exception]] = {}
        self.confirm_errors: Dict[str, Dict[int, Exception]] = {}
        self.query_errors: Dict[str, Dict[int, Exception]] = {}
        self.query_calls: Dict[str, int] = {}
        self.payments: List[int] = []

    # helpers for tests
    def add_asset(self, identifier, locator, owner=ALICE, creator=ALICE, price=10**15, for_sale=True):
        self.records[identifier] = {
            "locator": locator,
            "owner": owner,
            "creator": creator,
            "price": price,
            "for_sale": for_sale,
        }
        self.order.append(identifier)
        self.total_minted += 1

    def _query(self, name: str, identifier: Optional[int] = None):
        self.query_calls[name] = self.query_calls.get(name, 0) + 1
        errors = self.query_errors.get(name, {})
        if identifier in errors:
            raise errors[identifier]

    async def _submit(self, op: str, apply) -> Submission:
        await asyncio.sleep(0)
        n = self.counts.get(op, 0) + 1
        self.counts[op] = n
        self.events.append(("submit", op, n))
        if n in self.submit_errors.get(op, {}):
            raise self.submit_errors[op][n]
        tx_hash = f"0x{op}{n:04d}"

        async def confirm() -> Confirmation:
            await asyncio.sleep(0)
            if n in self.confirm_errors.get(op, {}):
                raise self.confirm_errors[op][n]
            identifier = apply()
            self.events.append(("confirm", op, n))
            return Confirmation(tx_hash=tx_hash, block_number=100 + n, identifier=identifier)

        return Submission(tx_hash, confirm)

    async def mint(self, session, descriptor_locator, price):
        def apply():
            identifier = max(self.records, default=0) + 1
            self.add_asset(identifier, descriptor_locator, session.identity, session.identity, price, True)
            return identifier

        return await self._submit("mint", apply)

    async def purchase(self, session, identifier, payment):
        def apply():
            self.payments.append(payment)
            self.records[identifier].update(owner=session.identity, for_sale=False)

        return await self._submit("purchase", apply)

    async def relist(self, session, identifier, new_price):
        def apply():
            self.records[identifier].update(price=new_price, for_sale=True)

        return await self._submit("relist", apply)

    async def delist(self, session, identifier):
        def apply():
            self.records[identifier].update(for_sale=False)

        return await self._submit("delist", apply)

    async def retire(self, session, identifier):
        def apply():
            self.records.pop(identifier)
            self.order.remove(identifier)

        return await self._submit("retire", apply)

    async def list_all_identifiers(self):
        self._query("list_all_identifiers")
        return list(self.order)

    async def list_for_sale_identifiers(self):
        self._query("list_for_sale_identifiers")
        return [i for i in self.order if self.records[i]["for_sale"]]

    async def get_descriptor_locator(self, identifier):
        await asyncio.sleep(0)
        self._query("get_descriptor_locator", identifier)
        return self.records[identifier]["locator"]

    async def get_owner(self, identifier):
        await asyncio.sleep(0)
        self._query("get_owner", identifier)
        return self.records[identifier]["owner"]

    async def get_asset_info(self, identifier):
        await asyncio.sleep(0)
        self._query("get_asset_info", identifier)
        record = self.records[identifier]
        return AssetInfo(creator=record["creator"], price=record["price"], for_sale=record["for_sale"])

    async def get_total_minted(self):
        self._query("get_total_minted")
        return self.total_minted


class FakePublisher:
    def __init__(self):
        self.assets: List[AssetPayload] = []
        self.descriptors: List[Descriptor] = []
        self.asset_error: Optional[Exception] = None
        self.descriptor_error: Optional[Exception] = None

    async def publish_asset(self, payload):
        if self.asset_error:
            raise self.asset_error
        self.assets.append(payload)
        return f"https://gateway.test/ipfs/QmImage{len(self.assets)}"

    async def publish_descriptor(self, descriptor):
        if self.descriptor_error:
            raise self.descriptor_error
        self.descriptors.append(descriptor)
        return f"https://gateway.test/ipfs/QmMeta{len(self.descriptors)}"


class FakeFetcher:
    """Serves descriptors; locators of published descriptors resolve automatically."""

    def __init__(self, publisher: Optional[FakePublisher] = None):
        self.documents: Dict[str, object] = {}
        self.publisher = publisher
        self.calls: List[str] = []

    async def fetch_descriptor(self, locator):
        await asyncio.sleep(0)
        self.calls.append(locator)
        if locator in self.documents:
            doc = self.documents[locator]
            if isinstance(doc, Exception):
                raise doc
            return Descriptor.from_json(doc)
        if self.publisher and locator.startswith("https://gateway.test/ipfs/QmMeta"):
            index = int(locator.rsplit("QmMeta", 1)[1]) - 1
            return self.publisher.descriptors[index]
        raise MetadataError(f"not found: {locator}")


class FakeGuard:
    def __init__(self, identity: Optional[str] = ALICE, network: int = 11155111):
        self.identity = identity
        self.network = network
        self.generation = 0
        self.network_checks = 0

    async def current_identity(self):
        return self.identity

    async def current_network(self):
        return self.network

    async def require_network(self, expected):
        self.network_checks += 1
        return self.network == expected

    async def snapshot(self):
        return SessionContext(identity=self.identity, network_id=self.network, generation=self.generation)

    def is_current(self, session):
        return session.generation == self.generation

    def switch_network(self, network: int):
        self.network = network
        self.generation += 1


@pytest.fixture
def config():
    return AppConfig.from_dict(
        {
            "ledger": {"contract_address": CONTRACT, "rpc_url": "http://127.0.0.1:8545"},
            "storage": {"api_key": "key", "secret_api_key": "secret"},
        }
    )


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def publisher():
    return FakePublisher()


@pytest.fixture
def fetcher(publisher):
    return FakeFetcher(publisher)


@pytest.fixture
def guard():
    return FakeGuard()


@pytest.fixture
def builder(config, ledger, fetcher):
    return GalleryReadModelBuilder(config, ledger, fetcher)


@pytest.fixture
def gallery(builder):
    return Gallery(builder)


@pytest.fixture
def orchestrator(config, guard, ledger, publisher, gallery):
    return TransactionOrchestrator(config, guard=guard, ledger=ledger, publisher=publisher, gallery=gallery)


@pytest.fixture
def session():
    return SessionContext(identity=ALICE, network_id=11155111, generation=0)


@pytest.fixture
def picture():
    return AssetPayload(content=PNG_BYTES, filename="rose.png", content_type="image/png")


@pytest.fixture
def publication_error():
    return PublicationError(message="Failed to upload image to IPFS")
