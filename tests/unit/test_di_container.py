"""
依赖注入容器与组装单元测试
"""

import pytest

from floralgallery.application.ports import (
    ContentPublisherPort,
    LedgerPort,
    MetadataFetcherPort,
    SessionGuardPort,
)
from floralgallery.application.workflows import Gallery, GalleryReadModelBuilder, TransactionOrchestrator
from floralgallery.bootstrap import build_container
from floralgallery.config import AppConfig
from floralgallery.core.di import Container
from floralgallery.infrastructure.api_clients import GatewayMetadataFetcher, PinataPublisher
from floralgallery.infrastructure.ledger import Web3LedgerClient, Web3SessionGuard


class TestContainer:
    """Container 测试"""

    def setup_method(self):
        """每个测试前重置容器"""
        Container._instance = None

    def test_singleton_instance(self):
        assert Container.instance() is Container.instance()

    def test_register_and_resolve(self):
        container = Container.instance()

        class MyService:
            pass

        container.register(MyService, lambda: MyService())
        assert isinstance(container.resolve(MyService), MyService)

    def test_singleton_returns_same_instance(self):
        container = Container.instance()

        class MySingleton:
            pass

        container.register(MySingleton, lambda: MySingleton(), singleton=True)
        assert container.resolve(MySingleton) is container.resolve(MySingleton)

    def test_non_singleton_returns_new_instance(self):
        container = Container.instance()

        class MyTransient:
            pass

        container.register(MyTransient, lambda: MyTransient(), singleton=False)
        assert container.resolve(MyTransient) is not container.resolve(MyTransient)

    def test_register_instance(self):
        container = Container()
        marker = object()
        container.register_instance(object, marker)
        assert container.resolve(object) is marker
        assert container.is_registered(object)

    def test_resolve_unregistered_raises(self):
        class Unregistered:
            pass

        with pytest.raises(ValueError):
            Container.instance().resolve(Unregistered)


class TestBuildContainer:
    def test_wires_real_adapters(self, config):
        container = build_container(config)

        assert isinstance(container.resolve(ContentPublisherPort), PinataPublisher)
        assert isinstance(container.resolve(MetadataFetcherPort), GatewayMetadataFetcher)
        assert isinstance(container.resolve(LedgerPort), Web3LedgerClient)
        assert isinstance(container.resolve(SessionGuardPort), Web3SessionGuard)

        orchestrator = container.resolve(TransactionOrchestrator)
        assert orchestrator.gallery is container.resolve(Gallery)
        assert orchestrator.ledger is container.resolve(LedgerPort)

    def test_unconfigured_contract_leaves_ledger_empty(self):
        container = build_container(AppConfig())
        assert container.resolve(LedgerPort) is None
        assert container.resolve(GalleryReadModelBuilder).ledger is None

    def test_preregistered_fakes_win(self, config, ledger, publisher, fetcher, guard):
        container = Container()
        container.register_instance(LedgerPort, ledger)
        container.register_instance(ContentPublisherPort, publisher)
        container.register_instance(MetadataFetcherPort, fetcher)
        container.register_instance(SessionGuardPort, guard)

        build_container(config, container=container)
        orchestrator = container.resolve(TransactionOrchestrator)

        assert orchestrator.ledger is ledger
        assert orchestrator.publisher is publisher
        assert orchestrator.guard is guard
