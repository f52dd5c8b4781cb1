"""
组装：把配置、存储、账本、画廊与编排器注册到 DI 容器。
"""

from __future__ import annotations

from typing import Any, Optional

from web3 import AsyncWeb3

from floralgallery.application.ports import (
    ContentPublisherPort,
    LedgerPort,
    MetadataFetcherPort,
    SessionGuardPort,
)
from floralgallery.application.workflows import Gallery, GalleryReadModelBuilder, TransactionOrchestrator
from floralgallery.config import AppConfig
from floralgallery.core.di import Container
from floralgallery.infrastructure.api_clients import GatewayMetadataFetcher, PinataPublisher
from floralgallery.infrastructure.ledger import Web3LedgerClient, Web3SessionGuard, build_web3


def build_container(
    config: AppConfig,
    *,
    signer: Optional[Any] = None,
    container: Optional[Container] = None,
) -> Container:
    """
    Register every component as a singleton.

    Already-registered interfaces are left alone, so tests can pre-register
    fakes for the external collaborators.
    """
    container = container or Container()

    def register(interface, factory) -> None:
        if not container.is_registered(interface):
            container.register(interface, factory, singleton=True)

    container.register_instance(AppConfig, config)
    register(AsyncWeb3, lambda: build_web3(config.ledger))
    register(ContentPublisherPort, lambda: PinataPublisher(config.storage))
    register(MetadataFetcherPort, lambda: GatewayMetadataFetcher(timeout=config.gallery.metadata_timeout))
    register(
        LedgerPort,
        lambda: Web3LedgerClient(config.ledger, container.resolve(AsyncWeb3))
        if config.ledger.is_configured
        else None,
    )
    register(SessionGuardPort, lambda: Web3SessionGuard(container.resolve(AsyncWeb3), signer=signer))
    register(
        GalleryReadModelBuilder,
        lambda: GalleryReadModelBuilder(
            config,
            container.resolve(LedgerPort),
            container.resolve(MetadataFetcherPort),
        ),
    )
    register(Gallery, lambda: Gallery(container.resolve(GalleryReadModelBuilder)))
    register(
        TransactionOrchestrator,
        lambda: TransactionOrchestrator(
            config,
            guard=container.resolve(SessionGuardPort),
            ledger=container.resolve(LedgerPort),
            publisher=container.resolve(ContentPublisherPort),
            gallery=container.resolve(Gallery),
        ),
    )
    return container
