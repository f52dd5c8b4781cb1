# floralgallery/__init__.py
"""
Floral Gallery - 图片资产发布与链上交易编排

- 图片与描述文件发布到内容寻址存储 (Pinata/IPFS)
- 铸造、购买、上架/改价、下架、销毁的交易工作流
- 从账本重建画廊读模型
"""

from __future__ import annotations

__version__ = "1.0.0"
__author__ = "Floral Gallery Team"


# 延迟导入，避免在只需要领域模型时加载 web3/aiohttp
def __getattr__(name: str):
    """延迟导入模块"""

    if name == "AppConfig":
        from floralgallery.config import AppConfig
        return AppConfig
    if name == "TransactionOrchestrator":
        from floralgallery.application.workflows import TransactionOrchestrator
        return TransactionOrchestrator
    if name == "MintRequest":
        from floralgallery.application.workflows import MintRequest
        return MintRequest
    if name == "Gallery":
        from floralgallery.application.workflows import Gallery
        return Gallery
    if name == "GalleryReadModelBuilder":
        from floralgallery.application.workflows import GalleryReadModelBuilder
        return GalleryReadModelBuilder
    if name == "build_container":
        from floralgallery.bootstrap import build_container
        return build_container

    raise AttributeError(f"module 'floralgallery' has no attribute '{name}'")


__all__ = [
    "__version__",
    "AppConfig",
    "TransactionOrchestrator",
    "MintRequest",
    "Gallery",
    "GalleryReadModelBuilder",
    "build_container",
]
