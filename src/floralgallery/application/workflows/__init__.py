"""
工作流：交易编排与画廊读模型。
"""

from .gallery import Gallery
from .gallery_builder import GalleryReadModelBuilder, GallerySnapshot
from .orchestrator import (
    DELIST,
    MINT,
    PURCHASE,
    RELIST,
    RETIRE,
    MintRequest,
    TransactionOrchestrator,
    WorkflowOutcome,
)

__all__ = [
    "Gallery",
    "GalleryReadModelBuilder",
    "GallerySnapshot",
    "MintRequest",
    "TransactionOrchestrator",
    "WorkflowOutcome",
    "MINT",
    "PURCHASE",
    "RELIST",
    "DELIST",
    "RETIRE",
]
