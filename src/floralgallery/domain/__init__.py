"""
领域模型
"""

from .asset import (
    AssetIdentifier,
    AssetInfo,
    AssetPayload,
    AssetRecord,
    Confirmation,
    Descriptor,
    GalleryEntry,
    PendingTransaction,
    sniff_image_type,
)
from .session import SessionContext
from .units import to_base_units, to_display_units

__all__ = [
    "AssetIdentifier",
    "AssetInfo",
    "AssetPayload",
    "AssetRecord",
    "Confirmation",
    "Descriptor",
    "GalleryEntry",
    "PendingTransaction",
    "SessionContext",
    "sniff_image_type",
    "to_base_units",
    "to_display_units",
]
