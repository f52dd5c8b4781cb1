from .models import (
    AppConfig,
    GalleryConfig,
    LedgerConfig,
    LoggingConfig,
    StorageConfig,
    MAX_BATCH_QUANTITY,
    PLACEHOLDER_ADDRESS,
    SEPOLIA_CHAIN_ID,
)

__all__ = [
    "AppConfig",
    "GalleryConfig",
    "LedgerConfig",
    "LoggingConfig",
    "StorageConfig",
    "MAX_BATCH_QUANTITY",
    "PLACEHOLDER_ADDRESS",
    "SEPOLIA_CHAIN_ID",
]
