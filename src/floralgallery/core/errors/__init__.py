"""
统一错误模块。
"""

from .errors import (
    ErrorSeverity,
    FloralGalleryError,
    ConfigurationError,
    ValidationError,
    PublicationError,
    MetadataError,
    LedgerRejected,
    UserDeclined,
    TransportError,
    PartialBatchFailure,
    Result,
)
from .classification import LEDGER_ERROR_TABLE, ClassificationRule, classify_ledger_failure

__all__ = [
    "ErrorSeverity",
    "FloralGalleryError",
    "ConfigurationError",
    "ValidationError",
    "PublicationError",
    "MetadataError",
    "LedgerRejected",
    "UserDeclined",
    "TransportError",
    "PartialBatchFailure",
    "Result",
    "LEDGER_ERROR_TABLE",
    "ClassificationRule",
    "classify_ledger_failure",
]
