from .content_port import ContentPublisherPort
from .ledger_port import LedgerPort, Submission
from .metadata_port import MetadataFetcherPort
from .session_port import SessionGuardPort

__all__ = [
    "ContentPublisherPort",
    "LedgerPort",
    "MetadataFetcherPort",
    "SessionGuardPort",
    "Submission",
]
