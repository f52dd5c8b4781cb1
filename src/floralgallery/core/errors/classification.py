"""
Ledger failure classification table.

RPC providers report failures as a code (JSON-RPC integer, or a symbolic
string such as ``ACTION_REJECTED``) plus free text. Each failure is mapped to
exactly one of ``UserDeclined``, ``LedgerRejected`` or ``TransportError``;
the first matching rule wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple, Type, Union

from .errors import FloralGalleryError, LedgerRejected, TransportError, UserDeclined

Code = Union[int, str]


@dataclass(frozen=True)
class ClassificationRule:
    error_type: Type[FloralGalleryError]
    codes: FrozenSet[Code]
    phrases: Tuple[str, ...]
    user_message: str

    def matches(self, code: Optional[Code], text: str) -> bool:
        if code is not None and code in self.codes:
            return True
        return any(phrase in text for phrase in self.phrases)


LEDGER_ERROR_TABLE: Tuple[ClassificationRule, ...] = (
    ClassificationRule(
        UserDeclined,
        codes=frozenset({4001, "ACTION_REJECTED"}),
        phrases=("user rejected", "user denied", "rejected by user", "user cancelled"),
        user_message="Action cancelled",
    ),
    ClassificationRule(
        LedgerRejected,
        codes=frozenset({"INSUFFICIENT_FUNDS"}),
        phrases=("insufficient funds",),
        user_message="Insufficient funds. You need enough ETH to cover the price plus gas fees.",
    ),
    ClassificationRule(
        LedgerRejected,
        codes=frozenset({"CALL_EXCEPTION", 3}),
        phrases=("execution reverted", "revert", "transaction failed"),
        user_message=(
            "Contract error. Please verify: 1) Contract address is correct, "
            "2) You have enough ETH for gas fees, 3) Contract is deployed on the selected network"
        ),
    ),
    ClassificationRule(
        LedgerRejected,
        codes=frozenset({"NONCE_EXPIRED", "REPLACEMENT_UNDERPRICED"}),
        phrases=("nonce too low", "replacement transaction underpriced", "already known"),
        user_message="Another transaction from this account is still pending. Please wait and try again.",
    ),
    ClassificationRule(
        TransportError,
        codes=frozenset({"NETWORK_ERROR", "TIMEOUT", "SERVER_ERROR", -32005}),
        phrases=("timeout", "timed out", "connection", "not in the chain after"),
        user_message="The network did not respond. Your transaction may still be processed; check the explorer before retrying.",
    ),
)

_UNMATCHED_RPC_MESSAGE = "The ledger refused the transaction."
_NO_RESPONSE_MESSAGE = "No response from the ledger. Please check your connection."


def _normalize_code(code: object) -> Optional[Code]:
    if code is None or isinstance(code, bool):
        return None
    if isinstance(code, int):
        return code
    text = str(code).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return text.upper()


def classify_ledger_failure(
    code: object,
    detail: str = "",
    *,
    operation: str = "",
) -> FloralGalleryError:
    """
    Map a provider failure to a taxonomy error.

    Unmatched failures that carry an integer JSON-RPC code came back from the
    ledger and count as ``LedgerRejected``; anything without a code means no
    usable response arrived and counts as ``TransportError``.
    """
    normalized = _normalize_code(code)
    text = (detail or "").lower()
    context = {"operation": operation, "provider_code": normalized, "detail": (detail or "")[:300]}

    for rule in LEDGER_ERROR_TABLE:
        if rule.matches(normalized, text):
            return rule.error_type(message=rule.user_message, context=context)

    if isinstance(normalized, int):
        return LedgerRejected(message=_UNMATCHED_RPC_MESSAGE, context=context)
    return TransportError(message=_NO_RESPONSE_MESSAGE, context=context)
