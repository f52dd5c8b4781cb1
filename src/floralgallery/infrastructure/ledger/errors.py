"""
Translate web3 / transport exceptions into taxonomy errors.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Tuple

import aiohttp
from web3.exceptions import ContractLogicError, ProviderConnectionError, TimeExhausted, Web3RPCError

from floralgallery.core.errors import FloralGalleryError, classify_ledger_failure


def _rpc_error(exc: BaseException) -> Tuple[Optional[Any], str]:
    """Pull (code, message) out of whatever shape the provider used."""
    payload: Any = None
    if isinstance(exc, Web3RPCError):
        response = exc.rpc_response or {}
        payload = response.get("error") if isinstance(response, dict) else None
    elif exc.args and isinstance(exc.args[0], dict):
        payload = exc.args[0]

    if isinstance(payload, dict):
        return payload.get("code"), str(payload.get("message") or exc)
    return getattr(exc, "code", None), str(exc)


def translate_ledger_exception(exc: BaseException, operation: str = "") -> FloralGalleryError:
    if isinstance(exc, FloralGalleryError):
        return exc
    if isinstance(exc, ContractLogicError):
        return classify_ledger_failure("CALL_EXCEPTION", exc.message or str(exc), operation=operation)
    if isinstance(exc, TimeExhausted):
        return classify_ledger_failure("TIMEOUT", str(exc), operation=operation)
    if isinstance(exc, (ProviderConnectionError, aiohttp.ClientError, asyncio.TimeoutError, ConnectionError)):
        return classify_ledger_failure("NETWORK_ERROR", str(exc), operation=operation)

    code, message = _rpc_error(exc)
    return classify_ledger_failure(code, message, operation=operation)
