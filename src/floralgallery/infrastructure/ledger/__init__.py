"""
账本访问：web3 合约客户端与会话/网络守卫。
"""

from .abi import ASSET_CONTRACT_ABI
from .errors import translate_ledger_exception
from .session_guard import Web3SessionGuard
from .web3_client import Web3LedgerClient, build_web3

__all__ = [
    "ASSET_CONTRACT_ABI",
    "Web3LedgerClient",
    "Web3SessionGuard",
    "build_web3",
    "translate_ledger_exception",
]
