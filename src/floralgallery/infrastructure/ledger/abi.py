"""
Asset contract ABI (fixed by the deployed contract version).
"""

from __future__ import annotations

from typing import Any, Dict, List


def _fn(
    name: str,
    inputs: List[Dict[str, str]],
    outputs: List[Dict[str, str]],
    mutability: str,
) -> Dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": inputs,
        "outputs": outputs,
        "stateMutability": mutability,
    }


_TOKEN_ID = {"name": "tokenId", "type": "uint256"}

ASSET_CONTRACT_ABI: List[Dict[str, Any]] = [
    _fn(
        "mint",
        [{"name": "tokenURI", "type": "string"}, {"name": "price", "type": "uint256"}],
        [{"name": "", "type": "uint256"}],
        "nonpayable",
    ),
    _fn("purchaseNFT", [_TOKEN_ID], [], "payable"),
    _fn("listForSale", [_TOKEN_ID, {"name": "price", "type": "uint256"}], [], "nonpayable"),
    _fn("removeFromSale", [_TOKEN_ID], [], "nonpayable"),
    _fn("burn", [_TOKEN_ID], [], "nonpayable"),
    _fn("getAllNFTs", [], [{"name": "", "type": "uint256[]"}], "view"),
    _fn("getNFTsForSale", [], [{"name": "", "type": "uint256[]"}], "view"),
    _fn("tokenURI", [_TOKEN_ID], [{"name": "", "type": "string"}], "view"),
    _fn("ownerOf", [_TOKEN_ID], [{"name": "", "type": "address"}], "view"),
    _fn(
        "nftInfo",
        [_TOKEN_ID],
        [
            {"name": "creator", "type": "address"},
            {"name": "price", "type": "uint256"},
            {"name": "forSale", "type": "bool"},
        ],
        "view",
    ),
    _fn("getTotalMinted", [], [{"name": "", "type": "uint256"}], "view"),
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "tokenId", "type": "uint256", "indexed": True},
        ],
    },
]
