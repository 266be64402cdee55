"""
Contract surface - the example mint contract and ABI call encoding.

Only ``mint`` is exercised by the scenarios; the other write functions
are declared so estimations can name them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from eth_abi import decode, encode
from eth_hash.auto import keccak

FunctionName = Literal[
    "mint",
    "approve",
    "safeTransferFrom",
    "setApprovalForAll",
    "transferFrom",
]

FUNCTION_NAMES: tuple[str, ...] = (
    "mint",
    "approve",
    "safeTransferFrom",
    "setApprovalForAll",
    "transferFrom",
)


@dataclass(frozen=True)
class Contract:
    """A deployed contract: address plus ABI."""

    address: str
    abi: list[dict[str, Any]]


# ---------------------------------------------------------------------------
# Example ERC-721 mint contract (no-argument mint)
# ---------------------------------------------------------------------------
_MINT_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "mint",
        "inputs": [],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "approve",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "safeTransferFrom",
        "inputs": [
            {"name": "from", "type": "address"},
            {"name": "to", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "setApprovalForAll",
        "inputs": [
            {"name": "operator", "type": "address"},
            {"name": "approved", "type": "bool"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "transferFrom",
        "inputs": [
            {"name": "from", "type": "address"},
            {"name": "to", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "ownerOf",
        "inputs": [{"name": "tokenId", "type": "uint256"}],
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "totalSupply",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
]

MINT_CONTRACT = Contract(
    address="0x9242fda4882285a6dd412ba556d8ecdf9f994d78",
    abi=_MINT_ABI,
)


def find_function(abi: list, function_name: str) -> dict[str, Any]:
    """Return the ABI entry for *function_name* or raise ``ValueError``."""
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def function_selector(abi: list, function_name: str) -> bytes:
    """First 4 bytes of keccak256 over the canonical signature."""
    func = find_function(abi, function_name)
    input_types = [inp["type"] for inp in func.get("inputs", [])]
    sig = f"{function_name}({','.join(input_types)})"
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(sig.encode("utf-8"))[:4]


def encode_call(abi: list, function_name: str, args: list | None = None) -> str:
    """ABI-encode a function call to 0x-prefixed hex calldata."""
    func = find_function(abi, function_name)
    input_types = [inp["type"] for inp in func.get("inputs", [])]
    selector = function_selector(abi, function_name)

    if args:
        encoded_args = encode(input_types, args)
    else:
        encoded_args = b""

    return "0x" + selector.hex() + encoded_args.hex()


def decode_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns None for functions without outputs, the bare value for a
    single output, or a tuple.
    """
    func = find_function(abi, function_name)
    output_types = [out["type"] for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:]) if data.startswith("0x") else bytes.fromhex(data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded
