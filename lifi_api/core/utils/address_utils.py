import re
from typing import Optional

import base58

from lifi_api.core.structures.structures import AddressFamily

_EVM_ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")
_BASE58_ALPHABET: str = base58.BITCOIN_ALPHABET.decode("ascii")
_BASE58_ADDRESS_PATTERN = re.compile(rf"^[{re.escape(_BASE58_ALPHABET)}]{{32,44}}$")


def is_valid_evm_address(address: object) -> bool:
    """True for `0x` followed by exactly 40 hexadecimal characters (any case)."""
    return isinstance(address, str) and _EVM_ADDRESS_PATTERN.match(address) is not None


def is_valid_solana_address(address: object) -> bool:
    """
    True for 32-44 characters of the Bitcoin base58 alphabet (no 0, O, I, l).

    This is a format check only; it does not decode the key.
    """
    return isinstance(address, str) and _BASE58_ADDRESS_PATTERN.match(address) is not None


def detect_address_family(address: Optional[str]) -> AddressFamily:
    if not address:
        return AddressFamily.UNKNOWN
    candidate = address.strip()
    if is_valid_evm_address(candidate):
        return AddressFamily.EVM
    if is_valid_solana_address(candidate):
        return AddressFamily.BASE58
    return AddressFamily.UNKNOWN


def normalize_address(address: Optional[str]) -> str:
    """
    Normalize an address for equality checks.

    Only hex (EVM) addresses are case-folded. Base58 addresses are case-sensitive
    and are returned as-is; so is anything that matches neither family
    (native tickers such as 'SOL', malformed input).
    """
    if not address:
        return ""
    candidate = address.strip()
    if detect_address_family(candidate) is AddressFamily.EVM:
        return candidate.lower()
    return candidate


def addresses_equal(left: Optional[str], right: Optional[str]) -> bool:
    return normalize_address(left) == normalize_address(right)
