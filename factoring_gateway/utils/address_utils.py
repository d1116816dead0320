"""Address validation utilities"""

import re
from typing import Optional
from factoring_gateway.domain.exceptions import InvalidAddressError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

_ZERO_PATTERN = re.compile(r"^0x0*$", re.IGNORECASE)


def is_zero_address(address: Optional[str]) -> bool:
    """Empty, missing, or 0x followed only by zeros"""
    if address is None:
        return True
    address = address.strip()
    return not address or bool(_ZERO_PATTERN.match(address))


def ensure_address(address: Optional[str], name: str = "address") -> str:
    if is_zero_address(address):
        raise InvalidAddressError(f"Invalid {name}: zero address")
    return address.strip()


def normalize_asset_id(asset_id: str) -> str:
    """Registry key for an asset: hex addresses compare case-insensitively"""
    return asset_id.strip().lower()
