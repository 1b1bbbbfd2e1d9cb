"""
Address and route string parsing

Route checks are syntactic only: octets are not bounded to 0-255 and
prefix lengths are not bounded to 0-32. Range checks are left to the
applier.
"""

import ipaddress
import re
from typing import Optional

from .config import CIDR
from .errors import InvalidMetric, InvalidRouteFormat

_CIDR_TOKEN = r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}/\d{1,2}"

# One or more CIDR tokens separated by commas, optional whitespace after each comma.
# re.ASCII keeps \d to 0-9
ROUTE_LIST_PATTERN = re.compile(rf"^({_CIDR_TOKEN})(,\s*{_CIDR_TOKEN})*$", re.ASCII)


def split_list(text: Optional[str]) -> tuple[str, ...]:
    """
    Split a comma-separated operator field.

    Args:
        text: Raw field value (e.g., " 8.8.8.8 , 1.1.1.1")

    Returns:
        Trimmed non-empty entries in order; empty tuple for a blank field
    """
    if not text:
        return ()
    return tuple(entry for entry in (part.strip() for part in text.split(",")) if entry)


def is_valid_route_list(text: str) -> bool:
    """Check that text is a comma-separated list of A.B.C.D/N tokens"""
    return bool(ROUTE_LIST_PATTERN.match(text.strip()))


def parse_routes(text: str) -> tuple[CIDR, ...]:
    """
    Parse a route list string into CIDR destinations.

    Args:
        text: Route list (e.g., "192.168.1.0/24, 10.0.0.0/8")

    Returns:
        Trimmed CIDR tokens in order

    Raises:
        InvalidRouteFormat: If the string is empty, has a trailing comma,
            or contains a token that is not A.B.C.D/N
    """
    if not is_valid_route_list(text):
        raise InvalidRouteFormat()
    return split_list(text.strip())


def parse_metric(text: Optional[str]) -> Optional[int]:
    """
    Parse the default route metric.

    Returns:
        The metric, or None when the field is empty

    Raises:
        InvalidMetric: If the value is not a non-negative base-10 integer
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None
    if not (text.isascii() and text.isdecimal()):
        raise InvalidMetric(f"Metric must be a non-negative integer, got '{text}'")
    return int(text, 10)


def is_ipv4_address(text: str) -> bool:
    """Check for a well-formed dotted-quad IPv4 address"""
    try:
        ipaddress.IPv4Address(text)
    except ValueError:
        return False
    return True


def prefix_to_netmask(prefixlen: int) -> str:
    """Convert a prefix length to a dotted subnet mask (24 -> 255.255.255.0)"""
    network = ipaddress.IPv4Network(f"0.0.0.0/{prefixlen}")
    return str(network.netmask)
