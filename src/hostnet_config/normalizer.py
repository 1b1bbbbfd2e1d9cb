"""
Pending edit -> canonical request normalization
"""

from .config import AddressingMode, CanonicalRequest, PendingEdit
from .parser import parse_metric, split_list


def normalize(edit: PendingEdit) -> CanonicalRequest:
    """
    Convert an operator working copy into a canonical request.

    DHCP mode always clears address and subnet, whatever the working copy
    holds. An empty gateway or metric becomes None.

    Args:
        edit: Pending edit to normalize

    Returns:
        New CanonicalRequest; the edit is not modified

    Raises:
        InvalidMetric: If metric is set but not a non-negative integer
    """
    dhcp = edit.mode is AddressingMode.DHCP

    return CanonicalRequest(
        interface=edit.interface,
        new_interface_name=edit.new_name or edit.interface,
        address="" if dhcp else edit.address,
        subnet="" if dhcp else edit.subnet,
        gateway=edit.gateway or None,
        dns=split_list(edit.dns),
        dhcp=dhcp,
        routes=split_list(edit.routes),
        metric=parse_metric(edit.metric),
    )
