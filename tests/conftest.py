"""
Pytest configuration and shared fixtures
"""

import pytest
from unittest.mock import MagicMock

from hostnet_config.config import AddressingMode, Interface, InterfaceStatus, PendingEdit
from hostnet_config.sources import Applier, ObservationSource


@pytest.fixture
def manual_interface() -> Interface:
    """Statically addressed interface with a gateway and routes"""
    return Interface(
        name="eth0",
        status=InterfaceStatus.UP,
        mode=AddressingMode.MANUAL,
        address="10.0.0.5",
        subnet="255.255.255.0",
        gateway="10.0.0.1",
        dns=("8.8.8.8", "1.1.1.1"),
        routes=("192.168.1.0/24",),
        metric=100,
    )


@pytest.fixture
def dhcp_interface() -> Interface:
    """DHCP interface with a lease"""
    return Interface(
        name="wlan0",
        status=InterfaceStatus.UP,
        mode=AddressingMode.DHCP,
        address="192.168.1.42",
        subnet="255.255.255.0",
    )


@pytest.fixture
def uplink_interface() -> Interface:
    """Reserved physical uplink"""
    return Interface(
        name="enp6s0f0",
        status=InterfaceStatus.UP,
        mode=AddressingMode.MANUAL,
        address="203.0.113.2",
        subnet="255.255.255.252",
        gateway="203.0.113.1",
    )


@pytest.fixture
def snapshot(manual_interface, dhcp_interface, uplink_interface) -> dict[str, Interface]:
    return {
        iface.name: iface
        for iface in (manual_interface, dhcp_interface, uplink_interface)
    }


@pytest.fixture
def manual_edit() -> PendingEdit:
    """Valid Manual-mode pending edit"""
    return PendingEdit(
        interface="eth0",
        new_name="eth0",
        mode=AddressingMode.MANUAL,
        address="10.0.0.5",
        subnet="255.255.255.0",
        gateway="10.0.0.1",
        dns=" 8.8.8.8 , 1.1.1.1",
        routes="192.168.1.0/24, 10.0.0.0/8",
        metric="100",
    )


@pytest.fixture
def mock_source(snapshot):
    """Observation source returning the sample snapshot"""
    source = MagicMock(spec=ObservationSource)
    source.observe.return_value = snapshot
    return source


@pytest.fixture
def mock_applier():
    """Applier that accepts every request"""
    applier = MagicMock(spec=Applier)
    applier.apply.return_value = None
    return applier


@pytest.fixture
def network_info() -> dict:
    """Host agent /api1/network-info payload"""
    return {
        "network_info": {
            "eth0": {
                "Status": "Up",
                "DHCP Status": "Manual",
                "IP Address": "10.0.0.5",
                "Subnet Mask": "255.255.255.0",
                "Gateway": "10.0.0.1",
                "DNS": ["8.8.8.8", "1.1.1.1"],
                "Routes": [{"to": "192.168.1.0/24", "via": "10.0.0.1"}],
                "Metric": 100,
            },
            "eth1": {
                "Status": "Down",
                "DHCP Status": "DHCP",
                "IP Address": None,
                "Subnet Mask": None,
                "Gateway": None,
                "DNS": [],
                "Routes": [],
                "Metric": None,
            },
            "enp6s0f0": {
                "Status": "Up",
                "DHCP Status": "Manual",
                "IP Address": "203.0.113.2",
                "Subnet Mask": "255.255.255.252",
            },
        }
    }
