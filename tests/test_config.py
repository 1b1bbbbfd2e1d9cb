"""
Tests for interface, edit and request models
"""

import pytest
from hostnet_config.config import (
    AddressingMode,
    CanonicalRequest,
    Interface,
    InterfaceStatus,
    PendingEdit,
)


class TestEnums:
    """Test status and mode label mapping"""

    def test_status_from_label(self):
        """Test only 'up' (any case) maps to Up"""
        assert InterfaceStatus.from_label("Up") is InterfaceStatus.UP
        assert InterfaceStatus.from_label("UP") is InterfaceStatus.UP
        assert InterfaceStatus.from_label("Down") is InterfaceStatus.DOWN
        assert InterfaceStatus.from_label("UNKNOWN") is InterfaceStatus.DOWN
        assert InterfaceStatus.from_label(None) is InterfaceStatus.DOWN

    def test_mode_from_label(self):
        """Test anything other than DHCP is Manual"""
        assert AddressingMode.from_label("DHCP") is AddressingMode.DHCP
        assert AddressingMode.from_label("dhcp") is AddressingMode.DHCP
        assert AddressingMode.from_label("Manual") is AddressingMode.MANUAL
        assert AddressingMode.from_label("Static") is AddressingMode.MANUAL
        assert AddressingMode.from_label(None) is AddressingMode.MANUAL

    def test_mode_from_enum_passthrough(self):
        """Test enum values pass through unchanged"""
        assert AddressingMode.from_label(AddressingMode.DHCP) is AddressingMode.DHCP


class TestInterface:
    """Test observed Interface dataclass"""

    def test_defaults(self):
        """Test missing fields default to empty"""
        iface = Interface(name="eth2")
        assert iface.status is InterfaceStatus.DOWN
        assert iface.address == ""
        assert iface.dns == ()
        assert iface.metric is None

    def test_is_frozen(self, manual_interface):
        """Test observed records are immutable"""
        with pytest.raises(AttributeError):
            manual_interface.address = "10.0.0.6"

    def test_str_representation(self, manual_interface):
        """Test string representation includes icons and info"""
        str_repr = str(manual_interface)
        assert "[+]" in str_repr
        assert "eth0" in str_repr
        assert "10.0.0.5" in str_repr


class TestPendingEdit:
    """Test PendingEdit seeding"""

    def test_seed_from_manual_interface(self):
        """Test seeded fields equal the observed values exactly"""
        iface = Interface(
            name="eth0",
            status=InterfaceStatus.UP,
            mode=AddressingMode.MANUAL,
            address="10.0.0.5",
            subnet="255.255.255.0",
        )
        edit = PendingEdit.from_interface(iface)
        assert edit.interface == "eth0"
        assert edit.new_name == "eth0"
        assert edit.mode is AddressingMode.MANUAL
        assert edit.address == "10.0.0.5"
        assert edit.subnet == "255.255.255.0"
        assert edit.gateway == ""
        assert edit.routes == ""
        assert edit.metric == ""

    def test_seed_joins_lists(self, manual_interface):
        """Test DNS and routes are joined into editable strings"""
        edit = PendingEdit.from_interface(manual_interface)
        assert edit.dns == "8.8.8.8, 1.1.1.1"
        assert edit.routes == "192.168.1.0/24"
        assert edit.metric == "100"

    def test_mode_label_coerced(self):
        """Test mode given as a label becomes an enum"""
        edit = PendingEdit(interface="eth0", mode="Manual")
        assert edit.mode is AddressingMode.MANUAL


class TestCanonicalRequest:
    """Test applier wire format"""

    def test_to_payload(self):
        """Test payload keys and absent markers"""
        request = CanonicalRequest(
            interface="eth0",
            new_interface_name="lan0",
            address="",
            subnet="",
            gateway=None,
            dns=("8.8.8.8",),
            dhcp=True,
            routes=(),
            metric=None,
        )
        assert request.to_payload() == {
            "interface": "eth0",
            "new_interface_name": "lan0",
            "ip": "",
            "subnet": "",
            "gateway": None,
            "dns": ["8.8.8.8"],
            "dhcp": True,
            "routes": [],
            "metric": None,
        }
        assert request.renames_interface
