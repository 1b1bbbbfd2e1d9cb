"""
Tests for interface editability policy
"""

import pytest
from hostnet_config.errors import InterfaceNotEditable
from hostnet_config.policy import DEFAULT_RESERVED_PATTERNS, EditabilityPolicy, is_editable


class TestEditabilityPolicy:
    """Test reserved uplink detection"""

    def test_uplinks_not_editable(self):
        """Test physical uplink names are reserved"""
        assert not is_editable("enp6s0f0")
        assert not is_editable("enp6s0f1")

    def test_regular_interfaces_editable(self):
        """Test ordinary names are editable"""
        assert is_editable("eth0")
        assert is_editable("wlan0")
        assert is_editable("enp6s0")
        assert is_editable("enp6s0f0.100")

    def test_default_patterns_frozen(self):
        """Test default pattern list is immutable"""
        assert isinstance(DEFAULT_RESERVED_PATTERNS, tuple)

    def test_custom_patterns(self):
        """Test extra reserved patterns"""
        policy = EditabilityPolicy([r"^enp6s0f\d+$", r"^mgmt\d*$"])
        assert not policy.is_editable("mgmt0")
        assert not policy.is_editable("enp6s0f3")
        assert policy.is_editable("eth0")

    def test_no_patterns(self):
        """Test empty pattern list makes everything editable"""
        assert EditabilityPolicy([]).is_editable("enp6s0f0")

    def test_ensure_editable_success(self):
        """Test editable interface passes"""
        EditabilityPolicy().ensure_editable("eth0")

    def test_ensure_editable_failure(self):
        """Test reserved interface raises"""
        with pytest.raises(InterfaceNotEditable, match="This interface cannot be edited."):
            EditabilityPolicy().ensure_editable("enp6s0f0")
