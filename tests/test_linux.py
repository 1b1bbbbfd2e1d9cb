"""
Tests for Linux iproute2 observation
"""

import json
import subprocess

import pytest
from unittest.mock import MagicMock, patch

from hostnet_config.config import AddressingMode, InterfaceStatus
from hostnet_config.errors import ObservationFailed
from hostnet_config.linux import LinuxObservationSource

IP_ADDR = [
    {"ifname": "lo", "operstate": "UNKNOWN", "addr_info": [
        {"family": "inet", "local": "127.0.0.1", "prefixlen": 8},
    ]},
    {"ifname": "eth0", "operstate": "UP", "addr_info": [
        {"family": "inet", "local": "10.0.0.5", "prefixlen": 24},
        {"family": "inet6", "local": "fe80::1", "prefixlen": 64},
    ]},
    {"ifname": "wlan0", "operstate": "UP", "addr_info": [
        {"family": "inet", "local": "192.168.1.42", "prefixlen": 24, "dynamic": True},
    ]},
    {"ifname": "eth1", "operstate": "DOWN", "addr_info": []},
]

IP_ROUTE = [
    {"dst": "default", "gateway": "10.0.0.1", "dev": "eth0", "metric": 100},
    {"dst": "default", "gateway": "192.168.1.1", "dev": "wlan0", "metric": 600},
    {"dst": "10.0.0.0/24", "dev": "eth0", "protocol": "kernel", "scope": "link"},
    {"dst": "172.16.0.0/12", "gateway": "10.0.0.254", "dev": "eth0"},
    {"dst": "198.51.100.7", "gateway": "10.0.0.254", "dev": "eth0"},
]


def completed(payload) -> MagicMock:
    return MagicMock(returncode=0, stdout=json.dumps(payload), stderr="")


@pytest.fixture
def resolv_conf(tmp_path):
    path = tmp_path / "resolv.conf"
    path.write_text("# generated\nsearch example.com\nnameserver 9.9.9.9\nnameserver fe80::53\nnameserver 1.1.1.1\n")
    return path


class TestLinuxObservationSource:
    """Test snapshot construction from ip -j output"""

    @patch("subprocess.run")
    def test_observe(self, mock_run, resolv_conf):
        mock_run.side_effect = [completed(IP_ADDR), completed(IP_ROUTE)]
        snapshot = LinuxObservationSource(resolv_conf=resolv_conf).observe()

        assert set(snapshot) == {"eth0", "wlan0", "eth1"}

        eth0 = snapshot["eth0"]
        assert eth0.status is InterfaceStatus.UP
        assert eth0.mode is AddressingMode.MANUAL
        assert eth0.address == "10.0.0.5"
        assert eth0.subnet == "255.255.255.0"
        assert eth0.gateway == "10.0.0.1"
        assert eth0.metric == 100
        assert eth0.routes == ("172.16.0.0/12", "198.51.100.7/32")
        assert eth0.dns == ("9.9.9.9", "1.1.1.1")

    @patch("subprocess.run")
    def test_dynamic_address_is_dhcp(self, mock_run, resolv_conf):
        mock_run.side_effect = [completed(IP_ADDR), completed(IP_ROUTE)]
        wlan0 = LinuxObservationSource(resolv_conf=resolv_conf).observe()["wlan0"]
        assert wlan0.mode is AddressingMode.DHCP
        assert wlan0.gateway == "192.168.1.1"
        assert wlan0.metric == 600

    @patch("subprocess.run")
    def test_down_interface_without_address(self, mock_run, resolv_conf):
        mock_run.side_effect = [completed(IP_ADDR), completed(IP_ROUTE)]
        eth1 = LinuxObservationSource(resolv_conf=resolv_conf).observe()["eth1"]
        assert eth1.status is InterfaceStatus.DOWN
        assert eth1.address == ""
        assert eth1.subnet == ""
        assert eth1.gateway == ""
        assert eth1.metric is None

    @patch("subprocess.run")
    def test_command_failure(self, mock_run):
        mock_run.side_effect = subprocess.CalledProcessError(1, ["ip"])
        with pytest.raises(ObservationFailed):
            LinuxObservationSource().observe()

    @patch("subprocess.run")
    def test_missing_ip_binary(self, mock_run):
        mock_run.side_effect = FileNotFoundError("ip")
        with pytest.raises(ObservationFailed):
            LinuxObservationSource().observe()

    @patch("subprocess.run")
    def test_invalid_json(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="not json", stderr="")
        with pytest.raises(ObservationFailed, match="invalid JSON"):
            LinuxObservationSource().observe()

    @patch("subprocess.run")
    def test_missing_resolv_conf(self, mock_run, tmp_path):
        mock_run.side_effect = [completed(IP_ADDR), completed(IP_ROUTE)]
        source = LinuxObservationSource(resolv_conf=tmp_path / "missing")
        assert source.observe()["eth0"].dns == ()
