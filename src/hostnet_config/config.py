"""
Interface, edit-session and change-request models
Python 3.12+ with modern type system
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, TypeAlias

# Python 3.12 type aliases
InterfaceName: TypeAlias = str
IPAddress: TypeAlias = str
CIDR: TypeAlias = str


class InterfaceStatus(Enum):
    """Observed link status"""
    UP = "Up"
    DOWN = "Down"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "InterfaceStatus":
        """Map an observation label to a status; anything but 'up' is Down"""
        if label and label.strip().lower() == "up":
            return cls.UP
        return cls.DOWN


class AddressingMode(Enum):
    """How the interface obtains its IPv4 address"""
    DHCP = "DHCP"
    MANUAL = "Manual"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "AddressingMode":
        """Map an observation or operator label; only 'DHCP' means DHCP"""
        if isinstance(label, AddressingMode):
            return label
        if label and label.strip().upper() == "DHCP":
            return cls.DHCP
        return cls.MANUAL


@dataclass(frozen=True, slots=True)
class Interface:
    """
    Observed state of one network interface.

    Produced by an observation source and replaced wholesale on every
    observation; never patched in place.

    Attributes:
        name: Interface name (e.g., eth0)
        status: Link status
        mode: Addressing mode
        address: IPv4 address, "" if none
        subnet: Subnet mask or CIDR prefix, "" if none
        gateway: Default gateway, "" if none
        dns: DNS servers in configured order
        routes: Route destinations in CIDR notation
        metric: Default route metric if known
    """
    name: InterfaceName
    status: InterfaceStatus = InterfaceStatus.DOWN
    mode: AddressingMode = AddressingMode.MANUAL
    address: IPAddress = ""
    subnet: str = ""
    gateway: IPAddress = ""
    dns: tuple[IPAddress, ...] = ()
    routes: tuple[CIDR, ...] = ()
    metric: Optional[int] = None

    @property
    def is_up(self) -> bool:
        return self.status is InterfaceStatus.UP

    def __str__(self) -> str:
        """Human-readable interface representation with status icons"""
        status = "[+]" if self.is_up else "[-]"
        ip = self.address or "None"
        return f"{status} {self.name:10} {self.mode.value:7} (IP: {ip})"


@dataclass(slots=True)
class PendingEdit:
    """
    Working copy of one interface's configuration during an edit session.

    All operator-editable fields are kept as raw strings, exactly as the
    operator typed them. Normalization happens at submit time.

    Attributes:
        interface: Name of the interface that was selected
        new_name: Edited interface identifier ("" keeps the original)
        mode: Addressing mode
        address: IPv4 address
        subnet: Subnet mask or CIDR prefix
        gateway: Gateway address
        dns: Comma-separated DNS servers
        routes: Comma-separated CIDR routes
        metric: Default route metric
    """
    interface: InterfaceName
    new_name: str = ""
    mode: AddressingMode = AddressingMode.DHCP
    address: str = ""
    subnet: str = ""
    gateway: str = ""
    dns: str = ""
    routes: str = ""
    metric: str = ""

    def __post_init__(self) -> None:
        self.mode = AddressingMode.from_label(self.mode)

    @classmethod
    def from_interface(cls, iface: Interface) -> "PendingEdit":
        """Seed a working copy from the last observed record"""
        return cls(
            interface=iface.name,
            new_name=iface.name,
            mode=iface.mode,
            address=iface.address,
            subnet=iface.subnet,
            gateway=iface.gateway,
            dns=", ".join(iface.dns),
            routes=", ".join(iface.routes),
            metric="" if iface.metric is None else str(iface.metric),
        )


@dataclass(frozen=True, slots=True)
class CanonicalRequest:
    """
    Validated, normalized change request for the applier.

    None marks an absent gateway or metric; an empty string is never used
    for either.
    """
    interface: InterfaceName
    new_interface_name: InterfaceName
    address: IPAddress
    subnet: str
    gateway: Optional[IPAddress]
    dns: tuple[IPAddress, ...] = field(default=())
    dhcp: bool = True
    routes: tuple[CIDR, ...] = field(default=())
    metric: Optional[int] = None

    @property
    def renames_interface(self) -> bool:
        return self.new_interface_name != self.interface

    def to_payload(self) -> dict[str, Any]:
        """Render the applier wire format"""
        return {
            "interface": self.interface,
            "new_interface_name": self.new_interface_name,
            "ip": self.address,
            "subnet": self.subnet,
            "gateway": self.gateway,
            "dns": list(self.dns),
            "dhcp": self.dhcp,
            "routes": list(self.routes),
            "metric": self.metric,
        }
