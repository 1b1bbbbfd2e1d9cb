"""
Linux interface observation using iproute2 JSON output
"""

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Optional, Sequence

from .config import AddressingMode, Interface, InterfaceStatus
from .errors import ObservationFailed
from .parser import is_ipv4_address, prefix_to_netmask
from .sources import ObservationSource, Snapshot

logger = logging.getLogger(__name__)

RESOLV_CONF = Path("/etc/resolv.conf")


class LinuxObservationSource(ObservationSource):
    """
    Linux interface observation.

    Uses:
    - ip -j addr show for link state and IPv4 addresses
    - ip -j route show for default gateway, metric and static routes
    - /etc/resolv.conf for DNS servers

    An IPv4 address flagged "dynamic" by the kernel is treated as a DHCP
    lease; anything else is Manual.
    """

    def __init__(self, timeout: int = 10, resolv_conf: Path = RESOLV_CONF):
        self.timeout = timeout
        self.resolv_conf = resolv_conf

    def observe(self) -> Snapshot:
        links = self._run_ip(["ip", "-j", "addr", "show"])
        routes = self._run_ip(["ip", "-j", "route", "show"])
        dns = self._read_nameservers()

        snapshot: Snapshot = {}
        for link in links:
            name = link.get("ifname")
            if not name or name == "lo":
                continue
            snapshot[name] = self._create_interface(link, routes, dns)

        logger.debug(f"Observed {len(snapshot)} interfaces")
        return snapshot

    def _run_ip(self, cmd: Sequence[str]) -> list[dict[str, Any]]:
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout
            )
            return json.loads(result.stdout or "[]")
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as e:
            raise ObservationFailed(f"{' '.join(cmd)} failed: {e}") from e
        except json.JSONDecodeError as e:
            raise ObservationFailed(f"{' '.join(cmd)} returned invalid JSON: {e}") from e

    def _create_interface(
        self,
        link: dict[str, Any],
        routes: list[dict[str, Any]],
        dns: tuple[str, ...]
    ) -> Interface:
        name = link["ifname"]
        inet = self._first_ipv4(link)

        default_route: Optional[dict[str, Any]] = None
        static_routes: list[str] = []
        for route in routes:
            if route.get("dev") != name:
                continue
            dst = route.get("dst", "")
            if dst == "default":
                if default_route is None:
                    default_route = route
            elif route.get("gateway"):
                static_routes.append(dst if "/" in dst else f"{dst}/32")

        return Interface(
            name=name,
            status=InterfaceStatus.from_label(link.get("operstate")),
            mode=AddressingMode.DHCP if inet and inet.get("dynamic") else AddressingMode.MANUAL,
            address=inet.get("local", "") if inet else "",
            subnet=prefix_to_netmask(inet["prefixlen"]) if inet and "prefixlen" in inet else "",
            gateway=default_route.get("gateway", "") if default_route else "",
            dns=dns,
            routes=tuple(static_routes),
            metric=default_route.get("metric") if default_route else None,
        )

    @staticmethod
    def _first_ipv4(link: dict[str, Any]) -> Optional[dict[str, Any]]:
        for addr in link.get("addr_info", []):
            if addr.get("family") == "inet":
                return addr
        return None

    def _read_nameservers(self) -> tuple[str, ...]:
        """IPv4 nameservers from resolv.conf, in file order"""
        try:
            content = self.resolv_conf.read_text()
        except OSError as e:
            logger.warning(f"Cannot read {self.resolv_conf}: {e}")
            return ()

        servers: list[str] = []
        for line in content.splitlines():
            parts = line.split()
            if len(parts) >= 2 and parts[0] == "nameserver" and is_ipv4_address(parts[1]):
                servers.append(parts[1])
        return tuple(servers)
