"""
Observation sources and appliers (abstract base classes and protocols)

An observation source produces a full snapshot of interface state; an
applier takes a canonical request and either accepts all of it or
rejects it with a reason.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional, Protocol, TypeAlias

import httpx

from .config import (
    AddressingMode,
    CanonicalRequest,
    Interface,
    InterfaceName,
    InterfaceStatus,
)
from .errors import ApplyFailed, ObservationFailed
from .parser import split_list

logger = logging.getLogger(__name__)

NETWORK_INFO_PATH = "/api1/network-info"
UPDATE_NETWORK_PATH = "/api1/update-network"

Snapshot: TypeAlias = dict[InterfaceName, Interface]


class Notifier(Protocol):
    """Fire-and-forget operator notice channel"""

    def __call__(self, message: str) -> None: ...


class ObservationSource(ABC):
    """
    Abstract base class for interface state discovery.

    Subclasses return a complete snapshot on every call; callers replace
    their previous view wholesale.
    """

    @abstractmethod
    def observe(self) -> Snapshot:
        """
        Observe all network interfaces.

        Returns:
            Mapping of interface name to observed Interface

        Raises:
            ObservationFailed: If state could not be read
        """
        ...

    def close(self) -> None:
        """Release resources held by the source"""


class Applier(ABC):
    """Abstract base class for the collaborator that rewrites host networking."""

    @abstractmethod
    def apply(self, request: CanonicalRequest) -> None:
        """
        Apply a canonical request.

        Args:
            request: Validated change request

        Raises:
            ApplyFailed: If the backend rejected the request
        """
        ...

    def close(self) -> None:
        """Release resources held by the applier"""


def _parse_dns(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return split_list(value)
    return tuple(str(entry).strip() for entry in value if str(entry).strip())


def _parse_routes(value: Any) -> tuple[str, ...]:
    routes: list[str] = []
    for route in value or ():
        if isinstance(route, Mapping):
            destination = route.get("to") or route.get("destination")
        else:
            destination = route
        if destination:
            routes.append(str(destination).strip())
    return tuple(routes)


def _parse_metric(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-integer metric in observation: {value!r}")
        return None


def parse_interface(name: InterfaceName, info: Mapping[str, Any]) -> Interface:
    """
    Build an Interface from one network-info record.

    Args:
        name: Interface name
        info: Record with "Status", "DHCP Status", "IP Address",
            "Subnet Mask", "Gateway", "DNS", "Routes" and "Metric" keys

    Returns:
        Observed Interface
    """
    return Interface(
        name=name,
        status=InterfaceStatus.from_label(info.get("Status")),
        mode=AddressingMode.from_label(info.get("DHCP Status")),
        address=info.get("IP Address") or "",
        subnet=info.get("Subnet Mask") or "",
        gateway=info.get("Gateway") or "",
        dns=_parse_dns(info.get("DNS")),
        routes=_parse_routes(info.get("Routes")),
        metric=_parse_metric(info.get("Metric")),
    )


def parse_network_info(network_info: Mapping[str, Any]) -> Snapshot:
    """Convert a network-info mapping into an interface snapshot"""
    snapshot: Snapshot = {}
    for name, info in network_info.items():
        if not isinstance(info, Mapping):
            logger.warning(f"Skipping malformed record for {name}")
            continue
        snapshot[name] = parse_interface(name, info)
    return snapshot


class HttpObservationSource(ObservationSource):
    """
    Observe interfaces through the host agent's HTTP API.

    Attributes:
        base_url: Agent base URL (e.g., http://192.0.2.10:8080)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))

    def observe(self) -> Snapshot:
        """Fetch /api1/network-info, cache-busted with a millisecond timestamp"""
        url = f"{self.base_url}{NETWORK_INFO_PATH}"
        try:
            response = self._client.get(url, params={"ts": int(time.time() * 1000)})
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise ObservationFailed(f"Error fetching network info: {e}") from e
        except json.JSONDecodeError as e:
            raise ObservationFailed(f"Malformed network info response: {e}") from e

        network_info = data.get("network_info") if isinstance(data, dict) else None
        if not isinstance(network_info, dict):
            raise ObservationFailed("Network info response has no 'network_info' mapping")

        return parse_network_info(network_info)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class HttpApplier(Applier):
    """
    Submit canonical requests to the host agent's HTTP API.

    The agent answers {"status": "success"} or
    {"status": "error", "message": "..."}.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))

    def apply(self, request: CanonicalRequest) -> None:
        url = f"{self.base_url}{UPDATE_NETWORK_PATH}"
        payload = request.to_payload()
        logger.info(f"Submitting update for {request.interface} to {url}")

        try:
            response = self._client.post(url, json=payload)
            data = response.json()
        except httpx.HTTPError as e:
            raise ApplyFailed(f"Error updating network: {e}") from e
        except json.JSONDecodeError as e:
            raise ApplyFailed(
                f"Error updating network: unreadable response (HTTP {response.status_code})"
            ) from e

        if not isinstance(data, dict) or data.get("status") != "success":
            message = data.get("message") if isinstance(data, dict) else None
            raise ApplyFailed(message or f"Update rejected (HTTP {response.status_code})")

        logger.info(f"[OK] Update accepted for {request.interface}")

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class DryRunApplier(Applier):
    """Log requests instead of applying them; always succeeds."""

    def __init__(self):
        self.requests: list[CanonicalRequest] = []

    def apply(self, request: CanonicalRequest) -> None:
        self.requests.append(request)
        logger.info(f"[DRY-RUN] Would apply: {json.dumps(request.to_payload())}")
