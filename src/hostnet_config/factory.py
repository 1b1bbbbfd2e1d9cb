"""
Factory for creating observation sources and appliers from settings
"""

import platform
import logging
from enum import Enum
from typing import Optional

from .linux import LinuxObservationSource
from .settings import Settings
from .sources import Applier, DryRunApplier, HttpApplier, HttpObservationSource, ObservationSource

logger = logging.getLogger(__name__)


class OSType(Enum):
    """Platforms with a native observation source"""
    LINUX = "linux"
    OTHER = "other"


class BackendFactory:
    """
    Factory for backend collaborators.

    Example:
        >>> source = BackendFactory.create_source(settings)
        >>> interfaces = source.observe()
    """

    @staticmethod
    def create_source(settings: Settings, os_type: Optional[OSType] = None) -> ObservationSource:
        """
        Create the observation source selected by settings.backend.

        Args:
            settings: Resolved settings
            os_type: Optional OS type for "auto". If None, auto-detect.

        Returns:
            ObservationSource implementation

        Raises:
            ValueError: If the backend name is unknown
        """
        backend = settings.backend
        if backend == "auto":
            if os_type is None:
                os_type = BackendFactory._detect_os()
            backend = "linux" if os_type is OSType.LINUX else "http"

        match backend:
            case "http":
                logger.info(f"Observing interfaces via {settings.api_url}")
                return HttpObservationSource(settings.api_url, timeout=settings.timeout)

            case "linux":
                logger.info("Observing local interfaces via iproute2")
                return LinuxObservationSource(timeout=int(settings.timeout))

            case _:
                raise ValueError(f"Backend '{settings.backend}' not supported")

    @staticmethod
    def create_applier(settings: Settings) -> Applier:
        """
        Create the applier for settings.

        Dry-run never touches the host. Otherwise requests go to the host
        agent at settings.api_url, whatever the observation backend.
        """
        if settings.dry_run:
            logger.info("Dry-run mode: requests will be logged, not applied")
            return DryRunApplier()
        return HttpApplier(settings.api_url, timeout=settings.timeout)

    @staticmethod
    def _detect_os() -> OSType:
        """Auto-detect current operating system."""
        if platform.system().lower() == "linux":
            return OSType.LINUX
        return OSType.OTHER
