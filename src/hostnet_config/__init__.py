"""
Host Network Configuration Package
Interface observation, edit validation and change-request reconciliation

Version 1.0.0 - Python 3.12+ with modern type system
"""

__version__ = "1.0.0"

from .config import (
    AddressingMode,
    CanonicalRequest,
    Interface,
    InterfaceStatus,
    PendingEdit,
)
from .errors import (
    ApplyFailed,
    GatewayRouteMismatch,
    HostNetError,
    InterfaceNotEditable,
    InvalidMetric,
    InvalidRouteFormat,
    MissingMandatoryField,
    ObservationFailed,
    SessionStateError,
    ValidationFailure,
)
from .normalizer import normalize
from .parser import parse_routes
from .policy import EditabilityPolicy, is_editable
from .settings import Settings, load_settings, init_config
from .synchronizer import SessionState, StateSynchronizer
from .validator import ConfigValidator, validate

__all__ = [
    "AddressingMode",
    "CanonicalRequest",
    "Interface",
    "InterfaceStatus",
    "PendingEdit",
    "ApplyFailed",
    "GatewayRouteMismatch",
    "HostNetError",
    "InterfaceNotEditable",
    "InvalidMetric",
    "InvalidRouteFormat",
    "MissingMandatoryField",
    "ObservationFailed",
    "SessionStateError",
    "ValidationFailure",
    "normalize",
    "parse_routes",
    "EditabilityPolicy",
    "is_editable",
    "Settings",
    "load_settings",
    "init_config",
    "SessionState",
    "StateSynchronizer",
    "ConfigValidator",
    "validate",
]
