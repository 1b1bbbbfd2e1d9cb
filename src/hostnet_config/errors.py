"""
Exception hierarchy for interface configuration sessions

Every error here is session-local: callers log it, surface a single
message to the operator and carry on.
"""


class HostNetError(Exception):
    """Base class for all hostnet-config errors"""


class ValidationFailure(HostNetError):
    """
    A pending edit violated a validation rule.

    Raised for the first rule that fails; the message is meant to be
    shown to the operator as-is.
    """

    default_message = "Invalid interface configuration"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class MissingMandatoryField(ValidationFailure):
    default_message = "IP Address and Subnet are mandatory fields!"


class GatewayRouteMismatch(ValidationFailure):
    default_message = "Gateway and Routes must be provided together!"


class InvalidRouteFormat(ValidationFailure):
    default_message = (
        "Invalid routes format! Ensure each route follows the 'ip/subnet' "
        "format, e.g. 192.168.1.0/24"
    )


class InvalidMetric(ValidationFailure):
    default_message = "Metric must be a non-negative integer"


class InterfaceNotEditable(HostNetError):
    """Interface is reserved and must never be reconfigured"""


class SessionStateError(HostNetError):
    """Operation is not allowed in the current edit-session state"""


class ApplyFailed(HostNetError):
    """The applier rejected a canonical request"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ObservationFailed(HostNetError):
    """Interface state could not be observed (transient)"""
