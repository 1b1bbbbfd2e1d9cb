"""Pre-flight validation for pending interface edits.

Catches malformed requests before anything reaches the applier. Rules run
in a fixed order and the first violation wins; there is no accumulated
error list.
"""
import logging
from typing import Optional

from .config import AddressingMode, CanonicalRequest, PendingEdit
from .errors import (
    GatewayRouteMismatch,
    InvalidRouteFormat,
    MissingMandatoryField,
    ValidationFailure,
)
from .normalizer import normalize
from .parser import is_valid_route_list, parse_metric

logger = logging.getLogger(__name__)


class ConfigValidator:
    """Validate a pending edit and produce its canonical request."""

    def validate(self, edit: PendingEdit) -> CanonicalRequest:
        """
        Validate a pending edit.

        Checks, in order:
        - Manual mode has both address and subnet
        - Gateway and routes are set together
        - Routes are a comma-separated A.B.C.D/N list
        - Metric is a non-negative integer

        Args:
            edit: The pending edit to validate

        Returns:
            The normalized CanonicalRequest

        Raises:
            ValidationFailure: The first rule violated
        """
        self._check_mandatory_fields(edit)
        self._check_gateway_routes(edit)
        self._check_route_format(edit)
        self._check_metric(edit)

        request = normalize(edit)
        logger.debug(f"Validated request for {request.interface}: {request.to_payload()}")
        return request

    def check(self, edit: PendingEdit) -> Optional[ValidationFailure]:
        """Non-raising form of validate(); returns the failure or None"""
        try:
            self.validate(edit)
        except ValidationFailure as e:
            return e
        return None

    def _check_mandatory_fields(self, edit: PendingEdit) -> None:
        if edit.mode is AddressingMode.MANUAL and (not edit.address or not edit.subnet):
            raise MissingMandatoryField()

    def _check_gateway_routes(self, edit: PendingEdit) -> None:
        if bool(edit.gateway) != bool(edit.routes):
            raise GatewayRouteMismatch()

    def _check_route_format(self, edit: PendingEdit) -> None:
        # Empty routes means "no routes" and never reaches the parser
        if edit.routes and not is_valid_route_list(edit.routes):
            raise InvalidRouteFormat()

    def _check_metric(self, edit: PendingEdit) -> None:
        parse_metric(edit.metric)


_default_validator = ConfigValidator()


def validate(edit: PendingEdit) -> CanonicalRequest:
    """Validate with the default validator"""
    return _default_validator.validate(edit)
