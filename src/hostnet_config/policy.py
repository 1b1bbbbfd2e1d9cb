"""
Interface editability policy

Decides, from the interface name alone, whether an interface may be
reconfigured at all.
"""

import re
from collections.abc import Iterable

from .config import InterfaceName
from .errors import InterfaceNotEditable

# Physical uplink NICs that must NEVER be modified
# Reconfiguring these can cut the operator off from the host
DEFAULT_RESERVED_PATTERNS: tuple[str, ...] = (
    r"^enp6s0f\d+$",
)


class EditabilityPolicy:
    """
    Static name-based editability predicate.

    Attributes:
        reserved_patterns: Compiled regexes; a matching name is not editable
    """

    def __init__(self, reserved_patterns: Iterable[str] = DEFAULT_RESERVED_PATTERNS):
        self.reserved_patterns: tuple[re.Pattern[str], ...] = tuple(
            re.compile(pattern) for pattern in reserved_patterns
        )

    def is_editable(self, name: InterfaceName) -> bool:
        """
        Check if interface may be reconfigured.

        Args:
            name: Interface name to check

        Returns:
            False if name matches a reserved pattern, True otherwise
        """
        return not any(pattern.match(name) for pattern in self.reserved_patterns)

    def ensure_editable(self, name: InterfaceName) -> None:
        """
        Validate that interface can be safely reconfigured.

        Raises:
            InterfaceNotEditable: If interface is reserved
        """
        if not self.is_editable(name):
            raise InterfaceNotEditable("This interface cannot be edited.")


_default_policy = EditabilityPolicy()


def is_editable(name: InterfaceName) -> bool:
    """Check editability against the built-in reserved patterns"""
    return _default_policy.is_editable(name)
