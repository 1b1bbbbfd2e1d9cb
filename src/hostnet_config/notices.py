"""
Operator notice channel backed by a Rich console
"""

import logging
from typing import Optional

from rich.console import Console

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """Print operator notices; fire-and-forget."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    def __call__(self, message: str) -> None:
        logger.debug(f"Notice: {message}")
        self.console.print(f"[yellow][!][/yellow] {message}", highlight=False)
