"""
Edit-session state machine and periodic interface observation

The synchronizer owns two independent pieces of state:

* the last observed interface snapshot, replaced on every poll
* the single PendingEdit of the operator's edit session

A poll never touches the PendingEdit. A PendingEdit is seeded from the
snapshot at selection time only.

Session states:

    IDLE --select(editable)--> EDITING --submit(valid)--> APPLYING
    EDITING --cancel--> IDLE
    EDITING --submit(invalid)--> EDITING
    APPLYING --apply ok--> IDLE (re-observe)
    APPLYING --apply failed--> EDITING
"""

import dataclasses
import logging
import threading
import time
from enum import Enum
from typing import Any, Optional

from .config import CanonicalRequest, Interface, InterfaceName, PendingEdit
from .errors import (
    ApplyFailed,
    InterfaceNotEditable,
    ObservationFailed,
    SessionStateError,
    ValidationFailure,
)
from .policy import EditabilityPolicy
from .sources import Applier, Notifier, ObservationSource, Snapshot
from .validator import ConfigValidator

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0


class SessionState(Enum):
    """Edit session states"""
    IDLE = "idle"
    EDITING = "editing"
    APPLYING = "applying"


class StateSynchronizer:
    """
    Reconciles observed interface state with the operator's in-progress edit.

    Attributes:
        source: Observation source polled for interface state
        applier: Collaborator that applies canonical requests
        policy: Interface editability policy
        validator: Pending edit validator
        poll_interval: Seconds between observations
        last_error: Last message surfaced to the operator, if any
        last_refresh: time.monotonic() of the last successful observation
    """

    def __init__(
        self,
        source: ObservationSource,
        applier: Applier,
        policy: Optional[EditabilityPolicy] = None,
        validator: Optional[ConfigValidator] = None,
        notifier: Optional[Notifier] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL
    ):
        if not poll_interval > 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")

        self.source = source
        self.applier = applier
        self.policy = policy or EditabilityPolicy()
        self.validator = validator or ConfigValidator()
        self.notifier = notifier
        self.poll_interval = poll_interval

        self.last_error: Optional[str] = None
        self.last_refresh: Optional[float] = None

        self._lock = threading.Lock()
        self._interfaces: Snapshot = {}
        self._state = SessionState.IDLE
        self._pending: Optional[PendingEdit] = None

        self._stop_event = threading.Event()
        self._poll_thread: Optional[threading.Thread] = None

    # -- observation -------------------------------------------------------

    @property
    def interfaces(self) -> dict[InterfaceName, Interface]:
        """Copy of the last observed snapshot"""
        with self._lock:
            return dict(self._interfaces)

    @property
    def is_polling(self) -> bool:
        return self._poll_thread is not None and self._poll_thread.is_alive()

    def refresh(self) -> bool:
        """
        Observe interfaces once and replace the snapshot.

        Returns:
            True if observation succeeded; on failure the previous
            snapshot is kept and the next poll retries
        """
        try:
            snapshot = self.source.observe()
        except ObservationFailed as e:
            logger.warning(f"[!] Observation failed: {e}")
            return False

        with self._lock:
            self._interfaces = dict(snapshot)
            self.last_refresh = time.monotonic()

        logger.debug(f"Snapshot refreshed: {', '.join(sorted(snapshot)) or '(none)'}")
        return True

    def start(self) -> None:
        """Observe once, then keep polling in a background thread"""
        if self.is_polling:
            return

        self.refresh()
        self._stop_event.clear()
        self._poll_thread = threading.Thread(
            target=self._poll_loop,
            name="hostnet-poll",
            daemon=True
        )
        self._poll_thread.start()
        logger.info(f"Polling interfaces every {self.poll_interval:g}s")

    def stop(self) -> None:
        """Stop polling and wait for the poll thread to exit"""
        self._stop_event.set()
        if self._poll_thread:
            self._poll_thread.join(timeout=self.poll_interval + 5)
            self._poll_thread = None

    def _poll_loop(self) -> None:
        """Background polling loop"""
        while not self._stop_event.wait(self.poll_interval):
            try:
                self.refresh()
            except Exception as e:
                logger.error(f"Polling loop error: {e}", exc_info=True)

    def __enter__(self) -> "StateSynchronizer":
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()

    # -- edit session ------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def pending(self) -> Optional[PendingEdit]:
        return self._pending

    def select(self, name: InterfaceName) -> Optional[PendingEdit]:
        """
        Start editing an interface.

        Seeds a PendingEdit from the last observed record. Re-selecting
        while editing discards the previous working copy.

        Args:
            name: Interface to edit

        Returns:
            The new PendingEdit, or None if the interface was rejected

        Raises:
            SessionStateError: If an update is being applied
        """
        with self._lock:
            if self._state is SessionState.APPLYING:
                raise SessionStateError("Cannot select an interface while an update is in progress")

            try:
                self.policy.ensure_editable(name)
            except InterfaceNotEditable as e:
                logger.info(f"[!] Refusing to edit reserved interface {name}")
                message = str(e)
            else:
                if name in self._interfaces:
                    self._pending = PendingEdit.from_interface(self._interfaces[name])
                    self._state = SessionState.EDITING
                    logger.info(f"Editing {name}")
                    return self._pending
                message = f"Interface {name} was not found."

        self._notify(message)
        return None

    def edit(self, **changes: Any) -> PendingEdit:
        """
        Update fields of the working copy.

        Args:
            **changes: PendingEdit fields to replace (e.g., address="10.0.0.5")

        Returns:
            The updated PendingEdit

        Raises:
            SessionStateError: If no edit session is open
            TypeError: If a field name is unknown
            ValueError: If the selected interface itself is changed
        """
        if "interface" in changes:
            raise ValueError("The selected interface cannot be changed; set new_name to rename it")

        with self._lock:
            if self._state is not SessionState.EDITING or self._pending is None:
                raise SessionStateError(f"Cannot edit while {self._state.value}")
            self._pending = dataclasses.replace(self._pending, **changes)
            return self._pending

    def cancel(self) -> None:
        """Discard the working copy and return to idle"""
        with self._lock:
            if self._state is SessionState.APPLYING:
                raise SessionStateError("Cannot cancel while an update is in progress")
            self._pending = None
            self._state = SessionState.IDLE

    def submit(self) -> bool:
        """
        Validate the working copy and hand it to the applier.

        Only accepted while editing, so a second submission cannot start
        while one is being applied.

        Returns:
            True if the request was applied, False if validation or the
            applier failed (message surfaced through the notifier)

        Raises:
            SessionStateError: If not currently editing
        """
        with self._lock:
            if self._state is not SessionState.EDITING or self._pending is None:
                raise SessionStateError(f"Cannot submit while {self._state.value}")

            try:
                request = self.validator.validate(self._pending)
            except ValidationFailure as e:
                failure: Optional[ValidationFailure] = e
            else:
                failure = None
                self._state = SessionState.APPLYING
                observed = self._interfaces.get(request.interface)

        if failure is not None:
            logger.info(f"[FAIL] Validation failed for {self._pending.interface}: {failure}")
            self._notify(str(failure))
            return False

        self._log_request(request, observed)

        applied = False
        reason: Optional[str] = None
        try:
            self.applier.apply(request)
            applied = True
        except ApplyFailed as e:
            reason = e.reason
        finally:
            with self._lock:
                if applied:
                    self._pending = None
                    self._state = SessionState.IDLE
                else:
                    self._state = SessionState.EDITING

        if not applied:
            logger.error(f"[FAIL] Update of {request.interface} rejected: {reason}")
            self._notify(f"Error updating network: {reason}")
            return False

        logger.info(f"[OK] Network updated for {request.new_interface_name}")
        self._notify("Network updated successfully!", error=False)
        self.refresh()
        return True

    def _log_request(self, request: CanonicalRequest, observed: Optional[Interface]) -> None:
        if request.renames_interface:
            logger.info(f"Request renames {request.interface} -> {request.new_interface_name}")
        if observed and observed.gateway and request.gateway is None:
            logger.info(f"Request removes gateway {observed.gateway} from {request.interface}")

    def _notify(self, message: str, error: bool = True) -> None:
        self.last_error = message if error else None
        if self.notifier:
            self.notifier(message)
