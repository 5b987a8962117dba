"""
Status Listeners - observer fan-out

- StatusListener: capability interface for anything that renders status
- StatusListenerRegistry: registration and failure-isolated broadcast
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from ..domain.enums import AlarmStatus

logger = logging.getLogger(__name__)


# =============================================================================
# Listener interface
# =============================================================================

class StatusListener(ABC):
    """Receives status updates from SecurityService."""

    @abstractmethod
    def notify_status_changed(self, status: AlarmStatus) -> None:
        """Alarm status was written."""
        pass

    @abstractmethod
    def notify_sensor_state_refresh(self) -> None:
        """Arming or sensor state changed; re-read whatever is displayed."""
        pass

    @abstractmethod
    def notify_cat_detected(self, is_cat: bool) -> None:
        """An image was classified."""
        pass


# =============================================================================
# Registry
# =============================================================================

class StatusListenerRegistry:
    """
    Listener registry

    - Registration keeps insertion order and ignores duplicates
    - Broadcast iterates a snapshot, so listeners may (un)register mid-broadcast
    - A raising listener is logged and skipped; the rest still receive the call
    """

    def __init__(self):
        self._listeners: list[StatusListener] = []
        self.total_deliveries = 0
        self.total_failures = 0
        self.last_failure_time: Optional[datetime] = None
        self.last_error: Optional[str] = None

    def __len__(self) -> int:
        return len(self._listeners)

    def __contains__(self, listener: object) -> bool:
        return listener in self._listeners

    def register(self, listener: StatusListener) -> None:
        if listener in self._listeners:
            return
        self._listeners.append(listener)
        logger.info("Registered status listener: %r", listener)

    def unregister(self, listener: StatusListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)
            logger.info("Unregistered status listener: %r", listener)

    def status_changed(self, status: AlarmStatus) -> int:
        return self._broadcast(lambda listener: listener.notify_status_changed(status))

    def sensor_state_refresh(self) -> int:
        return self._broadcast(lambda listener: listener.notify_sensor_state_refresh())

    def cat_detected(self, is_cat: bool) -> int:
        return self._broadcast(lambda listener: listener.notify_cat_detected(is_cat))

    def _broadcast(self, deliver: Callable[[StatusListener], None]) -> int:
        """Deliver to every registered listener.

        Returns:
            Number of listeners that received the call without raising
        """
        delivered = 0
        for listener in tuple(self._listeners):
            try:
                deliver(listener)
            except Exception as e:
                self.total_failures += 1
                self.last_failure_time = datetime.now(timezone.utc)
                self.last_error = f"{type(e).__name__}: {e}"
                logger.exception("Status listener %r failed", listener)
                continue
            delivered += 1
            self.total_deliveries += 1
        return delivered

    def get_status(self) -> dict[str, Any]:
        return {
            "listener_count": len(self._listeners),
            "total_deliveries": self.total_deliveries,
            "total_failures": self.total_failures,
            "last_failure_time": self.last_failure_time.isoformat() if self.last_failure_time else None,
            "last_error": self.last_error,
        }
