"""
Catpoint Security Service - alarm/arming state machine

Converts external events into a single alarm status:
NO_ALARM → PENDING_ALARM → ALARM

Key rules:
1. Arming into ARMED_HOME while a cat is visible → ALARM
2. Disarming → NO_ALARM
3. Any other arming → every sensor deactivated (no sensor rules run)
4. Sensor activation while armed escalates one level; re-trigger of an
   already active sensor escalates PENDING_ALARM → ALARM
5. PENDING_ALARM with no active sensors falls back to NO_ALARM
6. ALARM is only left through an arming change or the no-cat image rule
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from functools import wraps
from typing import Any, Optional

from ..domain.enums import AlarmStatus, ArmingStatus
from ..domain.errors import InvalidSensorError
from ..domain.models import Sensor
from .image_service import ImageService
from .repository import SecurityRepository
from .status_listeners import StatusListener, StatusListenerRegistry

logger = logging.getLogger(__name__)


class TransitionTrigger(str, Enum):
    """What caused an alarm status write."""
    ARMING_CHANGE = "arming_change"
    CAT_DETECTED = "cat_detected"
    CAT_CLEARED = "cat_cleared"
    SENSOR_ACTIVATED = "sensor_activated"
    SENSOR_RETRIGGERED = "sensor_retriggered"
    SENSORS_CLEARED = "sensors_cleared"
    MANUAL = "manual"


@dataclass
class AlarmTransition:
    """One alarm status write."""
    from_status: AlarmStatus
    to_status: AlarmStatus
    trigger: TransitionTrigger
    reason: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def changed(self) -> bool:
        return self.from_status != self.to_status


@dataclass
class SecurityConfig:
    """Configuration for SecurityService."""
    # Classifier confidence, percent
    cat_confidence_threshold: float = 50.0

    # Transition history size (oldest dropped first)
    history_limit: int = 1000


def _serialized(method):
    """Run the whole operation under the service lock."""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class SecurityService:
    """Security panel state machine.

    Every public operation reads a snapshot, decides, persists and notifies
    before returning. Calls from several threads are serialized.
    """

    def __init__(
        self,
        repository: SecurityRepository,
        image_service: ImageService,
        config: Optional[SecurityConfig] = None,
    ):
        self.config = config or SecurityConfig()
        self._repository = repository
        self._image_service = image_service
        self._listeners = StatusListenerRegistry()
        self._lock = threading.RLock()

        # Not persisted; recomputed on each processed image
        self._cat_detected = False

        self._transitions: list[AlarmTransition] = []

    # =========================================================================
    # State Queries
    # =========================================================================

    @property
    def arming_status(self) -> ArmingStatus:
        return self._repository.get_arming_status()

    @property
    def alarm_status(self) -> AlarmStatus:
        return self._repository.get_alarm_status()

    @property
    def cat_detected(self) -> bool:
        return self._cat_detected

    @property
    def listeners(self) -> StatusListenerRegistry:
        return self._listeners

    def is_armed(self) -> bool:
        return self.arming_status.is_armed

    def get_sensors(self) -> set[Sensor]:
        return self._repository.get_sensors()

    def has_active_sensor(self) -> bool:
        return any(sensor.active for sensor in self._repository.get_sensors())

    def get_transition_history(self) -> list[AlarmTransition]:
        return list(self._transitions)

    # =========================================================================
    # Arming
    # =========================================================================

    @_serialized
    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """Apply an arming request.

        Re-arming into the current mode runs the full rule set again.
        """
        arming_status = ArmingStatus(arming_status)
        logger.info("Arming status requested: %s", arming_status.value)

        if self._cat_detected and arming_status == ArmingStatus.ARMED_HOME:
            self.set_alarm_status(
                AlarmStatus.ALARM,
                TransitionTrigger.ARMING_CHANGE,
                "Armed home while a cat is visible",
            )
        elif arming_status == ArmingStatus.DISARMED:
            self.set_alarm_status(
                AlarmStatus.NO_ALARM,
                TransitionTrigger.ARMING_CHANGE,
                "System disarmed",
            )
        else:
            self._deactivate_all_sensors()

        self._repository.set_arming_status(arming_status)
        self._listeners.sensor_state_refresh()

    def _deactivate_all_sensors(self) -> None:
        """Bulk reset for a fresh arming cycle; sensor rules are not run."""
        for sensor in self._repository.get_sensors():
            if sensor.active:
                sensor.active = False
                self._repository.update_sensor(sensor)
                logger.debug("Sensor reset on arming: %s", sensor.name)

    # =========================================================================
    # Alarm
    # =========================================================================

    @_serialized
    def set_alarm_status(
        self,
        status: AlarmStatus,
        trigger: TransitionTrigger = TransitionTrigger.MANUAL,
        reason: str = "",
    ) -> AlarmTransition:
        """Persist an alarm status and notify listeners.

        The only path through which alarm status changes.
        """
        status = AlarmStatus(status)
        trigger = TransitionTrigger(trigger)
        transition = AlarmTransition(
            from_status=self._repository.get_alarm_status(),
            to_status=status,
            trigger=trigger,
            reason=reason,
        )
        self._repository.set_alarm_status(status)
        self._record_transition(transition)

        if transition.changed:
            logger.info(
                "Alarm status %s -> %s (%s: %s)",
                transition.from_status.value, status.value, trigger.value, reason,
            )
        self._listeners.status_changed(status)
        return transition

    def _record_transition(self, transition: AlarmTransition) -> None:
        self._transitions.append(transition)
        overflow = len(self._transitions) - self.config.history_limit
        if overflow > 0:
            del self._transitions[:overflow]

    # =========================================================================
    # Camera
    # =========================================================================

    @_serialized
    def process_image(self, image: Any) -> bool:
        """Classify a camera image and apply the cat rule.

        Returns:
            The classifier's judgment
        """
        is_cat = bool(self._image_service.image_contains_cat(
            image, self.config.cat_confidence_threshold
        ))
        self._apply_cat_detection(is_cat)
        return is_cat

    def _apply_cat_detection(self, is_cat: bool) -> None:
        self._cat_detected = is_cat

        if is_cat and self.arming_status == ArmingStatus.ARMED_HOME:
            self.set_alarm_status(
                AlarmStatus.ALARM,
                TransitionTrigger.CAT_DETECTED,
                "Cat detected while armed home",
            )
        elif not is_cat and not self.has_active_sensor():
            self.set_alarm_status(
                AlarmStatus.NO_ALARM,
                TransitionTrigger.CAT_CLEARED,
                "No cat and no active sensor",
            )
        else:
            logger.debug("Cat detection %s left alarm status unchanged", is_cat)

        self._listeners.cat_detected(is_cat)

    # =========================================================================
    # Sensors
    # =========================================================================

    @_serialized
    def change_sensor_activation_status(self, sensor: Sensor, active: bool) -> None:
        """Apply a sensor activation change.

        Raises:
            InvalidSensorError: sensor was never added (nothing is mutated)
        """
        stored = self._find_sensor(sensor)
        if stored is None:
            raise InvalidSensorError(sensor)

        # Coerce with the model's own rules so the decision and the stored flag agree
        active = Sensor.model_validate({**stored.model_dump(), "active": active}).active
        was_active = stored.active
        status = self._repository.get_alarm_status()

        if not was_active and active:
            if self.is_armed():
                if status == AlarmStatus.NO_ALARM:
                    self.set_alarm_status(
                        AlarmStatus.PENDING_ALARM,
                        TransitionTrigger.SENSOR_ACTIVATED,
                        f"Sensor activated: {sensor.name}",
                    )
                elif status == AlarmStatus.PENDING_ALARM:
                    self.set_alarm_status(
                        AlarmStatus.ALARM,
                        TransitionTrigger.SENSOR_ACTIVATED,
                        f"Second sensor activation while pending: {sensor.name}",
                    )
        elif was_active and active:
            # Disarm keeps sensors from raising the alarm, re-triggers included
            if status == AlarmStatus.PENDING_ALARM and self.is_armed():
                self.set_alarm_status(
                    AlarmStatus.ALARM,
                    TransitionTrigger.SENSOR_RETRIGGERED,
                    f"Sensor re-triggered while pending: {sensor.name}",
                )

        sensor.active = active
        self._repository.update_sensor(stored.model_copy(update={"active": active}))
        logger.debug("Sensor %s: %s -> %s", sensor.name, was_active, active)

        if not self.has_active_sensor() and self._repository.get_alarm_status() == AlarmStatus.PENDING_ALARM:
            self.set_alarm_status(
                AlarmStatus.NO_ALARM,
                TransitionTrigger.SENSORS_CLEARED,
                "All sensors inactive while pending",
            )

    def _find_sensor(self, sensor: Sensor) -> Optional[Sensor]:
        for known in self._repository.get_sensors():
            if known == sensor:
                return known
        return None

    @_serialized
    def add_sensor(self, sensor: Sensor) -> None:
        self._repository.add_sensor(sensor)

    @_serialized
    def remove_sensor(self, sensor: Sensor) -> None:
        self._repository.remove_sensor(sensor)

    # =========================================================================
    # Listeners
    # =========================================================================

    def add_status_listener(self, listener: StatusListener) -> None:
        self._listeners.register(listener)

    def remove_status_listener(self, listener: StatusListener) -> None:
        self._listeners.unregister(listener)
