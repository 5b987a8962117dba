"""
Security Repository - status store

Holds the current arming status, alarm status and the set of known sensors.
- SecurityRepository: store interface consumed by SecurityService
- InMemorySecurityRepository: process-local implementation
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..domain.enums import AlarmStatus, ArmingStatus
from ..domain.errors import InvalidSensorError
from ..domain.models import Sensor

logger = logging.getLogger(__name__)


# =============================================================================
# Store interface
# =============================================================================

class SecurityRepository(ABC):
    """Store interface.

    Operations are synchronous and strongly consistent: a write is visible
    to the next read.
    """

    @abstractmethod
    def add_sensor(self, sensor: Sensor) -> None:
        pass

    @abstractmethod
    def remove_sensor(self, sensor: Sensor) -> None:
        pass

    @abstractmethod
    def update_sensor(self, sensor: Sensor) -> None:
        """Persist the sensor's current activation flag."""
        pass

    @abstractmethod
    def get_sensors(self) -> set[Sensor]:
        pass

    @abstractmethod
    def get_alarm_status(self) -> AlarmStatus:
        pass

    @abstractmethod
    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        pass

    @abstractmethod
    def get_arming_status(self) -> ArmingStatus:
        pass

    @abstractmethod
    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        pass


# =============================================================================
# In-memory store
# =============================================================================

class InMemorySecurityRepository(SecurityRepository):
    """Store kept in process memory.

    Sensors are keyed by (name, type) and held as private copies: reads and
    writes both copy, so flags only change through update_sensor.
    """

    def __init__(
        self,
        arming_status: ArmingStatus = ArmingStatus.DISARMED,
        alarm_status: AlarmStatus = AlarmStatus.NO_ALARM,
        sensors: Optional[set[Sensor]] = None,
    ):
        self._arming_status = arming_status
        self._alarm_status = alarm_status
        self._sensors: dict[tuple, Sensor] = {}
        for sensor in sensors or ():
            self._sensors[sensor.key] = sensor.model_copy()

    def add_sensor(self, sensor: Sensor) -> None:
        self._sensors[sensor.key] = sensor.model_copy()
        logger.debug("Sensor added: %s", sensor)

    def remove_sensor(self, sensor: Sensor) -> None:
        if self._sensors.pop(sensor.key, None) is not None:
            logger.debug("Sensor removed: %s", sensor)

    def update_sensor(self, sensor: Sensor) -> None:
        if sensor.key not in self._sensors:
            raise InvalidSensorError(sensor)
        self._sensors[sensor.key] = sensor.model_copy()

    def get_sensors(self) -> set[Sensor]:
        return {sensor.model_copy() for sensor in self._sensors.values()}

    def get_alarm_status(self) -> AlarmStatus:
        return self._alarm_status

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        self._alarm_status = alarm_status

    def get_arming_status(self) -> ArmingStatus:
        return self._arming_status

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        self._arming_status = arming_status
