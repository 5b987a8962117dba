"""
Catpoint Core Enums

Bare status values shared by the state machine, the repository and listeners.
Labels and colors for display belong to the presentation layer.
"""

from enum import Enum


# =============================================================================
# Arming
# =============================================================================

class ArmingStatus(str, Enum):
    """Panel arming mode, set only by an explicit arming request."""
    DISARMED = "disarmed"
    ARMED_HOME = "armed_home"
    ARMED_AWAY = "armed_away"

    @property
    def is_armed(self) -> bool:
        return self in (ArmingStatus.ARMED_HOME, ArmingStatus.ARMED_AWAY)


# =============================================================================
# Alarm
# =============================================================================

class AlarmStatus(str, Enum):
    """Derived threat level.

    Written only through SecurityService.set_alarm_status.
    """
    NO_ALARM = "no_alarm"             # Quiescent
    PENDING_ALARM = "pending_alarm"   # One trigger seen, awaiting confirmation
    ALARM = "alarm"                   # Actively alarming


# =============================================================================
# Sensors
# =============================================================================

class SensorType(str, Enum):
    """Sensor category."""
    DOOR = "door"
    WINDOW = "window"
    MOTION = "motion"
