"""Catpoint Domain Models"""

from .enums import (
    ArmingStatus,
    AlarmStatus,
    SensorType,
)

from .models import Sensor

from .errors import (
    CatpointError,
    InvalidSensorError,
    ImageLoadError,
)

__all__ = [
    # Enums
    'ArmingStatus',
    'AlarmStatus',
    'SensorType',

    # Models
    'Sensor',

    # Errors
    'CatpointError',
    'InvalidSensorError',
    'ImageLoadError',
]
