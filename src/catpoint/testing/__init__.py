"""Catpoint test helpers"""

from .standard_config import (
    RecordingStatusListener,
    create_standard_sensors,
    create_standard_system,
)

__all__ = [
    'RecordingStatusListener',
    'create_standard_sensors',
    'create_standard_system',
]
