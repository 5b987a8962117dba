"""
Catpoint Core Models

Uses Pydantic for validation. A sensor's identity is its name and type;
the activation flag is mutable state and takes no part in equality.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import SensorType


class Sensor(BaseModel):
    """Boolean-state input device (door/window/motion)."""
    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(min_length=1)
    sensor_type: SensorType
    active: bool = False

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Sensor name must not be blank')
        return v

    @property
    def key(self) -> tuple[str, SensorType]:
        return (self.name, self.sensor_type)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sensor):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        state = "active" if self.active else "inactive"
        return f"{self.name} ({self.sensor_type.value}, {state})"
