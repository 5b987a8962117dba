"""Catpoint error types."""


class CatpointError(Exception):
    """Base class for errors raised by the catpoint core."""


class InvalidSensorError(CatpointError, ValueError):
    """Raised when an operation names a sensor the repository does not know."""

    def __init__(self, sensor: object):
        self.sensor = sensor
        super().__init__(f"Unknown sensor: {sensor}")


class ImageLoadError(CatpointError, OSError):
    """Raised when an image file cannot be read or decoded."""
