"""Catpoint Services"""

from .security_service import (
    SecurityService,
    SecurityConfig,
    AlarmTransition,
    TransitionTrigger,
)
from .status_listeners import (
    StatusListener,
    StatusListenerRegistry,
)
from .repository import (
    SecurityRepository,
    InMemorySecurityRepository,
)
from .image_service import (
    ImageService,
    FakeImageService,
)

__all__ = [
    # State machine
    'SecurityService',
    'SecurityConfig',
    'AlarmTransition',
    'TransitionTrigger',
    # Listeners
    'StatusListener',
    'StatusListenerRegistry',
    # Store
    'SecurityRepository',
    'InMemorySecurityRepository',
    # Classifier
    'ImageService',
    'FakeImageService',
]
