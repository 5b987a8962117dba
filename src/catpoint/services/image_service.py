"""
Image Service - cat classifier interface

- ImageService: classifier interface consumed by SecurityService
- FakeImageService: scripted or random answers, for simulation and tests

The YOLO-backed implementation lives in catpoint.hardware.yolo_detector.
"""

import logging
import random
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)


class ImageService(ABC):
    """Judges whether an image contains a cat."""

    @abstractmethod
    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        """
        Args:
            image: Opaque image (a BGR numpy array for the bundled services)
            confidence_threshold: Minimum confidence, as a percentage (0-100)

        Returns:
            True if a cat is present at or above the threshold
        """
        pass


class FakeImageService(ImageService):
    """
    Classifier stand-in

    Returns queued answers first, then falls back to a seeded coin flip.
    """

    def __init__(self, seed: Optional[int] = None, answers: Optional[Iterable[bool]] = None):
        self._random = random.Random(seed)
        self._answers: deque[bool] = deque(answers or ())
        self.call_count = 0
        self.last_threshold: Optional[float] = None

    def queue(self, *answers: bool) -> None:
        self._answers.extend(answers)

    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        self.call_count += 1
        self.last_threshold = confidence_threshold
        if self._answers:
            result = self._answers.popleft()
        else:
            result = self._random.random() < 0.5
        logger.debug("Fake classifier answered %s (threshold %.1f)", result, confidence_threshold)
        return result
