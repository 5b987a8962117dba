"""Catpoint camera adapters"""

from .yolo_detector import (
    Detection,
    YOLOImageService,
    load_image,
)

__all__ = [
    'Detection',
    'YOLOImageService',
    'load_image',
]
