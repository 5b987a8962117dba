"""
YOLO cat classifier

Implements ImageService with a pretrained COCO model:
1. Restrict inference to the target classes (cat by default)
2. Confidence threshold given in percent, converted to YOLO's 0-1 scale
3. YOLOv11n by default (fastest, CPU friendly)
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence, Union

import cv2
import numpy as np

from ..domain.errors import ImageLoadError
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)


@dataclass
class Detection:
    """Single detection result."""
    class_id: int
    class_name: str
    confidence: float
    bbox: tuple[int, int, int, int]  # (x, y, w, h)


def load_image(path: Union[str, Path]) -> np.ndarray:
    """Read an image file as a BGR array.

    Raises:
        ImageLoadError: file missing or not decodable
    """
    image = cv2.imread(str(path))
    if image is None:
        raise ImageLoadError(f"Cannot read image: {path}")
    return image


class YOLOImageService(ImageService):
    """
    YOLO-backed cat classifier

    - Class filtering (only "cat" unless told otherwise)
    - Per-call confidence threshold
    - A preloaded model may be injected; otherwise ultralytics loads model_name
    """

    def __init__(
        self,
        model_name: str = "yolo11n.pt",
        target_classes: Sequence[str] = ("cat",),
        device: str = "cpu",
        model: Optional[Any] = None,
    ):
        self.model_name = model_name
        self.target_classes = list(target_classes)
        self.device = device

        if model is None:
            from ultralytics import YOLO

            logger.info("Loading YOLO model: %s", model_name)
            model = YOLO(model_name)
            if device == "cuda":
                model.to("cuda")
        self.model = model

        # COCO class names, e.g. {0: 'person', 15: 'cat', ...}
        self.class_names: dict[int, str] = dict(self.model.names)
        self.target_class_ids = [
            class_id for class_id, class_name in self.class_names.items()
            if class_name in self.target_classes
        ]
        if not self.target_class_ids:
            raise ValueError(f"Model has no classes named {self.target_classes}")

        logger.info(
            "YOLO classifier ready: classes=%s ids=%s device=%s",
            self.target_classes, self.target_class_ids, device,
        )

        # Stats
        self.frame_count = 0
        self.detection_count = 0
        self.total_inference_time = 0.0

    def detect(self, frame: np.ndarray, confidence_threshold: float = 50.0) -> list[Detection]:
        """
        Single-frame detection

        Args:
            frame: BGR image
            confidence_threshold: Minimum confidence, percent

        Returns:
            Detections of the target classes at or above the threshold
        """
        conf = confidence_threshold / 100.0
        start_time = time.time()

        results = self.model(
            frame,
            conf=conf,
            classes=self.target_class_ids,
            verbose=False,
        )

        self.total_inference_time += time.time() - start_time
        self.frame_count += 1

        detections = []
        for result in results:
            boxes = result.boxes
            for i in range(len(boxes)):
                class_id = int(boxes.cls[i])
                confidence = float(boxes.conf[i])
                if class_id not in self.target_class_ids or confidence < conf:
                    continue

                x1, y1, x2, y2 = boxes.xyxy[i].cpu().numpy()
                detections.append(Detection(
                    class_id=class_id,
                    class_name=self.class_names[class_id],
                    confidence=confidence,
                    bbox=(int(x1), int(y1), int(x2 - x1), int(y2 - y1)),
                ))

        self.detection_count += len(detections)
        return detections

    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        if isinstance(image, (str, Path)):
            image = load_image(image)
        detections = self.detect(image, confidence_threshold)
        if detections:
            best = max(detections, key=lambda d: d.confidence)
            logger.debug("Cat detected: %s %.2f @ %s", best.class_name, best.confidence, best.bbox)
        return bool(detections)

    @staticmethod
    def annotate(frame: np.ndarray, detections: list[Detection]) -> np.ndarray:
        """Draw detections on a copy of the frame."""
        vis_frame = frame.copy()
        for det in detections:
            x, y, w, h = det.bbox
            color = (0, 0, 255)
            cv2.rectangle(vis_frame, (x, y), (x + w, y + h), color, 2)
            cv2.putText(
                vis_frame,
                f"{det.class_name} {det.confidence:.2f}",
                (x, max(y - 10, 0)),
                cv2.FONT_HERSHEY_SIMPLEX,
                0.5,
                color,
                2,
            )
        return vis_frame

    def get_stats(self) -> dict[str, float]:
        avg_fps = 0.0
        if self.total_inference_time > 0:
            avg_fps = self.frame_count / self.total_inference_time

        return {
            "frame_count": self.frame_count,
            "detection_count": self.detection_count,
            "total_inference_time": self.total_inference_time,
            "avg_inference_time": self.total_inference_time / self.frame_count if self.frame_count > 0 else 0,
            "avg_fps": avg_fps,
        }
