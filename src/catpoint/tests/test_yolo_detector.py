"""
Tests for YOLOImageService - cat classifier over a YOLO model
"""

from types import SimpleNamespace

import cv2
import numpy as np
import pytest

from catpoint.domain import AlarmStatus, ArmingStatus, ImageLoadError
from catpoint.hardware import Detection, YOLOImageService, load_image
from catpoint.services import InMemorySecurityRepository, SecurityService


# =============================================================================
# Fake model
# =============================================================================

COCO_NAMES = {0: "person", 2: "car", 15: "cat", 16: "dog"}


class FakeTensor:
    def __init__(self, values):
        self._values = np.asarray(values, dtype=np.float32)

    def cpu(self):
        return self

    def numpy(self):
        return self._values


class FakeBoxes:
    def __init__(self, rows):
        # rows: (class_id, confidence, (x1, y1, x2, y2))
        self.cls = [float(r[0]) for r in rows]
        self.conf = [r[1] for r in rows]
        self.xyxy = [FakeTensor(r[2]) for r in rows]

    def __len__(self):
        return len(self.cls)


class FakeYOLO:
    """Answers with fixed boxes and records the call arguments."""

    def __init__(self, rows=()):
        self.names = COCO_NAMES
        self.rows = list(rows)
        self.calls = []

    def __call__(self, frame, conf, classes, verbose):
        self.calls.append({"conf": conf, "classes": classes, "verbose": verbose})
        return [SimpleNamespace(boxes=FakeBoxes(self.rows))]


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def frame():
    return np.zeros((120, 160, 3), dtype=np.uint8)


def make_service(rows=()):
    model = FakeYOLO(rows)
    return YOLOImageService(model=model), model


# =============================================================================
# Detection
# =============================================================================

class TestYOLOImageService:

    def test_targets_cat_class(self):
        service, _ = make_service()

        assert service.target_class_ids == [15]
        assert service.target_classes == ["cat"]

    def test_unknown_target_class_rejected(self):
        with pytest.raises(ValueError):
            YOLOImageService(model=FakeYOLO(), target_classes=("unicorn",))

    def test_threshold_converted_to_fraction(self, frame):
        service, model = make_service()

        service.image_contains_cat(frame, 50.0)

        assert model.calls == [{"conf": 0.5, "classes": [15], "verbose": False}]

    def test_cat_detected(self, frame):
        service, _ = make_service([(15, 0.82, (10, 20, 60, 90))])

        assert service.image_contains_cat(frame, 50.0) is True

    def test_no_boxes_means_no_cat(self, frame):
        service, _ = make_service()

        assert service.image_contains_cat(frame, 50.0) is False

    def test_low_confidence_ignored(self, frame):
        service, _ = make_service([(15, 0.30, (0, 0, 10, 10))])

        assert service.image_contains_cat(frame, 50.0) is False

    def test_other_classes_ignored(self, frame):
        service, _ = make_service([(16, 0.95, (0, 0, 10, 10))])

        assert service.image_contains_cat(frame, 50.0) is False

    def test_detect_returns_xywh(self, frame):
        service, _ = make_service([(15, 0.9, (10, 20, 60, 90))])

        detections = service.detect(frame, 50.0)

        assert detections == [Detection(class_id=15, class_name="cat", confidence=0.9, bbox=(10, 20, 50, 70))]

    def test_stats(self, frame):
        service, _ = make_service([(15, 0.9, (0, 0, 5, 5))])
        service.detect(frame)
        service.detect(frame)

        stats = service.get_stats()

        assert stats["frame_count"] == 2
        assert stats["detection_count"] == 2

    def test_annotate_draws_on_copy(self, frame):
        detections = [Detection(class_id=15, class_name="cat", confidence=0.9, bbox=(10, 20, 50, 70))]

        vis = YOLOImageService.annotate(frame, detections)

        assert vis.any()
        assert not frame.any()

    def test_drives_security_service(self, frame):
        """Armed home + YOLO cat → ALARM"""
        classifier, _ = make_service([(15, 0.77, (5, 5, 40, 40))])
        service = SecurityService(InMemorySecurityRepository(), classifier)
        service.set_arming_status(ArmingStatus.ARMED_HOME)

        service.process_image(frame)

        assert service.alarm_status == AlarmStatus.ALARM


# =============================================================================
# Image loading
# =============================================================================

class TestLoadImage:

    def test_load_image(self, tmp_path, frame):
        path = tmp_path / "snapshot.png"
        cv2.imwrite(str(path), frame)

        image = load_image(path)

        assert image.shape == frame.shape

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImageLoadError):
            load_image(tmp_path / "missing.jpg")

    def test_classifier_accepts_path(self, tmp_path, frame):
        path = tmp_path / "snapshot.png"
        cv2.imwrite(str(path), frame)
        service, model = make_service([(15, 0.9, (0, 0, 5, 5))])

        assert service.image_contains_cat(path, 50.0) is True
        assert len(model.calls) == 1
