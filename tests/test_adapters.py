"""
Tests for detector, classifier and crop adapters (models and HTTP mocked)
"""

import unittest
from unittest import mock

import numpy as np
import requests

from track_analysis.adapters import HttpClassifier, YoloClassifier, YoloDetector
from track_analysis.adapters.crops import clean_class_name, crop_for_classification
from track_analysis.exceptions import AdapterError


class FakeTensor:
    """Just enough of a torch tensor for result parsing."""

    def __init__(self, values):
        self.values = np.array(values)

    def cpu(self):
        return self

    def numpy(self):
        return self.values

    def int(self):
        return FakeTensor(self.values.astype(int))

    def tolist(self):
        return self.values.tolist()


class FakeBoxes:
    def __init__(self, xyxy, conf, cls):
        self.xyxy = FakeTensor(xyxy)
        self.conf = FakeTensor(conf)
        self.cls = FakeTensor(cls)

    def __len__(self):
        return len(self.conf.values)


class FakeProbs:
    def __init__(self, top1, top1conf=0.9):
        self.top1 = top1
        self.top1conf = top1conf


class FakeResult:
    def __init__(self, names, boxes=None, probs=None):
        self.names = names
        self.boxes = boxes
        self.probs = probs


class FakeModel:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def predict(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return [self.result]


def blank_frame():
    return np.zeros((100, 200, 3), dtype=np.uint8)


class TestYoloDetector(unittest.TestCase):
    """Test YOLO output conversion."""

    def test_boxes_converted_to_xywh(self):
        boxes = FakeBoxes([[10, 20, 50, 80], [0, 0, 5, 5]], [0.9, 0.4], [2, 0])
        model = FakeModel(FakeResult({0: "person", 2: "car"}, boxes=boxes))

        detections = YoloDetector(model, device="cpu").detect(blank_frame())

        self.assertEqual(len(detections), 2)
        self.assertEqual(detections[0].bbox, (10.0, 20.0, 40.0, 60.0))
        self.assertEqual(detections[0].label, "car")
        self.assertAlmostEqual(detections[0].score, 0.9)
        self.assertEqual(detections[1].label, "person")
        self.assertEqual(model.calls[0]["device"], "cpu")

    def test_no_boxes(self):
        model = FakeModel(FakeResult({}, boxes=None))

        self.assertEqual(YoloDetector(model, device="cpu").detect(blank_frame()), [])

    def test_inference_error_wrapped(self):
        model = FakeModel(error=RuntimeError("CUDA out of memory"))

        with self.assertRaises(AdapterError):
            YoloDetector(model, device="cpu").detect(blank_frame())


class TestYoloClassifier(unittest.TestCase):
    """Test crop classification with a YOLO classification model."""

    def test_top1_name_cleaned(self):
        result = FakeResult({0: "sports_car", 1: "police_van, police wagon"}, probs=FakeProbs(1))
        model = FakeModel(result)

        label = YoloClassifier(model, device="cpu").classify(blank_frame(), (10, 10, 40, 40))

        self.assertEqual(label, "police van")
        self.assertEqual(model.calls[0]["source"].shape, (40, 40, 3))

    def test_small_crop_skipped(self):
        model = FakeModel(FakeResult({0: "car"}, probs=FakeProbs(0)))

        label = YoloClassifier(model, device="cpu").classify(blank_frame(), (0, 0, 19, 40))

        self.assertIsNone(label)
        self.assertEqual(model.calls, [])

    def test_inference_error_wrapped(self):
        model = FakeModel(error=ValueError("bad input"))

        with self.assertRaises(AdapterError):
            YoloClassifier(model, device="cpu").classify(blank_frame(), (0, 0, 40, 40))


class TestHttpClassifier(unittest.TestCase):
    """Test the remote classifier with requests mocked."""

    def setUp(self):
        self.classifier = HttpClassifier("http://analyzer/classify", timeout=5)
        patcher = mock.patch("track_analysis.adapters.http_classifier.requests.post")
        self.post = patcher.start()
        self.addCleanup(patcher.stop)

    def respond(self, status=200, payload=None):
        response = mock.Mock()
        response.ok = status < 400
        response.status_code = status
        response.text = "error body"
        response.json.return_value = payload if payload is not None else {}
        self.post.return_value = response

    def test_label_returned(self):
        self.respond(payload={"label": "Ambulance, emergency vehicle"})

        label = self.classifier.classify(blank_frame(), (10, 10, 50, 50))

        self.assertEqual(label, "Ambulance")
        _, kwargs = self.post.call_args
        self.assertEqual(kwargs["timeout"], 5)
        self.assertEqual(kwargs["json"]["bbox"], [10.0, 10.0, 50.0, 50.0])
        self.assertTrue(kwargs["json"]["image"])

    def test_empty_label_is_none(self):
        self.respond(payload={"label": ""})

        self.assertIsNone(self.classifier.classify(blank_frame(), (10, 10, 50, 50)))

    def test_small_crop_not_sent(self):
        self.assertIsNone(self.classifier.classify(blank_frame(), (10, 10, 5, 50)))
        self.post.assert_not_called()

    def test_http_error_status(self):
        self.respond(status=503)

        with self.assertRaises(AdapterError):
            self.classifier.classify(blank_frame(), (10, 10, 50, 50))

    def test_timeout(self):
        self.post.side_effect = requests.Timeout()

        with self.assertRaises(AdapterError):
            self.classifier.classify(blank_frame(), (10, 10, 50, 50))

    def test_connection_error(self):
        self.post.side_effect = requests.ConnectionError("refused")

        with self.assertRaises(AdapterError):
            self.classifier.classify(blank_frame(), (10, 10, 50, 50))

    def test_invalid_json(self):
        self.respond()
        self.post.return_value.json.side_effect = ValueError("not json")

        with self.assertRaises(AdapterError):
            self.classifier.classify(blank_frame(), (10, 10, 50, 50))


class TestCrops(unittest.TestCase):
    """Test crop helpers."""

    def test_crop_clipped_to_frame(self):
        crop = crop_for_classification(blank_frame(), (180, 90, 40, 40))

        self.assertEqual(crop.shape, (10, 20, 3))

    def test_crop_outside_frame(self):
        self.assertIsNone(crop_for_classification(blank_frame(), (500, 500, 40, 40)))

    def test_clean_class_name(self):
        self.assertEqual(clean_class_name("golf_cart"), "golf cart")
        self.assertEqual(clean_class_name("minivan"), "minivan")
        self.assertEqual(clean_class_name(" moped, motor scooter"), "moped")


if __name__ == "__main__":
    unittest.main()
