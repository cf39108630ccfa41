"""
Tests for schema mapping and label refinement
"""

import unittest

from track_analysis.core.schema import (
    TAXONOMY,
    is_taxonomy_label,
    map_coco_to_schema,
    refine_schema_label,
)


class TestSchemaMapping(unittest.TestCase):
    """Test detector label -> taxonomy mapping."""

    def test_people_and_vehicles(self):
        """Test the one-to-one mappings."""
        self.assertEqual(map_coco_to_schema("person"), "Pedestrian")
        self.assertEqual(map_coco_to_schema("bicycle"), "Cyclist")
        self.assertEqual(map_coco_to_schema("motorcycle"), "Motorcycle")
        self.assertEqual(map_coco_to_schema("bus"), "Bus")
        self.assertEqual(map_coco_to_schema("truck"), "Truck")
        self.assertEqual(map_coco_to_schema("car"), "Vehicle")

    def test_animals_collapse(self):
        """Test animal species all map to Animal."""
        for name in ("dog", "cat", "horse", "bird", "giraffe"):
            self.assertEqual(map_coco_to_schema(name), "Animal")

    def test_case_insensitive(self):
        """Test label case does not matter."""
        self.assertEqual(map_coco_to_schema("PERSON"), "Pedestrian")
        self.assertEqual(map_coco_to_schema("Car"), "Vehicle")

    def test_unrecognized_dropped(self):
        """Test unknown labels map to None, never to Unknown."""
        for name in ("potted plant", "traffic light", "stop sign", ""):
            self.assertIsNone(map_coco_to_schema(name))

    def test_outputs_are_in_taxonomy(self):
        """Test every mapped label belongs to the taxonomy."""
        for name in ("person", "bicycle", "car", "bus", "truck", "motorcycle", "cow"):
            self.assertTrue(is_taxonomy_label(map_coco_to_schema(name)))
        self.assertEqual(len(TAXONOMY), 12)


class TestRefinement(unittest.TestCase):
    """Test secondary classifier refinement."""

    def test_no_text_keeps_label(self):
        """Test None text returns the current label."""
        self.assertEqual(refine_schema_label("Vehicle", None), "Vehicle")

    def test_emergency(self):
        """Test emergency keywords."""
        self.assertEqual(refine_schema_label("Vehicle", "ambulance, siren car"), "Emergency-Vehicle")
        self.assertEqual(refine_schema_label("Truck", "Fire Engine"), "Emergency-Vehicle")
        self.assertEqual(refine_schema_label("Vehicle", "police van"), "Emergency-Vehicle")

    def test_van(self):
        """Test van keywords."""
        self.assertEqual(refine_schema_label("Vehicle", "minivan"), "Van")
        self.assertEqual(refine_schema_label("Truck", "moving van"), "Van")

    def test_golf_cart_and_scooter(self):
        """Test golf cart and scooter keywords."""
        self.assertEqual(refine_schema_label("Vehicle", "golfcart"), "Golf-Cart")
        self.assertEqual(refine_schema_label("Motorcycle", "moped"), "Scooter")
        self.assertEqual(refine_schema_label("Motorcycle", "Vespa"), "Scooter")

    def test_no_keyword_keeps_label(self):
        """Test unrelated text returns the current label."""
        self.assertEqual(refine_schema_label("Vehicle", "sports car"), "Vehicle")


if __name__ == "__main__":
    unittest.main()
