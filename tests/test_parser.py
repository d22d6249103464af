# tests/test_parser.py
import unittest
import json
import os
import tempfile
from circuitsteps.parser import container_from_dict, load_container_from_json
from circuitsteps.container import Container
from circuitsteps.elements import ElementClass
from circuitsteps.interfaces import get_tools

MNA_CIRCUIT = {
    "elements": [
        {"id": 0, "type": "ground", "positive": [1, 3, 5]},
        {"id": 1, "type": "resistor", "value": 2, "positive": [4], "negative": [0, 3, 5]},
        {"id": 2, "type": "resistor", "value": 4, "positive": [3, 4], "negative": [5]},
        {"id": 3, "type": "resistor", "value": 8, "positive": [2, 4], "negative": [0, 1, 5]},
        {"id": 4, "type": "voltagesrc", "value": 32, "positive": [1], "negative": [2, 3]},
        {"id": 5, "type": "VoltageSrc", "value": 20, "positive": [0, 1, 3], "negative": [2]},
    ]
}


class TestJSONParser(unittest.TestCase):

    def create_temp_json_file(self, data):
        """Helper to create a temporary JSON file with given data."""
        temp_file = tempfile.NamedTemporaryFile(mode='w+', delete=False, suffix='.json')
        json.dump(data, temp_file)
        temp_file.close()
        return temp_file.name

    def setUp(self):
        self.temp_file_path = None

    def tearDown(self):
        if self.temp_file_path and os.path.exists(self.temp_file_path):
            os.unlink(self.temp_file_path)

    def test_load_valid_mna_circuit(self):
        """Loads the three node MNA circuit and checks its elements and nodes."""
        self.temp_file_path = self.create_temp_json_file(MNA_CIRCUIT)

        container = load_container_from_json(self.temp_file_path)

        self.assertIsInstance(container, Container)
        self.assertEqual(len(container.get_elements()), 6)
        self.assertEqual([e.id for e in container.get_voltage_sources()], [4, 5])

        r1 = container.get_element(1)
        self.assertEqual(r1.kind, ElementClass.RESISTOR)
        self.assertEqual(r1.value, 2.0)
        self.assertEqual(r1.positive, frozenset({4}))
        self.assertEqual(r1.negative, frozenset({0, 3, 5}))

        ground = container.get_element(0)
        self.assertEqual(ground.kind, ElementClass.GROUND)
        self.assertEqual(ground.value, 0.0)

        self.assertEqual(get_tools(container), [[2, 5], [2, 3, 4], [1, 4]])

    def test_unknown_element_loads(self):
        data = {
            "elements": [
                {"id": 0, "type": "ground", "positive": [1]},
                {"id": 1, "type": "unknown", "positive": [0], "negative": [0]},
            ]
        }
        container = container_from_dict(data)
        self.assertEqual(container.get_element(1).kind, ElementClass.UNKNOWN)

    def test_missing_file(self):
        with self.assertRaisesRegex(FileNotFoundError, "not found"):
            load_container_from_json("/nonexistent/circuit.json")

    def test_invalid_json(self):
        temp_file = tempfile.NamedTemporaryFile(mode='w+', delete=False, suffix='.json')
        temp_file.write("{not json")
        temp_file.close()
        self.temp_file_path = temp_file.name
        with self.assertRaisesRegex(ValueError, "Invalid JSON format"):
            load_container_from_json(self.temp_file_path)

    def test_missing_elements_key(self):
        with self.assertRaisesRegex(ValueError, "must contain an 'elements' list"):
            container_from_dict({"components": []})

    def test_element_missing_type(self):
        with self.assertRaisesRegex(ValueError, "missing required keys"):
            container_from_dict({"elements": [{"id": 1, "value": 100}]})

    def test_unknown_element_type(self):
        with self.assertRaisesRegex(ValueError, "Unknown element type 'diode'"):
            container_from_dict({"elements": [{"id": 1, "type": "diode", "value": 0.7}]})

    def test_duplicate_element_id(self):
        data = {
            "elements": [
                {"id": 1, "type": "resistor", "value": 100},
                {"id": 1, "type": "resistor", "value": 200},
            ]
        }
        with self.assertRaisesRegex(ValueError, "Duplicate element ID '1' found"):
            container_from_dict(data)

    def test_invalid_connection_format(self):
        data = {"elements": [{"id": 1, "type": "resistor", "value": 100, "positive": "2-3"}]}
        with self.assertRaisesRegex(ValueError, "positive connections must be a list of element ids"):
            container_from_dict(data)

    def test_element_value_not_number(self):
        data = {"elements": [{"id": 1, "type": "resistor", "value": "100k"}]}
        with self.assertRaisesRegex(ValueError, "Element '1' value must be a number. Got: 100k"):
            container_from_dict(data)


if __name__ == '__main__':
    unittest.main()
