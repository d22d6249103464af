import json
from .container import Container
from .elements import Element, ElementClass

TYPE_NAMES = {
    "resistor": ElementClass.RESISTOR,
    "voltagesrc": ElementClass.VOLTAGE_SRC,
    "voltagesource": ElementClass.VOLTAGE_SRC,
    "currentsrc": ElementClass.CURRENT_SRC,
    "currentsource": ElementClass.CURRENT_SRC,
    "ground": ElementClass.GROUND,
    "wire": ElementClass.WIRE,
    "unknown": ElementClass.UNKNOWN,
}


def container_from_dict(data: dict) -> Container:
    """
    Builds a Container from an already decoded circuit definition.

    The definition is a dictionary with an "elements" list. Each element has
    "id", "type", "value", "positive" and "negative"; the last two list the
    ids of the elements joined to that side.

    Example element:
    {
        "id": 1,
        "type": "resistor",
        "value": 1000,
        "positive": [4],
        "negative": [0, 3]
    }
    """
    if not isinstance(data, dict) or "elements" not in data:
        raise ValueError("JSON circuit definition must contain an 'elements' list.")
    if not isinstance(data["elements"], list):
        raise ValueError("'elements' must be a list.")

    container = Container()
    element_ids = set()

    for element_data in data["elements"]:
        if not isinstance(element_data, dict):
            raise ValueError(f"Each item in 'elements' list must be a dictionary. Found: {element_data}")

        required_keys = {"id", "type"}
        if not required_keys.issubset(element_data.keys()):
            missing_keys = required_keys - element_data.keys()
            raise ValueError(f"Element data missing required keys: {missing_keys}. Data: {element_data}")

        element_id = element_data["id"]
        if not isinstance(element_id, int) or isinstance(element_id, bool):
            raise ValueError(f"Element id must be an integer. Got: {element_id}")
        if element_id in element_ids:
            raise ValueError(f"Duplicate element ID '{element_id}' found. IDs must be unique.")
        element_ids.add(element_id)

        type_name = str(element_data["type"]).lower()
        kind = TYPE_NAMES.get(type_name)
        if kind is None:
            raise ValueError(f"Unknown element type '{type_name}' for element '{element_id}'.")

        value = element_data.get("value", 0)
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ValueError(f"Element '{element_id}' value must be a number. Got: {value}")

        sides = {}
        for side in ("positive", "negative"):
            connected = element_data.get(side, [])
            if not isinstance(connected, list) or not all(
                isinstance(other, int) and not isinstance(other, bool) for other in connected
            ):
                raise ValueError(f"Element '{element_id}' {side} connections must be a list of element ids. Got: {connected}")
            sides[side] = connected

        container.add_element_core(Element(element_id, kind, float(value), sides["positive"], sides["negative"]))

    return container


def load_container_from_json(file_path: str) -> Container:
    """Loads a circuit definition (see `container_from_dict`) from a JSON file."""
    try:
        with open(file_path, 'r') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Error: Circuit file '{file_path}' not found.")
    except json.JSONDecodeError:
        raise ValueError(f"Error: Invalid JSON format in '{file_path}'.")

    return container_from_dict(data)
