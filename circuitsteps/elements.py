from dataclasses import dataclass, field
from enum import Enum


class ElementClass(Enum):
    RESISTOR = "resistor"
    VOLTAGE_SRC = "voltagesrc"
    CURRENT_SRC = "currentsrc"
    GROUND = "ground"
    WIRE = "wire"
    UNKNOWN = "unknown"


# Classes the assembler and solvers know how to stamp.
SOLVED_CLASSES = frozenset({ElementClass.RESISTOR, ElementClass.VOLTAGE_SRC, ElementClass.CURRENT_SRC})


def format_value(value: float) -> str:
    """Renders a number without a trailing '.0' when it is integral."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class Element:
    """
    A two-terminal circuit component.

    Args:
        id (int): Stable identifier, assigned when the element is added to a Container.
        kind (ElementClass): What the element is.
        value (float): Ohms for resistors, volts for voltage sources, amps for current sources.
        positive (frozenset[int]): Ids of the elements joined to this element's positive side.
        negative (frozenset[int]): Ids of the elements joined to this element's negative side.

    Ground elements have a single terminal and list their connections in `positive`.
    """
    id: int
    kind: ElementClass
    value: float = 0.0
    positive: frozenset[int] = field(default_factory=frozenset)
    negative: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self):
        # Accept any iterable of ids from callers, store frozensets.
        object.__setattr__(self, "value", float(self.value))
        object.__setattr__(self, "positive", frozenset(self.positive))
        object.__setattr__(self, "negative", frozenset(self.negative))

    def connections(self) -> frozenset[int]:
        return self.positive | self.negative

    def side_of(self, other_id: int) -> str | None:
        """Returns '+' or '-' for the side that touches `other_id`, None if neither does."""
        if other_id in self.positive:
            return "+"
        if other_id in self.negative:
            return "-"
        return None

    def pretty_string(self) -> str:
        if self.kind == ElementClass.RESISTOR:
            return f"R{self.id}"
        if self.kind == ElementClass.VOLTAGE_SRC:
            return f"SRC(V){self.id}: {format_value(self.value)} V"
        if self.kind == ElementClass.CURRENT_SRC:
            return f"SRC(I){self.id}: {format_value(self.value)} A"
        return f"{self.kind.name}{self.id}"

    def __str__(self):
        return self.pretty_string()
