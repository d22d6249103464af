"""
Small circuits used by the tests and the `--example` CLI option.

Connections are listed by element id: an element's `positive` set names the
elements joined to its positive side, `negative` those joined to its negative
side. Ids are assigned in the order the elements are added, starting at 0.
"""
from .container import Container
from .elements import ElementClass

GROUND = ElementClass.GROUND
RESISTOR = ElementClass.RESISTOR
VOLTAGE_SRC = ElementClass.VOLTAGE_SRC
CURRENT_SRC = ElementClass.CURRENT_SRC


def create_basic_container() -> Container:
    """Voltage divider: 10 V source feeding R2 (2 Ω) in series with R3 (4 Ω)."""
    c = Container()
    c.add_element(GROUND, 0, positive=[1, 3])
    c.add_element(VOLTAGE_SRC, 10, positive=[2], negative=[0, 3])
    c.add_element(RESISTOR, 2, positive=[1], negative=[3])
    c.add_element(RESISTOR, 4, positive=[2], negative=[0, 1])
    return c


def create_basic_supernode_container() -> Container:
    """A floating 6 V source between two resistor-to-ground nodes, with a 2 A source into one of them."""
    c = Container()
    c.add_element(GROUND, 0, positive=[1, 2, 4])
    c.add_element(RESISTOR, 5, positive=[3, 4], negative=[0, 2, 4])
    c.add_element(RESISTOR, 10, positive=[3], negative=[0, 1, 4])
    c.add_element(VOLTAGE_SRC, 6, positive=[1, 4], negative=[2])
    c.add_element(CURRENT_SRC, 2, positive=[1, 3], negative=[0, 1, 2])
    return c


def create_basic_supermesh_container() -> Container:
    """Two loops sharing the 1 A current source I3."""
    c = Container()
    c.add_element(GROUND, 0, positive=[1, 3, 5])
    c.add_element(VOLTAGE_SRC, 10, positive=[2], negative=[0, 3, 5])
    c.add_element(RESISTOR, 2, positive=[1], negative=[3, 4])
    c.add_element(CURRENT_SRC, 1, positive=[2, 4], negative=[0, 1, 5])
    c.add_element(RESISTOR, 3, positive=[2, 3], negative=[5])
    c.add_element(RESISTOR, 6, positive=[4], negative=[0, 1, 3])
    return c


def create_mna_container() -> Container:
    """
    Three nodes, two voltage sources (32 V and 20 V) and resistors R1, R2, R3.
    https://lpsa.swarthmore.edu/Systems/Electrical/mna/MNA3.html
    """
    c = Container()
    c.add_element(GROUND, 0, positive=[1, 3, 5])
    c.add_element(RESISTOR, 2, positive=[4], negative=[0, 3, 5])
    c.add_element(RESISTOR, 4, positive=[3, 4], negative=[5])
    c.add_element(RESISTOR, 8, positive=[2, 4], negative=[0, 1, 5])
    c.add_element(VOLTAGE_SRC, 32, positive=[1], negative=[2, 3])
    c.add_element(VOLTAGE_SRC, 20, positive=[0, 1, 3], negative=[2])
    return c


def create_mna_container_2() -> Container:
    """A 5 V source and a 1 A current source driving R2 (1 Ω) and R3 (2 Ω)."""
    c = Container()
    c.add_element(GROUND, 0, positive=[1, 3, 4])
    c.add_element(VOLTAGE_SRC, 5, positive=[2], negative=[0, 3, 4])
    c.add_element(RESISTOR, 1, positive=[1], negative=[3, 4])
    c.add_element(RESISTOR, 2, positive=[2, 4], negative=[0, 1, 4])
    c.add_element(CURRENT_SRC, 1, positive=[2, 3], negative=[0, 1, 3])
    return c


def create_ladder_container() -> Container:
    """12 V source feeding R2 (2 Ω) into R3 || R4 (4 Ω each)."""
    c = Container()
    c.add_element(GROUND, 0, positive=[1, 3, 4])
    c.add_element(VOLTAGE_SRC, 12, positive=[2], negative=[0, 3, 4])
    c.add_element(RESISTOR, 2, positive=[1], negative=[3, 4])
    c.add_element(RESISTOR, 4, positive=[2, 4], negative=[0, 1, 4])
    c.add_element(RESISTOR, 4, positive=[2, 3], negative=[0, 1, 3])
    return c


EXAMPLES = {
    "basic": create_basic_container,
    "supernode": create_basic_supernode_container,
    "supermesh": create_basic_supermesh_container,
    "mna": create_mna_container,
    "mna2": create_mna_container_2,
    "ladder": create_ladder_container,
}
