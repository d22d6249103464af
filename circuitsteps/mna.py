# circuitsteps/mna.py
"""
Modified Nodal Analysis matrices, built symbolically.

For n nodes and m voltage sources:

    A = [[G, B],      X = [V]      Z = [I]
         [C, D]]          [J]          [E]

G is n×n, B is n×m, C = Bᵀ, D is m×m zeros. Node i (in discovery order)
lives in row/column n - i - 1, so the last node discovered is row 0. Its
unknown is labelled by the node's number, which is that row counted from 1.
Resistances stay as labeled variables (1/R1, not 0.5) so the system reads
like a textbook equation; only source values are literal.
"""
import logging
from dataclasses import dataclass

import numpy as np

from .container import Topology
from .elements import SOLVED_CLASSES, ElementClass
from .operations import Negate, Sum, Value, Variable, reciprocal, zeros

logger = logging.getLogger(__name__)


def resistance_variable(element) -> Variable:
    return Variable(element.pretty_string(), element.value)


def node_label(node) -> str:
    return f"Node: {node.number}"


def _resistors_in(topology: Topology, node) -> list:
    resistors = []
    for element_id in node.members:
        element = topology.get_element(element_id)
        if element is not None and element.kind == ElementClass.RESISTOR:
            resistors.append(element)
    return resistors


def form_g_matrix(topology: Topology) -> np.ndarray:
    """Conductance matrix: 1/R sums on the diagonal, -1/R for each resistor joining two nodes."""
    nodes = sorted(topology.nodes, key=lambda node: node.id)
    n = len(nodes)
    matrix = zeros((n, n))

    for i, node in enumerate(nodes):
        terms = [reciprocal(resistance_variable(r)) for r in _resistors_in(topology, node)]
        matrix[n - i - 1, n - i - 1] = Sum(terms)

    for i, node in enumerate(nodes):
        for j, other in enumerate(nodes):
            if i == j:
                continue
            shared = [r for r in _resistors_in(topology, node) if other.contains(r.id)]
            matrix[n - i - 1, n - j - 1] = Sum([Negate(reciprocal(resistance_variable(r))) for r in shared])
    return matrix


def form_b_matrix(topology: Topology) -> np.ndarray:
    """
    Node to voltage source incidence. A cell is -1 when the node's first member
    is joined to the source's positive side, +1 for any other touching node.

    The test looks at the first member, not at which side of the source sits
    on the node. A node whose first member is the source itself always gets
    +1, so the same polarity can stamp -1 in one circuit and +1 in another.
    """
    n = len(topology.nodes)
    m = len(topology.voltage_sources)
    matrix = zeros((n, m))
    for i, node in enumerate(topology.nodes):
        for j, source in enumerate(topology.voltage_sources):
            if not node.contains(source.id):
                continue
            if node.members[0] in source.positive:
                matrix[n - i - 1, j] = Value(-1.0)
            else:
                matrix[n - i - 1, j] = Value(1.0)
    return matrix


def form_c_matrix(topology: Topology) -> np.ndarray:
    return form_b_matrix(topology).T.copy()


def form_d_matrix(topology: Topology) -> np.ndarray:
    # No element here couples one source current to another.
    m = len(topology.voltage_sources)
    return zeros((m, m))


def form_a_matrix(topology: Topology) -> np.ndarray:
    n = len(topology.nodes)
    m = len(topology.voltage_sources)
    matrix = zeros((n + m, n + m))
    matrix[0:n, 0:n] = form_g_matrix(topology)
    matrix[0:n, n:n + m] = form_b_matrix(topology)
    matrix[n:n + m, 0:n] = form_c_matrix(topology)
    matrix[n:n + m, n:n + m] = form_d_matrix(topology)
    return matrix


def form_z_matrix(topology: Topology) -> np.ndarray:
    """Right-hand side: current source values summed per node, then voltage source values."""
    n = len(topology.nodes)
    m = len(topology.voltage_sources)
    matrix = zeros((n + m, 1))

    # I block
    for i, node in enumerate(topology.nodes):
        values = [Value(source.value) for source in topology.current_sources if node.contains(source.id)]
        if not values:
            continue
        matrix[n - i - 1, 0] = Sum(values)

    # E block
    for j, source in enumerate(topology.voltage_sources):
        matrix[n + j, 0] = Value(source.value)
    return matrix


def form_x_matrix(topology: Topology) -> np.ndarray:
    """Unknowns: one voltage per node, then one current per voltage source. Values are placeholders."""
    n = len(topology.nodes)
    m = len(topology.voltage_sources)
    matrix = zeros((n + m, 1))

    # V block
    for i, node in enumerate(topology.nodes):
        matrix[n - i - 1, 0] = Variable(node_label(node), 0.0)

    # J block
    for j, source in enumerate(topology.voltage_sources):
        matrix[n + j, 0] = Variable(source.pretty_string(), 0.0)
    return matrix


@dataclass(frozen=True)
class MnaSystem:
    """All the matrices of A·X = Z for one topology."""
    n: int
    m: int
    g: np.ndarray
    b: np.ndarray
    c: np.ndarray
    d: np.ndarray
    a: np.ndarray
    z: np.ndarray
    x: np.ndarray

    @classmethod
    def assemble(cls, topology: Topology) -> "MnaSystem":
        n = len(topology.nodes)
        m = len(topology.voltage_sources)
        logger.debug("Assembling MNA system: %d nodes, %d voltage sources.", n, m)
        for element in topology.elements:
            if element.kind not in SOLVED_CLASSES | {ElementClass.GROUND, ElementClass.WIRE}:
                logger.warning("Element %s is not solved and is left out of the matrices.", element)
        return cls(
            n=n,
            m=m,
            g=form_g_matrix(topology),
            b=form_b_matrix(topology),
            c=form_c_matrix(topology),
            d=form_d_matrix(topology),
            a=form_a_matrix(topology),
            z=form_z_matrix(topology),
            x=form_x_matrix(topology),
        )
