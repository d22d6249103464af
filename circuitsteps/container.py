import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import networkx as nx

from .elements import Element, ElementClass
from .validation import Status, TopologyError, validate_elements

logger = logging.getLogger(__name__)

# A terminal is one side of an element: (element id, "+" or "-").
Terminal = tuple[int, str]


@dataclass(frozen=True)
class Node:
    """
    A group of element terminals at one electrical potential.

    `members` are element ids, ascending. The first member is the node's
    reference terminal when the assembler decides source orientation.
    `number` is the name shown to people: n - id, which is also the node's
    matrix row counted from 1.
    """
    id: int
    members: tuple[int, ...]
    number: int = field(default=0, kw_only=True, compare=False)

    def contains(self, element_id: int) -> bool:
        return element_id in self.members

    def member_ids(self) -> list[int]:
        return list(self.members)

    def pretty_string(self) -> str:
        return f"Node {self.number}: {list(self.members)}"


@dataclass(frozen=True)
class SuperNode(Node):
    """Nodes joined by a voltage source, treated as one for KCL. `id` is the smallest member node id."""
    node_ids: tuple[int, ...] = ()

    def pretty_string(self) -> str:
        count = self.id + self.number
        return f"SuperNode {[count - node_id for node_id in self.node_ids]}: {list(self.members)}"


@dataclass(frozen=True)
class Mesh:
    """An independent loop, as the ids of the elements around it."""
    id: int
    members: tuple[int, ...]

    def contains(self, element_id: int) -> bool:
        return element_id in self.members

    def member_ids(self) -> list[int]:
        return list(self.members)


@dataclass(frozen=True)
class Topology:
    """
    Read-only snapshot of a built Container. The MNA assembler only takes this,
    so matrices can't be formed from a container whose nodes were never built.
    """
    elements: tuple[Element, ...]
    nodes: tuple[Node, ...]
    super_nodes: tuple[SuperNode, ...]
    voltage_sources: tuple[Element, ...]
    current_sources: tuple[Element, ...]
    terminal_nodes: Mapping[Terminal, int | None] = field(
        default_factory=lambda: MappingProxyType({}), compare=False)

    def __post_init__(self):
        object.__setattr__(self, "terminal_nodes", MappingProxyType(dict(self.terminal_nodes)))

    def node_of(self, element_id: int, side: str) -> int | None:
        """Node id of an element terminal; None for the reference (ground) node."""
        return self.terminal_nodes.get((element_id, side))

    def get_node(self, node_id: int) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_element(self, element_id: int) -> Element | None:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None


def terminals_of(element: Element) -> list[Terminal]:
    if element.kind == ElementClass.GROUND:
        return [(element.id, "+")]
    return [(element.id, "+"), (element.id, "-")]


def _grouped(graph: nx.Graph) -> list[list]:
    """Connected components of `graph`, each sorted, ordered by their smallest item."""
    return sorted((sorted(component) for component in nx.connected_components(graph)), key=lambda group: group[0])


class Container:
    """
    Owns the elements of one analysis and the topology derived from them.

    Topology is built on demand with `create_nodes` / `create_super_nodes`
    (and the mesh equivalents). Adding elements afterwards does not
    invalidate what was built; rebuild after any change.
    """

    def __init__(self):
        self.elements: list[Element] = []
        self._nodes: list[Node] = []
        self._super_nodes: list[SuperNode] = []
        self._meshes: list[Mesh] = []
        self._super_meshes: list[Mesh] = []
        self._terminal_nodes: dict[Terminal, int | None] = {}
        self._junctions: dict[Terminal, Terminal] = {}
        self._reference: Terminal | None = None
        self.is_built: bool = False

    # --- Elements ---

    def add_element(self, kind: ElementClass, value: float = 0.0,
                    positive=(), negative=()) -> int:
        """Adds an element with the next free id and returns that id."""
        element_id = max((element.id for element in self.elements), default=-1) + 1
        self.elements.append(Element(element_id, kind, value, frozenset(positive), frozenset(negative)))
        return element_id

    def add_element_core(self, element: Element):
        """Adds an element keeping the id it already carries."""
        if not isinstance(element, Element):
            raise TypeError("Can only add Element objects to the container.")
        self.elements.append(element)

    def get_elements(self) -> list[Element]:
        return list(self.elements)

    def get_element(self, element_id: int) -> Element | None:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    def get_elements_of(self, kind: ElementClass) -> list[Element]:
        return [element for element in self.elements if element.kind == kind]

    def get_voltage_sources(self) -> list[Element]:
        return self.get_elements_of(ElementClass.VOLTAGE_SRC)

    def get_current_sources(self) -> list[Element]:
        return self.get_elements_of(ElementClass.CURRENT_SRC)

    def validate(self) -> Status:
        return validate_elements(self.elements)

    # --- Topology ---

    def nodes(self) -> list[Node]:
        return list(self._nodes)

    def super_nodes(self) -> list[SuperNode]:
        return list(self._super_nodes)

    def meshes(self) -> list[Mesh]:
        return list(self._meshes)

    def super_meshes(self) -> list[Mesh]:
        return list(self._super_meshes)

    def _terminal_graph(self) -> nx.Graph:
        """Graph over terminals; an edge means two terminals touch. Junctions are its components."""
        by_id = {element.id: element for element in self.elements}
        graph = nx.Graph()
        for element in self.elements:
            graph.add_nodes_from(terminals_of(element))

        grounds: list[Terminal] = []
        # Links to an element that lists us on both of its sides (parallel elements).
        ambiguous: list[tuple[Terminal, int]] = []
        for element in self.elements:
            if element.kind == ElementClass.GROUND:
                grounds.append((element.id, "+"))
            if element.kind == ElementClass.WIRE:
                graph.add_edge((element.id, "+"), (element.id, "-"))

            sides = [("+", element.positive), ("-", element.negative)]
            if element.kind == ElementClass.GROUND:
                sides = [("+", element.connections())]
            for side, connected in sides:
                for other_id in sorted(connected):
                    other = by_id.get(other_id)
                    if other is None:
                        raise TopologyError(f"Element {element} references missing element {other_id}.")
                    if other.kind == ElementClass.GROUND:
                        other_sides = ["+"] if element.id in other.connections() else []
                    else:
                        other_sides = [s for s, ids in (("+", other.positive), ("-", other.negative))
                                       if element.id in ids]
                    if not other_sides:
                        raise TopologyError(f"Element {element} references {other}, which does not reference it back.")
                    if len(other_sides) == 1:
                        graph.add_edge((element.id, side), (other_id, other_sides[0]))
                    else:
                        ambiguous.append(((element.id, side), other_id))

        # Every ground shares the one reference potential.
        for terminal in grounds[1:]:
            graph.add_edge(grounds[0], terminal)

        # Resolve parallel links after every unambiguous one. If no other path
        # already decided the pairing, sides are joined like to like.
        for terminal, other_id in ambiguous:
            if nx.has_path(graph, terminal, (other_id, "+")) or nx.has_path(graph, terminal, (other_id, "-")):
                continue
            graph.add_edge(terminal, (other_id, terminal[1]))
        return graph

    def _reference_junction(self) -> Terminal:
        for element in self.elements:
            if element.kind == ElementClass.GROUND:
                return self._junctions[(element.id, "+")]
        first = self.elements[0]
        logger.warning("Circuit has no ground; using the negative side of %s as reference.", first)
        return self._junctions[terminals_of(first)[-1]]

    def create_nodes(self) -> Status:
        """
        Partitions element terminals into nodes.

        Junctions are walked depth-first from the reference (ground) junction,
        with a stack, so the node discovered last gets the highest id. Node ids
        are dense from 0 and the reference junction is not a node.

        Raises:
            TopologyError: If a connection names a missing element or is not reciprocated.
        """
        self._nodes = []
        self._super_nodes = []
        self._meshes = []
        self._super_meshes = []
        self._terminal_nodes = {}
        self._junctions = {}
        self.is_built = False
        if not self.elements:
            self.is_built = True
            return Status.VALID

        # A junction is named by its smallest terminal.
        for component in _grouped(self._terminal_graph()):
            for terminal in component:
                self._junctions[terminal] = component[0]
        reference = self._reference_junction()

        touching: dict[Terminal, list[int]] = {junction: [] for junction in self._junctions.values()}
        for element in self.elements:
            for terminal in terminals_of(element):
                ids = touching[self._junctions[terminal]]
                if element.id not in ids:
                    ids.append(element.id)
        for ids in touching.values():
            ids.sort()

        by_id = {element.id: element for element in self.elements}
        visited: set[Terminal] = set()
        order: list[Terminal] = []

        def walk(start: Terminal):
            stack = [start]
            while stack:
                junction = stack.pop()
                if junction in visited:
                    continue
                visited.add(junction)
                if junction != reference:
                    order.append(junction)
                for element_id in touching[junction]:
                    for terminal in terminals_of(by_id[element_id]):
                        far = self._junctions[terminal]
                        if far not in visited:
                            stack.append(far)

        walk(reference)
        for element in self.elements:
            for terminal in terminals_of(element):
                if self._junctions[terminal] not in visited:
                    walk(self._junctions[terminal])

        count = len(order)
        node_ids: dict[Terminal, int] = {}
        for node_id, junction in enumerate(order):
            node_ids[junction] = node_id
            members = tuple(
                element_id for element_id in touching[junction]
                if by_id[element_id].kind not in (ElementClass.GROUND, ElementClass.WIRE)
            )
            self._nodes.append(Node(node_id, members, number=count - node_id))

        for terminal, junction in self._junctions.items():
            self._terminal_nodes[terminal] = node_ids.get(junction)
        self._reference = reference
        self.is_built = True
        logger.debug("Container: %d nodes built: %s", len(self._nodes),
                     [node.member_ids() for node in self._nodes])
        return Status.VALID

    def _require_nodes(self):
        if not self.is_built:
            raise TopologyError("Nodes must be created before this step.")

    def create_super_nodes(self) -> Status:
        """
        Contracts nodes bridged by a voltage source whose terminals both sit on
        non-reference nodes. Every node ends up in exactly one super-node.
        """
        self._require_nodes()
        bridges = nx.Graph()
        bridges.add_nodes_from(node.id for node in self._nodes)
        for source in self.get_voltage_sources():
            positive = self._terminal_nodes.get((source.id, "+"))
            negative = self._terminal_nodes.get((source.id, "-"))
            if positive is not None and negative is not None:
                bridges.add_edge(positive, negative, element=source.id)

        by_id = {node.id: node for node in self._nodes}
        self._super_nodes = []
        for node_ids in _grouped(bridges):
            members = sorted({member for node_id in node_ids for member in by_id[node_id].members})
            representative = by_id[node_ids[0]]
            self._super_nodes.append(
                SuperNode(representative.id, tuple(members), tuple(node_ids), number=representative.number))
        logger.debug("Container: %d super nodes built.", len(self._super_nodes))
        return Status.VALID

    def create_meshes(self) -> Status:
        """
        Finds independent loops: a breadth-first spanning tree over the
        junctions, then one loop per element left out of the tree.

        Junctions and elements form a multigraph (parallel elements share both
        junctions), which `nx.cycle_basis` does not accept, so the basis is
        taken from the spanning tree directly.
        """
        self._require_nodes()
        self._meshes = []
        edges: list[tuple[Terminal, Terminal, int]] = [
            (self._junctions[(element.id, "+")], self._junctions[(element.id, "-")], element.id)
            for element in self.elements
            if element.kind not in (ElementClass.GROUND, ElementClass.WIRE)
        ]
        circuit = nx.MultiGraph()
        circuit.add_nodes_from(dict.fromkeys(self._junctions.values()))
        for a, b, element_id in edges:
            circuit.add_edge(a, b, key=element_id)

        tree = nx.Graph()
        tree.add_nodes_from(circuit)
        reached: set[Terminal] = set()
        for start in [self._reference] + list(circuit):
            if start in reached:
                continue
            reached.add(start)
            for a, b in nx.bfs_edges(circuit, start):
                reached.add(b)
                tree.add_edge(a, b, element=next(iter(circuit[a][b])))
        tree_elements = {element_id for _, _, element_id in tree.edges(data="element")}

        for a, b, element_id in edges:
            if element_id in tree_elements:
                continue
            path = nx.shortest_path(tree, a, b)
            loop = {tree[u][v]["element"] for u, v in zip(path, path[1:])} | {element_id}
            self._meshes.append(Mesh(len(self._meshes), tuple(sorted(loop))))
        logger.debug("Container: %d meshes built.", len(self._meshes))
        return Status.VALID

    def create_super_meshes(self) -> Status:
        """Merges meshes that share a current source."""
        shared = nx.Graph()
        shared.add_nodes_from(mesh.id for mesh in self._meshes)
        for source in self.get_current_sources():
            sharing = [mesh.id for mesh in self._meshes if mesh.contains(source.id)]
            for mesh_id in sharing[1:]:
                shared.add_edge(sharing[0], mesh_id)

        by_id = {mesh.id: mesh for mesh in self._meshes}
        self._super_meshes = [
            Mesh(mesh_ids[0], tuple(sorted({m for mesh_id in mesh_ids for m in by_id[mesh_id].members})))
            for mesh_ids in _grouped(shared)
        ]
        return Status.VALID

    def topology(self) -> Topology:
        """
        Snapshot of the built topology.

        Raises:
            TopologyError: If `create_nodes` has not run.
        """
        self._require_nodes()
        super_nodes = self._super_nodes or [
            SuperNode(node.id, node.members, (node.id,), number=node.number) for node in self._nodes
        ]
        return Topology(
            elements=tuple(self.elements),
            nodes=tuple(self._nodes),
            super_nodes=tuple(super_nodes),
            voltage_sources=tuple(self.get_voltage_sources()),
            current_sources=tuple(self.get_current_sources()),
            terminal_nodes=self._terminal_nodes,
        )

    def __repr__(self):
        return (f"Container(elements={len(self.elements)}, nodes={len(self._nodes)}, "
                f"super_nodes={len(self._super_nodes)}, built={self.is_built})")
