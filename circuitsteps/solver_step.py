import logging
from dataclasses import dataclass

from .container import Container
from .elements import ElementClass
from .operations import ONE, Divide, Operation, Sum, Text, Variable, reciprocal
from .solver import Solver, Step

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Branch:
    """A resistor (original or equivalent) between two nodes. None is the reference node."""
    name: str
    value: float
    a: int | None
    b: int | None

    def variable(self) -> Variable:
        return Variable(self.name, self.value)

    def ends(self) -> frozenset:
        return frozenset((self.a, self.b))

    def far_end(self, node: int | None) -> int | None:
        return self.b if self.a == node else self.a


class StepSolver(Solver):
    """
    Reduces the resistor network one move at a time, the way it is done by hand.

    Each move is a step: resistors shorted onto a single node are dropped,
    parallel pairs are combined, then series pairs through a node that nothing
    else touches. Reduction stops when no move applies.
    """

    def __init__(self, container: Container):
        super().__init__(container)
        self.branches: list[_Branch] = []
        self.pinned: set[int] = set()
        self.equivalents = 0

        for element in self.topology.elements:
            a = self.topology.node_of(element.id, "+")
            b = self.topology.node_of(element.id, "-")
            if element.kind == ElementClass.RESISTOR:
                self.branches.append(_Branch(element.pretty_string(), element.value, a, b))
            elif element.kind not in (ElementClass.GROUND, ElementClass.WIRE):
                # Nodes with a source on them keep their voltage; never reduce through them.
                self.pinned.update(node for node in (a, b) if node is not None)

    def _place(self, node_id: int | None) -> str:
        if node_id is None:
            return "Ground"
        return f"Node {self.topology.get_node(node_id).number}"

    def _equivalent(self, expression: Operation, a: int | None, b: int | None) -> _Branch:
        self.equivalents += 1
        return _Branch(f"Req{self.equivalents}", expression.evaluate(), a, b)

    def _find_short(self) -> _Branch | None:
        for branch in self.branches:
            if branch.a == branch.b:
                return branch
        return None

    def _find_parallel(self) -> tuple[_Branch, _Branch] | None:
        for i, first in enumerate(self.branches):
            for second in self.branches[i + 1:]:
                if first.ends() == second.ends():
                    return first, second
        return None

    def _find_series(self) -> tuple[int, _Branch, _Branch] | None:
        for node in self.topology.nodes:
            if node.id in self.pinned:
                continue
            touching = [branch for branch in self.branches if node.id in (branch.a, branch.b)]
            if len(touching) == 2:
                return node.id, touching[0], touching[1]
        return None

    def _replace(self, old: tuple[_Branch, ...], new: _Branch):
        index = min(self.branches.index(branch) for branch in old)
        self.branches = [branch for branch in self.branches if branch not in old]
        self.branches.insert(index, new)

    def solve(self) -> list[Step]:
        if not self.topology.elements:
            raise ValueError("Circuit has no elements to reduce.")

        labels = [element.pretty_string() for element in self.topology.elements
                  if element.kind not in (ElementClass.GROUND, ElementClass.WIRE)]
        steps = [Step("Circuit", [Text(", ".join(labels))])]

        while True:
            shorted = self._find_short()
            if shorted is not None:
                self.branches.remove(shorted)
                steps.append(Step(f"Short: {shorted.name}", [
                    Text(f"{shorted.name} has both ends on {self._place(shorted.a)} and carries no current"),
                ]))
                continue

            pair = self._find_parallel()
            if pair is not None:
                first, second = pair
                expression = Divide(ONE, Sum([reciprocal(first.variable()), reciprocal(second.variable())]))
                merged = self._equivalent(expression, first.a, first.b)
                self._replace(pair, merged)
                steps.append(Step(f"Parallel: {first.name} || {second.name}", [
                    expression,
                    Text(f"{merged.name} = {merged.value:g} Ω"),
                ]))
                continue

            series = self._find_series()
            if series is not None:
                node, first, second = series
                expression = Sum([first.variable(), second.variable()])
                merged = self._equivalent(expression, first.far_end(node), second.far_end(node))
                self._replace((first, second), merged)
                steps.append(Step(f"Series: {first.name} + {second.name}", [
                    expression,
                    Text(f"{merged.name} = {merged.value:g} Ω"),
                ]))
                continue
            break

        logger.debug("Step solver: %d reductions, %d branches left.", len(steps) - 1, len(self.branches))
        steps.append(Step("Reduced Circuit", [
            Text(f"{branch.name} = {branch.value:g} Ω between {self._place(branch.a)} and {self._place(branch.b)}")
            for branch in self.branches
        ]))
        return steps
