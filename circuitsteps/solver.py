import json
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .container import Container
from .operations import Operation, equation_repr


@dataclass(frozen=True)
class Step:
    """One labeled unit of solver output and the expressions shown under it."""
    label: str
    sub_steps: tuple[Operation, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "sub_steps", tuple(self.sub_steps))

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "sub_steps": [equation_repr(op) for op in self.sub_steps],
        }


class Solver(ABC):
    """
    Common contract for solving strategies.

    A solver is handed the container of one analysis. If its nodes have not
    been built yet, construction builds nodes and super-nodes first.
    """

    def __init__(self, container: Container):
        self.container = container
        if not container.is_built:
            container.create_nodes()
            container.create_super_nodes()
        self.topology = container.topology()

    @abstractmethod
    def solve(self) -> list[Step]:
        """Returns the ordered steps of the solution."""


def serialize_steps(steps: list[Step]) -> str:
    return json.dumps([step.to_dict() for step in steps])
