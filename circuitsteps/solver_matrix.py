import logging

from .container import Container
from .mna import MnaSystem
from .operations import Text, matrix_to_text
from .solver import Solver, Step

logger = logging.getLogger(__name__)

# Shown where the inverse of A will go; A is never inverted numerically here.
INVERSE_PLACEHOLDER = "TODO"


class MatrixSolver(Solver):
    """
    Presents the circuit as the MNA matrix equation X = A^-1 * Z.

    The steps show A, Z and X, then the shape of the final equation. The
    inverse of A is left as a placeholder step.
    """

    def __init__(self, container: Container):
        super().__init__(container)
        self.system = MnaSystem.assemble(self.topology)

    @property
    def a_matrix(self):
        return self.system.a

    @property
    def z_matrix(self):
        return self.system.z

    @property
    def x_matrix(self):
        return self.system.x

    def solve(self) -> list[Step]:
        a_text = matrix_to_text(self.system.a)
        z_text = matrix_to_text(self.system.z)
        x_text = matrix_to_text(self.system.x)
        logger.debug("Matrix solver: A is %dx%d.", *self.system.a.shape)

        return [
            Step("A Matrix", [Text(a_text)]),
            Step("Z Matrix", [Text(z_text)]),
            Step("X Matrix", [Text(x_text)]),
            Step("Inverse A Matrix", [Text(INVERSE_PLACEHOLDER)]),
            Step("Final Equation", []),
            Step("Final Equation", [Text(f"{x_text} = {a_text}^-1 * {z_text}")]),
        ]
