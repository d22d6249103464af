"""Entry points that take an element list from outside and hand back results."""
from .container import Container
from .solver import Step
from .solver_matrix import MatrixSolver
from .solver_step import StepSolver


def solve(container: Container, matrix: bool = True, nodal: bool = True) -> list[Step]:
    """
    Validates the container, builds its topology and runs a solver.

    Args:
        container (Container): The circuit to solve.
        matrix (bool): Use the matrix solver; otherwise the step (reduction) solver.
        nodal (bool): Solve over nodes. Mesh solving is not implemented.

    Raises:
        StatusError: If validation fails.
        NotImplementedError: If `nodal` is False.
    """
    container.validate()
    if not nodal:
        container.create_nodes()
        container.create_meshes()
        container.create_super_meshes()
        raise NotImplementedError(f"{'Matrix' if matrix else 'Step'} Solver not implemented for meshes")

    container.create_nodes()
    container.create_super_nodes()
    solver = MatrixSolver(container) if matrix else StepSolver(container)
    return solver.solve()


def get_tools(container: Container) -> list[list[int]]:
    """Member element ids of every node, in node id order."""
    container.validate()
    container.create_nodes()
    container.create_super_nodes()
    return [node.member_ids() for node in container.nodes()]
