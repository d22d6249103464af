# circuitsteps/operations.py
"""
Symbolic expressions used for matrix cells and solver output.

An Operation is one of a fixed set of frozen node types. Every node can be
rendered to canonical text with `equation_repr`, so any matrix of Operations
can always be displayed. Two trees that render the same text are treated as
equal by the tests (`same_text`).
"""
from dataclasses import dataclass

import numpy as np
import sympy

from .elements import format_value

# Rendered in place of a missing operand.
HOLE = "□"


class Operation:
    """Base for the expression node types below."""

    def equation_repr(self) -> str:
        return equation_repr(self)

    def evaluate(self) -> float:
        return evaluate(self)

    def to_sympy(self) -> sympy.Expr:
        return to_sympy(self)

    def __str__(self):
        return equation_repr(self)


@dataclass(frozen=True)
class Value(Operation):
    value: float


@dataclass(frozen=True)
class Variable(Operation):
    """A labeled quantity. Used for unknowns (value is a placeholder) and for named knowns like resistors."""
    label: str
    value: float = 0.0


@dataclass(frozen=True)
class Sum(Operation):
    terms: tuple[Operation, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "terms", tuple(self.terms))


@dataclass(frozen=True)
class Negate(Operation):
    operand: Operation | None = None


@dataclass(frozen=True)
class Divide(Operation):
    numerator: Operation | None = None
    denominator: Operation | None = None


@dataclass(frozen=True)
class Text(Operation):
    """Narrative text carried through unevaluated."""
    text: str


ZERO = Value(0.0)
ONE = Value(1.0)


def reciprocal(operand: Operation) -> Divide:
    return Divide(ONE, operand)


def _needs_parens(op: Operation | None, in_denominator: bool = False) -> bool:
    if isinstance(op, Sum):
        return len(op.terms) > 1
    if in_denominator:
        return isinstance(op, (Divide, Negate))
    return False


def _wrapped(op: Operation | None, in_denominator: bool = False) -> str:
    text = equation_repr(op)
    if _needs_parens(op, in_denominator):
        return f"({text})"
    return text


def equation_repr(op: Operation | None) -> str:
    """Canonical text for an expression. A missing operand renders as HOLE."""
    match op:
        case None:
            return HOLE
        case Value(value=value):
            return format_value(value)
        case Variable(label=label):
            return label
        case Sum(terms=terms):
            if not terms:
                return "0"
            return " + ".join(equation_repr(term) for term in terms)
        case Negate(operand=operand):
            return f"-{_wrapped(operand)}"
        case Divide(numerator=numerator, denominator=denominator):
            return f"{_wrapped(numerator)}/{_wrapped(denominator, in_denominator=True)}"
        case Text(text=text):
            return text
        case _:
            raise TypeError(f"Not an Operation: {op!r}")


def evaluate(op: Operation | None) -> float:
    """
    Numeric value of an expression. Variables contribute the value they carry.

    Raises:
        ValueError: For text nodes and missing operands, which have no value.
    """
    match op:
        case None:
            raise ValueError("Cannot evaluate an expression with a missing operand.")
        case Value(value=value):
            return float(value)
        case Variable(value=value):
            return float(value)
        case Sum(terms=terms):
            return float(sum(evaluate(term) for term in terms))
        case Negate(operand=operand):
            return -evaluate(operand)
        case Divide(numerator=numerator, denominator=denominator):
            return evaluate(numerator) / evaluate(denominator)
        case Text(text=text):
            raise ValueError(f"Text '{text}' has no numeric value.")
        case _:
            raise TypeError(f"Not an Operation: {op!r}")


def to_sympy(op: Operation | None) -> sympy.Expr:
    """Converts an expression to SymPy. Variables become symbols named by their label."""
    match op:
        case None:
            raise TypeError("Cannot convert an expression with a missing operand to SymPy.")
        case Value(value=value):
            if float(value).is_integer():
                return sympy.Integer(int(value))
            return sympy.Float(value)
        case Variable(label=label):
            return sympy.Symbol(label)
        case Sum(terms=terms):
            return sympy.Add(*(to_sympy(term) for term in terms))
        case Negate(operand=operand):
            return -to_sympy(operand)
        case Divide(numerator=numerator, denominator=denominator):
            return to_sympy(numerator) / to_sympy(denominator)
        case Text(text=text):
            raise TypeError(f"Text '{text}' cannot be converted to SymPy.")
        case _:
            raise TypeError(f"Not an Operation: {op!r}")


def same_text(a: Operation | None, b: Operation | None) -> bool:
    return equation_repr(a) == equation_repr(b)


# --- Matrices of Operations (numpy object arrays) ---

def zeros(shape: tuple[int, ...]) -> np.ndarray:
    """An object array of the given shape with every cell set to Value(0)."""
    matrix = np.empty(shape, dtype=object)
    matrix.fill(ZERO)
    return matrix


def matrix_repr(matrix: np.ndarray) -> list:
    """Nested lists of canonical text, one entry per cell."""
    return [[equation_repr(cell) for cell in row] for row in matrix]


def matrix_to_text(matrix: np.ndarray) -> str:
    rows = matrix_repr(matrix)
    return "[" + ", ".join("[" + ", ".join(row) + "]" for row in rows) + "]"


def matrix_to_latex(matrix: np.ndarray) -> str:
    """LaTeX for a 2-D matrix of Operations, rendered through SymPy."""
    if matrix.size == 0:
        return sympy.latex(sympy.zeros(*matrix.shape))
    return sympy.latex(sympy.Matrix([[to_sympy(cell) for cell in row] for row in matrix]))
