from enum import Enum

from .elements import Element, ElementClass


class Status(Enum):
    VALID = "Valid"
    SIMPLIFIED = "Simplified"

    def __str__(self):
        return self.value


class StatusError(Exception):
    """An issue found in a circuit. The bare class stands for an unknown issue."""

    def __str__(self):
        return "Unknown Issue"


class KnownIssue(StatusError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"Known Issue: {self.message}"


class MultipleIssues(StatusError):
    def __init__(self, issues: list[StatusError]):
        super().__init__(issues)
        self.issues = list(issues)

    def __str__(self):
        return f"Multiple Issues: [{', '.join(str(issue) for issue in self.issues)}]"


class TopologyError(KnownIssue):
    """Element terminals that cannot be resolved into nodes."""


def check_duplicates(items) -> list[StatusError]:
    """
    Returns one KnownIssue per repeated item. An empty list means no duplicates.
    """
    errors: list[StatusError] = []
    seen = []
    for item in items:
        if item in seen:
            errors.append(KnownIssue(f"Duplicate: {item}"))
        seen.append(item)
    return errors


def validate_element(element: Element) -> list[StatusError]:
    errors: list[StatusError] = []
    if element.kind == ElementClass.RESISTOR and element.value <= 0:
        errors.append(KnownIssue(f"Resistor {element} must have a positive value. Got: {element.value:g}"))
    if element.kind == ElementClass.GROUND and element.negative:
        errors.append(KnownIssue(f"Ground {element} has a single terminal; list its connections as positive."))
    if element.id in element.connections():
        errors.append(KnownIssue(f"Element {element} is connected to itself."))
    return errors


def collect_issues(elements: list[Element]) -> list[StatusError]:
    """All problems found in an element list, in a stable order."""
    errors: list[StatusError] = []
    if not elements:
        errors.append(KnownIssue("Circuit has no elements."))
        return errors

    errors.extend(check_duplicates([element.id for element in elements]))
    for element in elements:
        errors.extend(validate_element(element))

    by_id = {element.id: element for element in elements}
    for element in elements:
        for other_id in sorted(element.connections()):
            other = by_id.get(other_id)
            if other is None:
                errors.append(KnownIssue(f"Element {element} references missing element {other_id}."))
            elif other.side_of(element.id) is None:
                errors.append(KnownIssue(
                    f"Element {element} references {other}, but {other} does not reference it back."
                ))
    return errors


def validate_elements(elements: list[Element]) -> Status:
    """
    Raises the single issue found, or MultipleIssues when there are several.
    """
    errors = collect_issues(elements)
    if len(errors) == 1:
        raise errors[0]
    if errors:
        raise MultipleIssues(errors)
    return Status.VALID
