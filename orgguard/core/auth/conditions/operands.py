"""
Condition operands.

A rule value in a policy condition is parsed into one of four variants
before evaluation:

- Literal:      a scalar value ("HR", 3, True)
- ArrayLiteral: a list of operands (each element parsed again)
- SubjectRef:   "$subject.<key>", read from the subject attribute map
- ResourceRef:  "$resource.<key>", read from the resource attribute map

References are resolved against the maps supplied at evaluation time,
never against stored policy state.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Union

SUBJECT_REF_PREFIX = "$subject."
RESOURCE_REF_PREFIX = "$resource."


@dataclass(frozen=True)
class Literal:
    value: Any


@dataclass(frozen=True)
class ArrayLiteral:
    items: tuple["Operand", ...]


@dataclass(frozen=True)
class SubjectRef:
    key: str


@dataclass(frozen=True)
class ResourceRef:
    key: str


Operand = Union[Literal, ArrayLiteral, SubjectRef, ResourceRef]


class UnresolvedReference(Exception):
    """A dynamic reference pointed at an attribute that is not present."""

    def __init__(self, ref: SubjectRef | ResourceRef):
        side = "subject" if isinstance(ref, SubjectRef) else "resource"
        super().__init__(f"${side}.{ref.key} is not set")
        self.ref = ref


def parse_operand(raw: Any) -> Operand:
    """Parse a raw rule value into its operand variant."""
    if isinstance(raw, (list, tuple)):
        return ArrayLiteral(tuple(parse_operand(item) for item in raw))
    if isinstance(raw, str):
        if raw.startswith(SUBJECT_REF_PREFIX) and len(raw) > len(SUBJECT_REF_PREFIX):
            return SubjectRef(raw[len(SUBJECT_REF_PREFIX):])
        if raw.startswith(RESOURCE_REF_PREFIX) and len(raw) > len(RESOURCE_REF_PREFIX):
            return ResourceRef(raw[len(RESOURCE_REF_PREFIX):])
    return Literal(raw)


def resolve_operand(
    operand: Operand,
    subject_attrs: Mapping[str, Any],
    resource_attrs: Mapping[str, Any],
) -> Any:
    """
    Resolve an operand to a concrete value.

    Raises:
        UnresolvedReference: if a reference names a missing attribute
    """
    if isinstance(operand, Literal):
        return operand.value
    if isinstance(operand, ArrayLiteral):
        return [resolve_operand(item, subject_attrs, resource_attrs) for item in operand.items]
    if isinstance(operand, SubjectRef):
        if subject_attrs.get(operand.key) is None:
            raise UnresolvedReference(operand)
        return subject_attrs[operand.key]
    if isinstance(operand, ResourceRef):
        if resource_attrs.get(operand.key) is None:
            raise UnresolvedReference(operand)
        return resource_attrs[operand.key]
    raise TypeError(f"Unsupported operand: {operand!r}")
