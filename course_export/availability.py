"""
Availability condition trees for course sections and modules.

Stored format (JSONB):
    {"op": "&", "c": [
        {"type": "date", "d": ">=", "t": 1704067200},
        {"type": "completion", "cm": 42, "e": 1},
        {"op": "|", "c": [...]}
    ]}

Operators are "&" and "|", optionally negated ("!&", "!|"). Leaves carry a
"type". Only "date" conditions can be decided for every student at once;
everything else (completion, group, profile, grade...) depends on the user.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Union

# Condition type used when one activity unlocks another
OTHER_ACTIVITY = "completion"

OPERATORS = ("&", "|", "!&", "!|")


class AvailabilityFormatError(ValueError):
    """Raised when a stored availability tree cannot be parsed."""

    pass


@dataclass(frozen=True)
class Condition:
    """A single leaf condition."""

    type: str
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def referenced_cm_id(self) -> int:
        """Module id an other-activity condition depends on."""
        if self.type != OTHER_ACTIVITY or "cm" not in self.data:
            raise AvailabilityFormatError(
                f"Condition of type '{self.type}' does not reference an activity"
            )
        return int(self.data["cm"])

    def is_available_for_all(self, now: int, negated: bool = False) -> bool:
        if self.type == "date":
            direction = self.data.get("d", ">=")
            timestamp = int(self.data.get("t", 0))
            if direction == ">=":
                satisfied = now >= timestamp
            else:
                satisfied = now < timestamp
            return satisfied != negated
        # User-dependent: some student may always fail it
        return False


@dataclass(frozen=True)
class ConditionTree:
    """A (possibly nested) group of conditions joined by one operator."""

    op: str = "&"
    children: tuple[Union["ConditionTree", Condition], ...] = ()

    def is_available_for_all(self, now: int, negated: bool = False) -> bool:
        if not self.children:
            return True
        negate_children = negated != self.op.startswith("!")
        # NOT(a AND b) == (NOT a) OR (NOT b), and vice versa
        require_all = (self.op.lstrip("!") == "&") != negate_children
        results = (
            child.is_available_for_all(now, negate_children) for child in self.children
        )
        return all(results) if require_all else any(results)

    def all_nodes(self) -> list[Union["ConditionTree", Condition]]:
        """Every descendant node (nested trees and leaves), depth first."""
        nodes: list[Union[ConditionTree, Condition]] = []
        for child in self.children:
            nodes.append(child)
            if isinstance(child, ConditionTree):
                nodes.extend(child.all_nodes())
        return nodes


def _parse_node(data: Any) -> Union[ConditionTree, Condition]:
    if not isinstance(data, dict):
        raise AvailabilityFormatError(f"Expected object, got {type(data).__name__}")

    if "op" in data:
        op = data["op"]
        if op not in OPERATORS:
            raise AvailabilityFormatError(f"Unknown operator '{op}'")
        children = data.get("c", [])
        if not isinstance(children, list):
            raise AvailabilityFormatError("Condition list 'c' must be an array")
        return ConditionTree(op=op, children=tuple(_parse_node(c) for c in children))

    if "type" not in data:
        raise AvailabilityFormatError("Condition is missing 'type'")
    params = {k: v for k, v in data.items() if k != "type"}
    return Condition(type=data["type"], data=params)


def parse_availability(data: dict | str | None) -> ConditionTree | None:
    """
    Parse a stored availability value.

    Args:
        data: JSONB value (dict), raw JSON text, or None

    Returns:
        ConditionTree, or None when there are no conditions at all

    Raises:
        AvailabilityFormatError: If the structure is invalid
    """
    if data is None or data == "":
        return None
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise AvailabilityFormatError(f"Invalid availability JSON: {e}") from e
    node = _parse_node(data)
    if isinstance(node, Condition):
        return ConditionTree(op="&", children=(node,))
    return node


def is_available_for_all(tree: ConditionTree | None, now: int) -> bool:
    """True if every student can access the item at `now`."""
    if tree is None:
        return True
    return tree.is_available_for_all(now)
