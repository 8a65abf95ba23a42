"""Node and edge value types for the dependency graph.

Nodes and edges carry opaque caller-defined tags (``category``, ``kind``)
that the engine never branches on, so one engine serves injection graphs,
foreign-key graphs and call graphs alike.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TypeAlias

from depgraph.constants import DEFAULT_EDGE_WEIGHT

__all__ = [
    "Attributes",
    "Edge",
    "EdgeKey",
    "Node",
    "NodeId",
    "merge_attributes",
]

NodeId: TypeAlias = str
"""Opaque, caller-supplied, stable node identifier (e.g. a bean FQN or table name)."""

EdgeKey: TypeAlias = tuple[str, str, str]
"""Edge identity: (source, target, kind)."""

Attributes: TypeAlias = Mapping[str, str]
"""Ordered pass-through string attributes."""

_EMPTY: MappingProxyType[str, str] = MappingProxyType({})


def _empty() -> MappingProxyType[str, str]:
    return _EMPTY


def _freeze(attributes: Mapping[str, str] | None) -> MappingProxyType[str, str]:
    if not attributes:
        return _EMPTY
    return MappingProxyType(dict(attributes))


def merge_attributes(
    existing: Mapping[str, str], incoming: Mapping[str, str] | None
) -> MappingProxyType[str, str]:
    """Merge attributes for an upsert.

    Existing keys keep their position with the incoming value; new keys are
    appended in incoming order.

    Example:
        >>> dict(merge_attributes({"a": "1", "b": "2"}, {"b": "3", "c": "4"}))
        {'a': '1', 'b': '3', 'c': '4'}
    """
    if not incoming:
        return _freeze(existing)
    merged = dict(existing)
    merged.update(incoming)
    return MappingProxyType(merged)


@dataclass(frozen=True, slots=True)
class Node:
    """Graph vertex.

    Identity is ``id``; attributes do not take part in equality or hashing.

    Attributes:
        id: Unique caller-supplied identifier
        category: Caller-defined tag (e.g. "bean", "table", "method")
        attributes: Read-only pass-through attributes, insertion ordered
    """

    id: NodeId
    category: str = ""
    attributes: Mapping[str, str] = field(default_factory=_empty, compare=False, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", _freeze(self.attributes))

    def with_attributes(self, extra: Mapping[str, str] | None) -> Node:
        """Return a copy with ``extra`` merged into the attributes."""
        return replace(self, attributes=merge_attributes(self.attributes, extra))

    def as_dict(self) -> dict[str, object]:
        """Plain-value form for JSON export."""
        return {
            "id": self.id,
            "category": self.category,
            "attributes": dict(self.attributes),
        }


@dataclass(frozen=True, slots=True)
class Edge:
    """Directed, tagged, weighted graph edge.

    Identity is ``(source, target, kind)``: several edges may join the same
    ordered pair as long as their kinds differ (multigraph).

    Attributes:
        source: Source node id
        target: Target node id
        kind: Caller-defined tag (e.g. "field-injection", "foreign-key")
        weight: Non-negative removal cost; lower means safer to remove
        attributes: Read-only pass-through attributes, insertion ordered
    """

    source: NodeId
    target: NodeId
    kind: str = ""
    weight: float = field(default=DEFAULT_EDGE_WEIGHT, compare=False)
    attributes: Mapping[str, str] = field(default_factory=_empty, compare=False, hash=False)

    def __post_init__(self) -> None:
        """Validate weight and freeze attributes.

        Raises:
            ValueError: If weight is negative or NaN.
        """
        if math.isnan(self.weight) or self.weight < 0:
            msg = f"Edge weight must be a non-negative number, got {self.weight!r}"
            raise ValueError(msg)
        object.__setattr__(self, "attributes", _freeze(self.attributes))

    @property
    def key(self) -> EdgeKey:
        """Identity key (source, target, kind)."""
        return (self.source, self.target, self.kind)

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def as_dict(self) -> dict[str, object]:
        """Plain-value form for JSON export."""
        return {
            "source": self.source,
            "target": self.target,
            "kind": self.kind,
            "weight": self.weight,
            "attributes": dict(self.attributes),
        }
