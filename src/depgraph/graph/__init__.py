"""Graph data model and in-memory store.

Python 3.13+.
"""

from .model import Attributes, Edge, EdgeKey, Node, NodeId, merge_attributes
from .store import GraphStore

__all__ = [
    "Attributes",
    "Edge",
    "EdgeKey",
    "GraphStore",
    "Node",
    "NodeId",
    "merge_attributes",
]
