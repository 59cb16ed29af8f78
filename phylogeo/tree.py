from __future__ import annotations
import json
import math
from typing import Optional, Any, Dict, List

try:
    from typing import Self
except ImportError:
    from typing_extensions import Self


class Node:
    """
    Annotated tree node consumed by the map pipeline.

    Traits (geographic locations at several resolutions, ``num_date`` and any
    other per-node annotation) live in ``values``. ``array_idx`` is the
    position of the node in the dense node array produced by ``index_nodes``;
    visibility and color vectors are indexed by it.
    """

    __slots__ = (
        "children",
        "parent",
        "name",
        "length",
        "values",
        "array_idx",
        "depth",
        "_traverse_cache",
    )

    children: List[Self]
    parent: Optional[Self]
    name: str
    length: Optional[float]
    values: Dict[str, Any]
    array_idx: Optional[int]
    depth: Optional[int]
    _traverse_cache: Optional[List[Self]]

    def __init__(
        self,
        children: Optional[List[Self]] = None,
        name: str = "",
        length: Optional[float] = None,
        values: Optional[Dict[str, Any]] = None,
        array_idx: Optional[int] = None,
        depth: Optional[int] = None,
    ):
        # Avoid mutable default arguments; create fresh containers
        self.children = list(children) if children is not None else []
        for child in self.children:
            child.parent = self
        self.parent = None
        self.name = name
        self.length = length
        self.values = dict(values) if values is not None else {}
        self.array_idx = array_idx
        self.depth = depth
        self._traverse_cache = None

    def __repr__(self) -> str:
        return f"Node('{self.name}')"

    # ------------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------------

    def append_child(self, node: Self) -> None:
        self.children.append(node)
        node.parent = self
        self.invalidate_caches()

    def invalidate_caches(self) -> None:
        """Drop the traversal cache on this node and all of its ancestors."""
        cur: Optional[Node] = self
        while cur is not None:
            cur._traverse_cache = None
            cur = cur.parent

    def traverse(self) -> List[Self]:
        """
        Return a list of all nodes in the subtree rooted at this node (Pre-order).
        Uses an iterative stack approach to avoid recursion depth issues.
        """
        if self._traverse_cache is not None:
            return self._traverse_cache

        nodes: List[Self] = []
        stack: List[Self] = [self]

        while stack:
            current = stack.pop()
            nodes.append(current)
            # Add children in reverse to maintain left-to-right visit order
            for child in reversed(current.children):
                stack.append(child)

        self._traverse_cache = nodes
        return nodes

    def get_leaves(self) -> List[Self]:
        return [node for node in self.traverse() if node.is_leaf()]

    def get_root(self) -> Self:
        cur = self
        while cur.parent is not None:
            cur = cur.parent
        return cur

    def is_leaf(self) -> bool:
        return len(self.children) == 0

    def is_internal(self) -> bool:
        return bool(self.children)

    # ------------------------------------------------------------------------
    # Traits
    # ------------------------------------------------------------------------

    def get_trait(self, trait: str) -> Optional[Any]:
        """
        Return the value of ``trait`` or None when it is absent or empty.

        Empty strings are treated as undefined so that unannotated nodes never
        form a location of their own.
        """
        value = self.values.get(trait)
        if value is None or value == "":
            return None
        return value

    def set_trait(self, trait: str, value: Any) -> None:
        self.values[trait] = value

    def get_num_date(self, trait: str = "num_date") -> float:
        """Numeric date of this node, ``nan`` when the node carries none."""
        value = self.values.get(trait)
        if isinstance(value, dict):
            # {"value": 2016.3, "confidence": [...]} style annotations
            value = value.get("value")
        if value is None:
            return math.nan
        try:
            return float(value)
        except (TypeError, ValueError):
            return math.nan

    @property
    def num_date(self) -> float:
        return self.get_num_date()

    # ------------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------------

    def to_newick(self, lengths: bool = True) -> str:
        return self._to_newick(lengths=lengths) + ";"

    def _to_newick(self, lengths: bool = True) -> str:
        meta = ""
        if self.values:
            meta = "[&" + ",".join(f"{k}={v}" for k, v in self.values.items()) + "]"

        child_str = ""
        if self.children:
            child_str = (
                "(" + ",".join(ch._to_newick(lengths) for ch in self.children) + ")"
            )
        if lengths and self.length is not None:
            return f"{child_str}{self.name or ''}{meta}:{float(self.length):.6f}"
        return f"{child_str}{self.name or ''}{meta}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "length": self.length,
            "array_idx": self.array_idx,
            "values": self.values,
            "children": [child.to_dict() for child in self.children],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=4)


def index_nodes(root: Node) -> List[Node]:
    """
    Assign dense ``array_idx`` values in pre-order and return the node array.

    The returned list satisfies ``nodes[i].array_idx == i`` which is the
    contract the map pipeline relies on for visibility and color vectors.
    """
    nodes = root.traverse()
    for idx, node in enumerate(nodes):
        node.array_idx = idx
    return list(nodes)
