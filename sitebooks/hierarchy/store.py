"""Mini README: Generic in-memory forest used by cost centers and products.

Structure:
    * TreeNode - dataclass holding identity, parent pointer, ordered children
      and a variant payload.
    * SelectableOption - flattened, path-labelled view of a selectable node.
    * TreeStore - abstract forest offering insert, update, delete, path lookup
      and selectable listing. Subclasses decide which payloads are selectable.

Nodes are kept in their ordered forest and in an identifier index, so lookups
are constant time while every listing still walks depth-first with children
in insertion order. Mutations happen in place and bump ``revision`` so that
observers can detect change cheaply.

Nodes returned by lookups and listings are owned by the store. Change them
only through ``insert``, ``update`` and ``delete`` so the index, the parent
links and ``revision`` stay in step.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
)

from ..errors import NodeNotFoundError, ValidationError, require_name
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

P = TypeVar("P")

DEFAULT_SEPARATOR = " / "


@dataclass(slots=True)
class TreeNode(Generic[P]):
    """Single node of a forest; ``children`` keeps append order."""

    node_id: str
    name: str
    parent_id: Optional[str]
    payload: P
    children: List["TreeNode[P]"] = field(default_factory=list)

    def as_dict(self, describe: Callable[[P], Dict[str, Any]]) -> Dict[str, Any]:
        """Serialise the subtree rooted at this node."""

        return {
            "id": self.node_id,
            "name": self.name,
            "parent_id": self.parent_id,
            **describe(self.payload),
            "children": [child.as_dict(describe) for child in self.children],
        }


@dataclass(frozen=True, slots=True)
class SelectableOption:
    """Leaf eligible for direct use in a line item."""

    node_id: str
    full_path: str
    unit: str = ""


class TreeStore(ABC, Generic[P]):
    """Forest of typed nodes with structural operations."""

    id_prefix: str = "node"

    def __init__(
        self,
        roots: Optional[Iterable[TreeNode[P]]] = None,
        *,
        separator: str = DEFAULT_SEPARATOR,
    ) -> None:
        self.separator = separator
        self._roots: List[TreeNode[P]] = []
        self._index: Dict[str, TreeNode[P]] = {}
        self._sequence = 0
        self.revision = 0
        for root in roots if roots is not None else self._build_demo_forest():
            if root.parent_id is not None:
                raise ValidationError(f"Root node {root.node_id} cannot declare a parent.")
            self._roots.append(root)
            self._register_subtree(root)
        LOGGER.debug(
            "%s initialised with %s nodes", type(self).__name__, len(self._index)
        )

    # Variant hooks -----------------------------------------------------

    @abstractmethod
    def is_selectable(self, payload: P) -> bool:
        """Return True when a node with this payload can be used directly."""

    @abstractmethod
    def describe(self, payload: P) -> Dict[str, Any]:
        """Export the payload as flat, serialisable fields."""

    def unit_for(self, payload: P) -> str:
        """Unit reported by ``list_selectable``; variants without units return ``""``."""

        return ""

    def _build_demo_forest(self) -> List[TreeNode[P]]:
        """Seed forest used when no roots are provided."""

        return []

    # Internal bookkeeping ----------------------------------------------

    def _register_subtree(self, node: TreeNode[P]) -> None:
        for current, _depth in _walk([node]):
            if current.node_id in self._index:
                raise ValidationError(f"Node {current.node_id} already exists.")
            for child in current.children:
                if child.parent_id != current.node_id:
                    raise ValidationError(
                        f"Node {child.node_id} must reference parent {current.node_id}."
                    )
            self._index[current.node_id] = current

    def _next_id(self) -> str:
        """Generate an identifier not yet present in the forest."""

        while True:
            self._sequence += 1
            candidate = f"{self.id_prefix}_{self._sequence:04d}"
            if candidate not in self._index:
                return candidate

    def _siblings_of(self, node: TreeNode[P]) -> List[TreeNode[P]]:
        if node.parent_id is None:
            return self._roots
        return self._index[node.parent_id].children

    # Reads --------------------------------------------------------------

    @property
    def roots(self) -> Tuple[TreeNode[P], ...]:
        """Top-level nodes in insertion order."""

        return tuple(self._roots)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def find(self, node_id: Optional[str]) -> Optional[TreeNode[P]]:
        """Return the node or ``None`` when the identifier is unknown."""

        if node_id is None:
            return None
        return self._index.get(node_id)

    def get(self, node_id: str) -> TreeNode[P]:
        """Return the node, raising ``NodeNotFoundError`` when unknown.

        The node is the live one held by the store; treat it as read-only.
        """

        node = self.find(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def has_children(self, node_id: str) -> bool:
        """Whether deleting the node would also remove descendants."""

        return bool(self.get(node_id).children)

    def walk(self) -> Iterator[Tuple[TreeNode[P], int]]:
        """Yield ``(node, depth)`` pairs depth-first, children in order."""

        return _walk(self._roots)

    def ancestors(self, node_id: str) -> List[TreeNode[P]]:
        """Nodes from the root down to and including ``node_id``."""

        chain: List[TreeNode[P]] = []
        node: Optional[TreeNode[P]] = self.get(node_id)
        while node is not None:
            chain.append(node)
            node = self._index.get(node.parent_id) if node.parent_id else None
        chain.reverse()
        return chain

    def path_to(self, node_id: Optional[str]) -> str:
        """Names from root to node joined by the separator; ``""`` if unresolved."""

        if node_id is None or node_id not in self._index:
            return ""
        return self.separator.join(node.name for node in self.ancestors(node_id))

    def list_selectable(self) -> List[SelectableOption]:
        """Selectable nodes labelled with their full path, sorted by that path."""

        options: List[SelectableOption] = []
        path_parts: List[str] = []
        for node, depth in self.walk():
            del path_parts[depth:]
            path_parts.append(node.name)
            if self.is_selectable(node.payload):
                options.append(
                    SelectableOption(
                        node_id=node.node_id,
                        full_path=self.separator.join(path_parts),
                        unit=self.unit_for(node.payload),
                    )
                )
        return sorted(options, key=lambda option: option.full_path)

    def as_dict(self) -> List[Dict[str, Any]]:
        """Nested snapshot of the forest for JSON responses."""

        return [root.as_dict(self.describe) for root in self._roots]

    # Mutations ----------------------------------------------------------

    def insert(self, name: str, payload: P, parent_id: Optional[str] = None) -> TreeNode[P]:
        """Create a node under ``parent_id`` (or at the root when ``None``)."""

        clean_name = require_name(name)
        siblings = self._roots if parent_id is None else self.get(parent_id).children
        node = TreeNode(
            node_id=self._next_id(),
            name=clean_name,
            parent_id=parent_id,
            payload=payload,
        )
        siblings.append(node)
        self._index[node.node_id] = node
        self.revision += 1
        LOGGER.info(
            "Inserted %s node %s (%s) under %s",
            self.id_prefix,
            node.node_id,
            clean_name,
            parent_id or "<root>",
        )
        return node

    def update(self, node_id: str, name: str, payload: P) -> TreeNode[P]:
        """Replace name and payload in place; structure is left untouched."""

        clean_name = require_name(name)
        node = self.get(node_id)
        node.name = clean_name
        node.payload = payload
        self.revision += 1
        LOGGER.info("Updated %s node %s -> %s", self.id_prefix, node_id, clean_name)
        return node

    def delete(self, node_id: str) -> List[str]:
        """Remove a node and its subtree, returning the removed identifiers."""

        node = self.get(node_id)
        self._siblings_of(node).remove(node)
        removed = [current.node_id for current, _depth in _walk([node])]
        for identifier in removed:
            del self._index[identifier]
        self.revision += 1
        LOGGER.info(
            "Deleted %s node %s with %s descendants",
            self.id_prefix,
            node_id,
            len(removed) - 1,
        )
        return removed


def _walk(nodes: Iterable[TreeNode[P]], depth: int = 0) -> Iterator[Tuple[TreeNode[P], int]]:
    for node in nodes:
        yield node, depth
        yield from _walk(node.children, depth + 1)
