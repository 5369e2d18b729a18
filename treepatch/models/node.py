"""Syntax tree node model."""

import itertools
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Tuple

from treepatch.errors import DetachedNodeError


class RoleKind(str, Enum):
    """Structural context a node can occupy in its parent."""

    STATEMENT = "statement"
    ARGUMENT = "argument"
    TYPE_MEMBER = "type_member"
    TYPE_PARAMETER = "type_parameter"
    PARAMETER = "parameter"
    THROWN = "thrown"
    OTHER = "other"


ORDERED_KINDS = (
    RoleKind.STATEMENT,
    RoleKind.ARGUMENT,
    RoleKind.TYPE_MEMBER,
    RoleKind.TYPE_PARAMETER,
    RoleKind.PARAMETER,
)

CONTAINER_KINDS = ORDERED_KINDS + (RoleKind.THROWN,)

_CONTAINER_ROLES = {kind.value: kind for kind in CONTAINER_KINDS}

_handles = itertools.count(1)


def role_kind(role: Optional[str]) -> Optional[RoleKind]:
    """
    Classify a role tag.

    Container role tags map to their own kind, any other tag is an
    attribute slot (``OTHER``). A missing role has no kind.
    """
    if role is None:
        return None
    return _CONTAINER_ROLES.get(role, RoleKind.OTHER)


class Node:
    """
    Mutable syntax tree node.

    Children live either in containers (the ordered role kinds plus the
    unordered ``thrown`` collection) or in attribute slots keyed by role
    tag. Nodes compare by identity; ``handle`` is a process-unique id used
    in diagnostics.

    A node handed to another tree with ``replace_child`` or ``set_slot``
    points at its new parent, but the container it came from keeps
    listing it, so the tree it was taken from still renders unchanged.
    """

    def __init__(
        self,
        tag: str,
        value: Optional[str] = None,
        *,
        origin: Optional[str] = None,
        line: Optional[int] = None,
    ):
        self.tag = tag
        self.value = value
        self.origin = origin
        self.line = line
        self.handle = next(_handles)
        self.parent: Optional["Node"] = None
        self.role: Optional[str] = None
        self._containers: Dict[str, List["Node"]] = {}
        self._slots: Dict[str, List["Node"]] = {}
        self._multi_slots: Set[str] = set()

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Node({self.tag!r}, {self.value!r}, handle={self.handle})"
        return f"Node({self.tag!r}, handle={self.handle})"

    # Shape declarations

    def declare(self, role: str) -> "Node":
        """Give this node an (empty) container for a container role."""
        if role_kind(role) not in CONTAINER_KINDS:
            raise ValueError(f"'{role}' is not a container role")
        self._containers.setdefault(role, [])
        return self

    def declare_multi_slot(self, role: str) -> "Node":
        """Mark an attribute slot as multi-valued."""
        if role_kind(role) is not RoleKind.OTHER:
            raise ValueError(f"'{role}' is a container role, not a slot")
        self._multi_slots.add(role)
        self._slots.setdefault(role, [])
        return self

    def owns(self, role: str) -> bool:
        return role in self._containers

    def is_multi_slot(self, role: str) -> bool:
        return role in self._multi_slots

    @property
    def is_leaf(self) -> bool:
        return not any(self._containers.values()) and not any(self._slots.values())

    def container_roles(self) -> List[str]:
        return list(self._containers)

    def slot_roles(self) -> List[str]:
        return [role for role, values in self._slots.items() if values]

    # Access

    def children_in(self, role: str) -> List["Node"]:
        """Snapshot of the children held under ``role``."""
        if role in self._containers:
            return list(self._containers[role])
        return list(self._slots.get(role, ()))

    def slot(self, role: str) -> Optional["Node"]:
        values = self._slots.get(role)
        return values[0] if values else None

    def iter_children(self) -> Iterator[Tuple[str, int, "Node"]]:
        """Yield ``(role, index, child)`` for slots first, then containers."""
        for role, values in self._slots.items():
            for index, child in enumerate(values):
                yield role, index, child
        for role, values in self._containers.items():
            for index, child in enumerate(values):
                yield role, index, child

    def walk(self) -> Iterator["Node"]:
        """Pre-order traversal starting at this node."""
        yield self
        for _, _, child in self.iter_children():
            yield from child.walk()

    def root(self) -> "Node":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def has_ancestor(self, other: "Node") -> bool:
        parent = self.parent
        while parent is not None:
            if parent is other:
                return True
            parent = parent.parent
        return False

    def locate(self, child: "Node") -> Tuple[str, int]:
        """
        Find the exact slot of ``child`` by identity.

        Returns:
            ``(role, index)`` of the child within this node

        Raises:
            ValueError: If ``child`` is not held by this node
        """
        for role, index, candidate in self.iter_children():
            if candidate is child:
                return role, index
        raise ValueError(f"{child!r} is not a child of {self!r}")

    # Mutation

    def insert_child(self, role: str, index: int, child: "Node") -> None:
        self._containers[role].insert(index, child)
        self._adopt(child, role)

    def append_child(self, role: str, child: "Node") -> None:
        self.insert_child(role, len(self._containers[role]), child)

    def set_thrown(self, nodes: List["Node"]) -> None:
        """Replace the whole thrown collection, dropping identity duplicates."""
        unique: Dict[int, Node] = {}
        for node in nodes:
            unique.setdefault(id(node), node)
        for previous in self._containers[RoleKind.THROWN.value]:
            self._release(previous)
        self._containers[RoleKind.THROWN.value] = list(unique.values())
        for node in unique.values():
            self._adopt(node, RoleKind.THROWN.value)

    def set_slot(self, role: str, child: "Node") -> None:
        """Overwrite a slot with a single child."""
        for previous in self._slots.get(role, ()):
            self._release(previous)
        self._slots[role] = [child]
        self._adopt(child, role)

    def add_to_slot(self, role: str, child: "Node") -> None:
        """Add a child to a slot, promoting a filled single slot to multi-valued."""
        values = self._slots.setdefault(role, [])
        if values:
            self._multi_slots.add(role)
        values.append(child)
        self._adopt(child, role)

    def replace_child(self, old: "Node", new: "Node") -> None:
        role, index = self.locate(old)
        self._store(role)[index] = new
        self._release(old)
        self._adopt(new, role)

    def remove_child(self, child: "Node") -> None:
        role, index = self.locate(child)
        store = self._store(role)
        del store[index]
        if not store and role in self._slots and role not in self._multi_slots:
            del self._slots[role]
        self._release(child)

    def detach(self) -> None:
        if self.parent is None:
            raise DetachedNodeError(self, "detach")
        self.parent.remove_child(self)

    def clone(self) -> "Node":
        """
        Deep copy of this subtree.

        The copy is detached, every copied node gets a fresh handle, and
        origin/line metadata is preserved.
        """
        copy = Node(self.tag, self.value, origin=self.origin, line=self.line)
        copy._multi_slots = set(self._multi_slots)
        for role in self._containers:
            copy._containers[role] = []
        for role in self._multi_slots:
            copy._slots[role] = []
        for role, _, child in self.iter_children():
            child_copy = child.clone()
            store = copy._containers[role] if role in copy._containers else copy._slots.setdefault(role, [])
            store.append(child_copy)
            copy._adopt(child_copy, role)
        return copy

    def _store(self, role: str) -> List["Node"]:
        if role in self._containers:
            return self._containers[role]
        return self._slots[role]

    def _adopt(self, child: "Node", role: str) -> None:
        child.parent = self
        child.role = role

    @staticmethod
    def _release(child: "Node") -> None:
        child.parent = None
        child.role = None
