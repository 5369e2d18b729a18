"""
Insertion applier.

Inserts a node of the new revision under a parent of the previous
revision. What "insert" means depends on the role the node holds in its
own parent:

- statement, argument, type member, type parameter and parameter roles
  go into the matching ordered container at the given position, as a
  deep copy;
- the thrown role replaces the target's whole declared-exception set
  with a copy of the set owning the source node;
- every other role is written into the attribute slot named by the role,
  replacing whatever the slot held. The node itself is attached, and the
  new revision tree keeps listing it.
"""

import logging
from typing import Callable, Dict, Optional

from treepatch.errors import (
    DetachedNodeError,
    InvalidPositionError,
    StructuralMismatchError,
    UnsupportedRoleError,
)
from treepatch.models.node import Node, RoleKind, role_kind
from treepatch.models.patch import InsertPatch

logger = logging.getLogger(__name__)

InsertHandler = Callable[[int, Node, Node], Node]


class InsertionApplier:
    """Applies insert patches by dispatching on the inserted node's role kind."""

    def __init__(self):
        self._handlers: Dict[RoleKind, InsertHandler] = {
            RoleKind.STATEMENT: self._insert_ordered,
            RoleKind.ARGUMENT: self._insert_ordered,
            RoleKind.TYPE_MEMBER: self._insert_ordered,
            RoleKind.TYPE_PARAMETER: self._insert_ordered,
            RoleKind.PARAMETER: self._insert_ordered,
            RoleKind.THROWN: self._replace_thrown,
            RoleKind.OTHER: self._assign_slot,
        }

    @property
    def handled_kinds(self) -> frozenset:
        return frozenset(self._handlers)

    def insert(self, position: int, node: Node, target_parent: Node) -> Node:
        """
        Insert ``node`` into ``target_parent``.

        Args:
            position: Index in the target container; ignored for the thrown
                role and for attribute slots
            node: Node to insert, still attached to its source tree
            target_parent: Node receiving the insertion

        Returns:
            The node now attached to ``target_parent`` (a copy for ordered
            containers, ``node`` itself for attribute slots). For the thrown
            role, the first copied exception type, or ``target_parent`` when
            the set is empty.

        Raises:
            UnsupportedRoleError: If the node's role has no handler
            StructuralMismatchError: If the target lacks the container the role needs
            InvalidPositionError: If ``position`` is outside ``[0, len]``
            DetachedNodeError: If a thrown-role node has no owning executable
        """
        kind = role_kind(node.role)
        handler: Optional[InsertHandler] = self._handlers.get(kind) if kind is not None else None
        if handler is None:
            raise UnsupportedRoleError(node, node.role)
        return handler(position, node, target_parent)

    def apply(self, patch: InsertPatch) -> Node:
        return self.insert(patch.position, patch.node, patch.target_parent)

    def _insert_ordered(self, position: int, node: Node, target_parent: Node) -> Node:
        role = node.role
        if not target_parent.owns(role):
            raise StructuralMismatchError(node, target_parent, role)

        size = len(target_parent.children_in(role))
        if not 0 <= position <= size:
            raise InvalidPositionError(node, position, role, size)

        # The source tree still references node; attach a private copy.
        copy = node.clone()
        target_parent.insert_child(role, position, copy)
        logger.debug(
            f"Inserted copy {copy.tag}#{copy.handle} of #{node.handle} at "
            f"'{role}'[{position}] of {target_parent.tag}#{target_parent.handle}",
            extra={"patch_kind": "insert"}
        )
        return copy

    def _replace_thrown(self, position: int, node: Node, target_parent: Node) -> Node:
        role = RoleKind.THROWN.value
        if not target_parent.owns(role):
            raise StructuralMismatchError(node, target_parent, role)

        source = node.parent
        if source is None:
            raise DetachedNodeError(node, "find the declaring executable of")

        copies = [thrown.clone() for thrown in source.children_in(role)]
        target_parent.set_thrown(copies)
        logger.debug(
            f"Replaced thrown set of {target_parent.tag}#{target_parent.handle} "
            f"with {len(copies)} type(s) from {source.tag}#{source.handle}",
            extra={"patch_kind": "insert"}
        )
        return copies[0] if copies else target_parent

    def _assign_slot(self, position: int, node: Node, target_parent: Node) -> Node:
        role = node.role
        source = node.parent
        if source is not None and source.root() is target_parent.root():
            node.detach()

        # Multi-valued slots are overwritten too; they stay multi-valued.
        target_parent.set_slot(role, node)
        logger.debug(
            f"Assigned {node.tag}#{node.handle} to slot '{role}' of "
            f"{target_parent.tag}#{target_parent.handle}",
            extra={"patch_kind": "insert"}
        )
        return node
