"""
Deletion applier.

Detaches nodes from their parent container. Deleting is not idempotent:
a node that has already been removed has no parent and is rejected.
"""

import logging

from treepatch.errors import DetachedNodeError
from treepatch.models.node import Node
from treepatch.models.patch import DeletePatch

logger = logging.getLogger(__name__)


class DeletionApplier:
    """Applies delete patches."""

    def delete(self, node: Node) -> None:
        """
        Remove ``node`` from its parent.

        Remaining siblings keep their relative order and ``node`` ends up
        without a parent.

        Raises:
            DetachedNodeError: If ``node`` has no parent
        """
        parent = node.parent
        if parent is None:
            raise DetachedNodeError(node, "delete")

        role = node.role
        parent.remove_child(node)
        logger.debug(
            f"Deleted {node.tag}#{node.handle} from '{role}' of {parent.tag}#{parent.handle}",
            extra={"patch_kind": "delete"}
        )

    def apply(self, patch: DeletePatch) -> None:
        self.delete(patch.node)
