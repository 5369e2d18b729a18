"""
Update applier.

Substitutes a node for another in the exact slot the old node occupies.
The replacement is not copied. A replacement taken from the new revision
tree is re-parented into the patched tree while the new revision keeps
listing it, so that tree still reads as it was parsed when later
insertions copy from it.
"""

import logging

from treepatch.errors import DetachedNodeError
from treepatch.models.node import Node
from treepatch.models.patch import UpdatePatch

logger = logging.getLogger(__name__)


class UpdateApplier:
    """Applies update patches."""

    def update(self, old_node: Node, new_node: Node) -> None:
        """
        Put ``new_node`` where ``old_node`` is.

        The slot is located by identity, so position in ordered
        containers and the role tag of attribute slots are preserved.

        Raises:
            DetachedNodeError: If ``old_node`` has no parent
        """
        parent = old_node.parent
        if parent is None:
            raise DetachedNodeError(old_node, "update")

        source = new_node.parent
        if source is not None and source.root() is parent.root():
            # Moving within the patched tree; a node has one position
            new_node.detach()
        elif source is not None:
            logger.debug(
                f"Taking ownership of {new_node.tag}#{new_node.handle} "
                f"from {source.tag}#{source.handle}",
                extra={"patch_kind": "update"}
            )

        role, index = parent.locate(old_node)
        parent.replace_child(old_node, new_node)
        logger.debug(
            f"Updated '{role}'[{index}] of {parent.tag}#{parent.handle}: "
            f"{old_node.tag}#{old_node.handle} -> {new_node.tag}#{new_node.handle}",
            extra={"patch_kind": "update"}
        )

    def apply(self, patch: UpdatePatch) -> None:
        self.update(patch.old_node, patch.new_node)
