"""
Exceptions raised while applying patches to a syntax tree.

Every error aborts the whole patch application; nothing here is retried
and the tree is left in whatever state it reached.
"""

from typing import Optional


class PatchApplicationError(Exception):
    """Base class for failures of a single patch."""

    def __init__(self, message: str, node=None):
        super().__init__(message)
        self.node = node


class DetachedNodeError(PatchApplicationError):
    """Raised when a patch operates on a node that has no parent."""

    def __init__(self, node, action: str = "operate on"):
        super().__init__(f"Cannot {action} detached node {_describe(node)}", node)
        self.action = action


class InvalidPositionError(PatchApplicationError):
    """Raised when an insertion index is outside ``[0, len]``."""

    def __init__(self, node, position: int, role: str, size: int):
        super().__init__(
            f"Position {position} is out of range for '{role}' container of "
            f"size {size} (inserting {_describe(node)})",
            node,
        )
        self.position = position
        self.role = role
        self.size = size


class StructuralMismatchError(PatchApplicationError):
    """Raised when the target parent has no container of the kind the role needs."""

    def __init__(self, node, target, role: str):
        super().__init__(
            f"{_describe(target)} has no '{role}' container for {_describe(node)}",
            node,
        )
        self.target = target
        self.role = role


class UnsupportedRoleError(PatchApplicationError):
    """Raised when no insertion handler exists for a node's role."""

    def __init__(self, node, role: Optional[str]):
        super().__init__(f"No insertion handler for role {role!r} of {_describe(node)}", node)
        self.role = role


class NodePathError(ValueError):
    """Raised when a node path is malformed or does not resolve."""
    pass


class PatchScriptError(ValueError):
    """Raised when a patch script cannot be loaded or resolved."""
    pass


def _describe(node) -> str:
    if node is None:
        return "<none>"
    return f"{node.tag}#{node.handle}"
