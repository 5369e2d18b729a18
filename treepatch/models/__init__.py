"""Data models for tree patching."""

from .error import ErrorRecord
from .node import CONTAINER_KINDS, ORDERED_KINDS, Node, RoleKind, role_kind
from .patch import DeletePatch, InsertPatch, PatchSet, UpdatePatch

__all__ = [
    # Tree models
    "Node",
    "RoleKind",
    "ORDERED_KINDS",
    "CONTAINER_KINDS",
    "role_kind",
    # Patch models
    "DeletePatch",
    "UpdatePatch",
    "InsertPatch",
    "PatchSet",
    # Error models
    "ErrorRecord",
]
