"""Patch application services."""

from treepatch.services.deletion import DeletionApplier
from treepatch.services.insertion import InsertionApplier
from treepatch.services.patch_application import PatchApplicationDriver, order_insertions
from treepatch.services.update import UpdateApplier

__all__ = [
    "DeletionApplier",
    "UpdateApplier",
    "InsertionApplier",
    "PatchApplicationDriver",
    "order_insertions",
]
