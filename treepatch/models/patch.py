"""Patch descriptor models."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from treepatch.models.node import Node


class DeletePatch(BaseModel):
    """Remove a node from its parent."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    node: Node = Field(..., description="Node of the previous revision to delete")


class UpdatePatch(BaseModel):
    """Substitute one node for another in the same slot."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    old_node: Node = Field(..., description="Node of the previous revision being replaced")
    new_node: Node = Field(..., description="Replacement node, usually from the new revision")


class InsertPatch(BaseModel):
    """Insert a node of the new revision under a parent of the previous one."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    position: int = Field(..., description="Index in the target container (ignored for slot and thrown roles)")
    node: Node = Field(..., description="Node of the new revision to insert")
    target_parent: Node = Field(..., description="Node of the previous revision receiving the insertion")


class PatchSet(BaseModel):
    """The three patch collections produced for one revision pair."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    deletes: List[DeletePatch] = Field(default_factory=list)
    updates: List[UpdatePatch] = Field(default_factory=list)
    inserts: List[InsertPatch] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.deletes) + len(self.updates) + len(self.inserts)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0
