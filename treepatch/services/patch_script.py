"""
Patch scripts.

A patch script is a YAML document naming the nodes each patch touches by
path, for example::

    delete:
      - /type_member[0]/body/type_member[1]
    update:
      - old: /type_member[0]/name
        new: /type_member[0]/name
    insert:
      - position: 1
        node: /type_member[0]/body/type_member[0]/body/statement[1]
        parent: /type_member[0]/body/type_member[0]/body

Delete paths and update ``old`` / insert ``parent`` paths refer to the
previous revision; update ``new`` and insert ``node`` paths refer to the
new revision. All paths are resolved before any patch is applied.
"""

import logging
from pathlib import Path
from typing import List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from treepatch.errors import NodePathError, PatchScriptError
from treepatch.models.node import Node
from treepatch.models.patch import DeletePatch, InsertPatch, PatchSet, UpdatePatch
from treepatch.services.node_path import resolve_path

logger = logging.getLogger(__name__)


class UpdateEntry(BaseModel):
    """An update as written in a patch script."""

    model_config = ConfigDict(extra="forbid")

    old: str = Field(..., description="Path of the replaced node in the previous revision")
    new: str = Field(..., description="Path of the replacement node in the new revision")


class InsertEntry(BaseModel):
    """An insertion as written in a patch script."""

    model_config = ConfigDict(extra="forbid")

    position: int = Field(0, description="Index in the target container")
    node: str = Field(..., description="Path of the inserted node in the new revision")
    parent: str = Field(..., description="Path of the target parent in the previous revision")


class PatchScript(BaseModel):
    """Path-addressed patch collections for one revision pair."""

    model_config = ConfigDict(extra="forbid")

    delete: List[str] = Field(default_factory=list)
    update: List[UpdateEntry] = Field(default_factory=list)
    insert: List[InsertEntry] = Field(default_factory=list)

    def resolve(self, prev_root: Node, new_root: Node) -> PatchSet:
        """
        Turn paths into nodes of the two revision trees.

        Raises:
            PatchScriptError: If any path does not resolve
        """
        deletes = [
            DeletePatch(node=_resolve(prev_root, path, f"delete[{i}]"))
            for i, path in enumerate(self.delete)
        ]
        updates = [
            UpdatePatch(
                old_node=_resolve(prev_root, entry.old, f"update[{i}].old"),
                new_node=_resolve(new_root, entry.new, f"update[{i}].new"),
            )
            for i, entry in enumerate(self.update)
        ]
        inserts = [
            InsertPatch(
                position=entry.position,
                node=_resolve(new_root, entry.node, f"insert[{i}].node"),
                target_parent=_resolve(prev_root, entry.parent, f"insert[{i}].parent"),
            )
            for i, entry in enumerate(self.insert)
        ]
        logger.debug(
            f"Resolved patch script: {len(deletes)} delete(s), "
            f"{len(updates)} update(s), {len(inserts)} insert(s)"
        )
        return PatchSet(deletes=deletes, updates=updates, inserts=inserts)


def parse_patch_script(text: str) -> PatchScript:
    """
    Parse a patch script from YAML text.

    Raises:
        PatchScriptError: If the YAML is malformed or does not match the schema
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise PatchScriptError(f"Malformed patch script: {e}") from e

    if data is None:
        return PatchScript()
    if not isinstance(data, dict):
        raise PatchScriptError("Patch script must be a mapping at the top level")

    try:
        return PatchScript.model_validate(data)
    except ValidationError as e:
        raise PatchScriptError(f"Invalid patch script: {e}") from e


def load_patch_script(path: Union[str, Path]) -> PatchScript:
    """Load a patch script from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Patch script not found: {path}")
    return parse_patch_script(path.read_text(encoding="utf-8"))


def _resolve(root: Node, path: str, where: str) -> Node:
    try:
        return resolve_path(root, path)
    except NodePathError as e:
        raise PatchScriptError(f"{where}: {e}") from e
