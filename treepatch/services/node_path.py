"""
Node paths.

A path addresses a node from the root of its tree, one segment per
level: ``/type_member[0]/body/statement[2]``. A segment is a role tag
optionally followed by an index; a bare role means index 0. ``/`` is the
root itself.
"""

import re
from typing import List, Tuple

from treepatch.errors import NodePathError
from treepatch.models.node import Node, RoleKind, role_kind

_SEGMENT = re.compile(r"^(?P<role>[A-Za-z_][A-Za-z0-9_]*)(?:\[(?P<index>\d+)\])?$")


def parse_path(path: str) -> List[Tuple[str, int]]:
    """
    Split a path into ``(role, index)`` segments.

    Raises:
        NodePathError: If the path is malformed
    """
    path = path.strip()
    if not path.startswith("/"):
        raise NodePathError(f"Node path must start with '/': {path!r}")
    if path == "/":
        return []

    segments = []
    for raw in path[1:].split("/"):
        match = _SEGMENT.match(raw)
        if match is None:
            raise NodePathError(f"Malformed segment {raw!r} in node path {path!r}")
        segments.append((match.group("role"), int(match.group("index") or 0)))
    return segments


def resolve_path(root: Node, path: str) -> Node:
    """
    Evaluate ``path`` starting at ``root``.

    Raises:
        NodePathError: If the path is malformed or a segment does not resolve
    """
    node = root
    for depth, (role, index) in enumerate(parse_path(path), start=1):
        children = node.children_in(role)
        if index >= len(children):
            raise NodePathError(
                f"Segment {depth} of {path!r}: {node.tag} has {len(children)} "
                f"child(ren) in role '{role}', index {index} requested"
            )
        node = children[index]
    return node


def format_path(node: Node) -> str:
    """Canonical path of ``node`` from the root of its tree."""
    segments = []
    while node.parent is not None:
        parent = node.parent
        role, index = parent.locate(node)
        if role_kind(role) is RoleKind.OTHER and not parent.is_multi_slot(role):
            segments.append(role)
        else:
            segments.append(f"{role}[{index}]")
        node = parent
    return "/" + "/".join(reversed(segments))
