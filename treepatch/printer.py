"""
Canonical text rendering of syntax trees.

Two trees are considered equivalent when their renders are equal. The
render is independent of the order in which slots were filled, and the
thrown collection is rendered sorted because it has no order of its own.
"""

import json
from typing import List, Optional

from treepatch.models.node import CONTAINER_KINDS, Node, RoleKind
from treepatch.services.node_path import format_path

INDENT = "  "


def render(node: Node) -> str:
    """Render ``node`` and its subtree as indented text."""
    return "\n".join(_render_lines(node, label=None, depth=0))


def render_paths(root: Node) -> str:
    """List every node of ``root`` with its canonical path, tag and value."""
    lines = []
    for node in root.walk():
        line = f"{format_path(node)}  {node.tag}"
        if node.value is not None:
            line += f" {_quote(node.value)}"
        lines.append(line)
    return "\n".join(lines)


def _render_lines(node: Node, label: Optional[str], depth: int) -> List[str]:
    head = node.tag if label is None else f"{label}: {node.tag}"
    if node.value is not None:
        head += f" {_quote(node.value)}"
    lines = [INDENT * depth + head]

    for role in sorted(node.slot_roles()):
        multi = node.is_multi_slot(role)
        for index, child in enumerate(node.children_in(role)):
            child_label = f"{role}[{index}]" if multi else role
            lines.extend(_render_lines(child, child_label, depth + 1))

    for kind in CONTAINER_KINDS:
        if not node.owns(kind.value):
            continue
        children = node.children_in(kind.value)
        if kind is RoleKind.THROWN:
            rendered = sorted(
                _render_lines(child, kind.value, depth + 1) for child in children
            )
            for child_lines in rendered:
                lines.extend(child_lines)
            continue
        for index, child in enumerate(children):
            lines.extend(_render_lines(child, f"{kind.value}[{index}]", depth + 1))

    return lines


def _quote(value: str) -> str:
    return json.dumps(value)
