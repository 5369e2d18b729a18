"""
Java tree loader plugin.

This plugin parses Java source with tree-sitter-java and converts the
concrete syntax tree into patchable ``Node`` trees, assigning each child
the role it holds in its parent according to ``config.yaml``.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Set

import tree_sitter
import tree_sitter_java

from plugins.base import LoaderConfig, TreeLoaderPlugin
from treepatch.models.node import Node, RoleKind

logger = logging.getLogger(__name__)

KEYWORD_TAG = "keyword"
KEYWORD_ROLE = "modifier"
OPERATOR_TAG = "operator"
PREFIX_OPERATOR_ROLE = "prefix_operator"
POSTFIX_OPERATOR_ROLE = "postfix_operator"


class JavaPlugin(TreeLoaderPlugin):
    """Java tree loader using tree-sitter."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize the Java plugin.

        Args:
            config_path: Path to config.yaml file. If None, uses default location.
        """
        if config_path is None:
            config_path = Path(__file__).parent / "config.yaml"

        self._config = LoaderConfig.from_yaml(config_path)

        self._containers: Dict[str, str] = dict(self._config.containers)
        self._executables: Set[str] = set(self._config.executables)
        self._flattened: Dict[str, str] = dict(self._config.flattened)
        self._multi_valued_roles: Set[str] = set(self._config.multi_valued_roles)
        self._keyword_parents: Set[str] = set(self._config.keyword_parents)
        self._operator_parents: Set[str] = set(self._config.operator_parents)
        self._ignored_types: Set[str] = set(self._config.ignored_types)

        java_language = tree_sitter.Language(tree_sitter_java.language())
        self._parser = tree_sitter.Parser(java_language)

        logger.info("Java plugin initialized successfully")

    @property
    def language_name(self) -> str:
        return "java"

    @property
    def file_extensions(self) -> List[str]:
        return list(self._config.file_extensions)

    def parse_file(self, file_path: str, content: str, origin: Optional[str] = None) -> Node:
        """
        Parse a Java file into a ``Node`` tree.

        Comments are dropped; everything else keeps its structure.

        Raises:
            ValueError: If the source contains syntax errors
        """
        source = bytes(content, "utf8")
        tree = self._parser.parse(source)

        if tree.root_node.has_error:
            line = self._first_error_line(tree.root_node)
            logger.error(f"Syntax error in Java file {file_path} near line {line}")
            raise ValueError(f"Failed to parse Java file {file_path}: syntax error near line {line}")

        root = self._convert(tree.root_node, source, origin if origin is not None else file_path)
        logger.debug(f"Successfully parsed Java file: {file_path}")
        return root

    def _convert(self, ts_node: tree_sitter.Node, source: bytes, origin: str) -> Node:
        """Convert a named tree-sitter node and its subtree."""
        node = Node(ts_node.type, origin=origin, line=ts_node.start_point[0] + 1)

        container_role = self._containers.get(ts_node.type)
        if container_role:
            node.declare(container_role)
        if ts_node.type in self._executables:
            node.declare(RoleKind.THROWN.value)

        cursor = ts_node.walk()
        if cursor.goto_first_child():
            while True:
                self._attach(node, cursor.node, cursor.field_name, container_role, source, origin)
                if not cursor.goto_next_sibling():
                    break

        if node.is_leaf and not node.container_roles():
            node.value = self._text(ts_node, source)

        return node

    def _attach(
        self,
        node: Node,
        child: tree_sitter.Node,
        field: Optional[str],
        container_role: Optional[str],
        source: bytes,
        origin: str,
    ) -> None:
        if child.type in self._ignored_types:
            return

        if not child.is_named:
            if field:
                self._place_in_slot(node, field, self._leaf(child, child.type, source, origin))
            elif node.tag in self._keyword_parents:
                self._place_in_slot(node, KEYWORD_ROLE, self._leaf(child, KEYWORD_TAG, source, origin))
            elif node.tag in self._operator_parents:
                # A token seen before any operand is a prefix operator
                role = PREFIX_OPERATOR_ROLE if node.is_leaf else POSTFIX_OPERATOR_ROLE
                self._place_in_slot(node, role, self._leaf(child, OPERATOR_TAG, source, origin))
            return

        flattened_role = self._flattened.get(child.type)
        if flattened_role and not field:
            if not node.owns(flattened_role):
                node.declare(flattened_role)
            for grandchild in child.named_children:
                if grandchild.type not in self._ignored_types:
                    node.append_child(flattened_role, self._convert(grandchild, source, origin))
            return

        converted = self._convert(child, source, origin)
        if field:
            self._place_in_slot(node, field, converted)
        elif container_role:
            node.append_child(container_role, converted)
        else:
            self._place_in_slot(node, child.type, converted)

    def _place_in_slot(self, node: Node, role: str, child: Node) -> None:
        if role in self._multi_valued_roles and not node.is_multi_slot(role):
            node.declare_multi_slot(role)
        elif node.slot(role) is not None and not node.is_multi_slot(role):
            logger.debug(f"Promoting slot '{role}' of {node.tag} to multi-valued")
        node.add_to_slot(role, child)

    def _leaf(self, ts_node: tree_sitter.Node, tag: str, source: bytes, origin: str) -> Node:
        return Node(tag, self._text(ts_node, source), origin=origin, line=ts_node.start_point[0] + 1)

    @staticmethod
    def _text(ts_node: tree_sitter.Node, source: bytes) -> str:
        return source[ts_node.start_byte:ts_node.end_byte].decode("utf8")

    def _first_error_line(self, ts_node: tree_sitter.Node) -> int:
        if ts_node.type == "ERROR" or ts_node.is_missing:
            return ts_node.start_point[0] + 1
        for child in ts_node.children:
            if child.has_error:
                return self._first_error_line(child)
        return ts_node.start_point[0] + 1
