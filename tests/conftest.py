"""
Shared fixtures: a small factory for hand-built Java-shaped trees and the
provenance oracle used to check where patched nodes came from.
"""

from pathlib import Path
from typing import Iterable, List, Sequence

import pytest

from treepatch.models.node import Node

RESOURCES_DIR = Path(__file__).parent / "resources"

PREV = "PREV.java"
NEW = "NEW.java"


class TreeFactory:
    """Builds small trees shaped like the ones the Java loader produces."""

    def leaf(self, tag: str, value: str, origin: str = PREV) -> Node:
        return Node(tag, value, origin=origin)

    def statement(self, call: str, origin: str = PREV) -> Node:
        statement = Node("expression_statement", origin=origin)
        statement.set_slot("method_invocation", self.invocation(call, [], origin))
        return statement

    def invocation(self, name: str, args: Sequence[str], origin: str = PREV) -> Node:
        invocation = Node("method_invocation", origin=origin)
        invocation.set_slot("name", self.leaf("identifier", name, origin))
        arguments = Node("argument_list", origin=origin).declare("argument")
        for arg in args:
            arguments.append_child("argument", self.leaf("identifier", arg, origin))
        invocation.set_slot("arguments", arguments)
        return invocation

    def block(self, calls: Iterable[str], origin: str = PREV) -> Node:
        block = Node("block", origin=origin).declare("statement")
        for call in calls:
            block.append_child("statement", self.statement(call, origin))
        return block

    def method(
        self,
        name: str,
        calls: Iterable[str] = (),
        params: Iterable[str] = (),
        thrown: Iterable[str] = (),
        origin: str = PREV,
    ) -> Node:
        method = Node("method_declaration", origin=origin).declare("thrown")
        method.set_slot("type", self.leaf("void_type", "void", origin))
        method.set_slot("name", self.leaf("identifier", name, origin))
        parameters = Node("formal_parameters", origin=origin).declare("parameter")
        for param in params:
            parameter = Node("formal_parameter", origin=origin)
            parameter.set_slot("type", self.leaf("type_identifier", "String", origin))
            parameter.set_slot("name", self.leaf("identifier", param, origin))
            parameters.append_child("parameter", parameter)
        method.set_slot("parameters", parameters)
        for exception in thrown:
            method.append_child("thrown", self.leaf("type_identifier", exception, origin))
        method.set_slot("body", self.block(calls, origin))
        return method

    def program(self, class_name: str, members: Iterable[Node] = (), origin: str = PREV) -> Node:
        program = Node("program", origin=origin).declare("type_member")
        declaration = Node("class_declaration", origin=origin)
        declaration.set_slot("name", self.leaf("identifier", class_name, origin))
        type_parameters = Node("type_parameters", origin=origin).declare("type_parameter")
        declaration.set_slot("type_parameters", type_parameters)
        body = Node("class_body", origin=origin).declare("type_member")
        for member in members:
            body.append_child("type_member", member)
        declaration.set_slot("body", body)
        program.append_child("type_member", declaration)
        return program


def calls_of(block: Node) -> List[str]:
    """Names of the invocations in a block built by ``TreeFactory.block``."""
    return [
        statement.slot("method_invocation").slot("name").value
        for statement in block.children_in("statement")
    ]


def check_provenance(
    root: Node,
    new_revisions: Sequence[Node],
    prev_origin: str = PREV,
    new_origin: str = NEW,
) -> None:
    """
    Assert where every node of a patched tree originates.

    Nodes listed in ``new_revisions`` must come from the new revision and
    their descendants are not inspected. A thrown type shares the origin of
    its set: if any sibling thrown type is new, all must be. Every other
    node must come from the previous revision.
    """
    for node in root.walk():
        if any(node.has_ancestor(marked) for marked in new_revisions):
            continue
        if any(node is marked for marked in new_revisions) or _in_new_thrown_set(node, new_origin):
            assert node.origin == new_origin, f"{node!r} should originate from the new revision"
        else:
            assert node.origin == prev_origin, f"{node!r} should originate from the previous revision"


def _in_new_thrown_set(node: Node, new_origin: str) -> bool:
    if node.role != "thrown" or node.parent is None:
        return False
    return any(thrown.origin == new_origin for thrown in node.parent.children_in("thrown"))


@pytest.fixture
def trees() -> TreeFactory:
    return TreeFactory()


@pytest.fixture
def provenance():
    return check_provenance


@pytest.fixture
def block_calls():
    return calls_of
