"""
Unit tests for the deletion applier.
"""

import pytest

from treepatch.errors import DetachedNodeError
from treepatch.models.patch import DeletePatch
from treepatch.services.deletion import DeletionApplier


@pytest.fixture
def applier():
    return DeletionApplier()


def test_delete_statement_preserves_order(applier, trees, block_calls):
    """Test deleting a statement keeps the remaining statements in order."""
    block = trees.block(["open", "read", "close"])
    read = block.children_in("statement")[1]

    applier.delete(read)

    assert block_calls(block) == ["open", "close"]
    assert read.parent is None


def test_delete_from_slot(applier, trees):
    """Test deleting a slot occupant empties the slot."""
    method = trees.method("run")
    body = method.slot("body")

    applier.delete(body)

    assert method.slot("body") is None
    assert "body" not in method.slot_roles()


def test_delete_thrown_type(applier, trees):
    """Test deleting one declared exception leaves the others."""
    method = trees.method("run", thrown=["IOException", "TimeoutException"])
    io_error = method.children_in("thrown")[0]

    applier.delete(io_error)

    assert [t.value for t in method.children_in("thrown")] == ["TimeoutException"]


def test_redelete_raises_detached_node_error(applier, trees):
    """Test deleting the same node twice is an error, not a no-op."""
    block = trees.block(["open"])
    statement = block.children_in("statement")[0]
    applier.delete(statement)

    with pytest.raises(DetachedNodeError) as exc_info:
        applier.delete(statement)

    assert exc_info.value.node is statement


def test_delete_root_raises(applier, trees):
    """Test a node that was never attached cannot be deleted."""
    with pytest.raises(DetachedNodeError):
        applier.delete(trees.program("Greeter"))


def test_apply_delete_patch(applier, trees, block_calls):
    """Test applying a delete patch descriptor."""
    block = trees.block(["open", "close"])

    applier.apply(DeletePatch(node=block.children_in("statement")[0]))

    assert block_calls(block) == ["close"]
