from __future__ import annotations

import pytest
from conftest import loc

from xplat_bans.matching.suppression import ScopeStack, SuppressionIndex
from xplat_bans.nodes import Scope, VariableNode


def test_marker_forms_are_recognized() -> None:
    index = SuppressionIndex()

    assert index.is_marker("XplatBanSuppression")
    assert index.is_marker("@XplatBanSuppression")
    assert index.is_marker("@XplatBanSuppression()")
    assert index.is_marker("com.google.errorprone.xplat.checker.XplatBanSuppression")
    assert not index.is_marker("SuppressWarnings")
    assert not index.is_marker("com.example.XplatBanSuppression")


def test_custom_markers() -> None:
    index = SuppressionIndex(markers=["com.example.AllowBanned"])

    assert index.is_marker("AllowBanned")
    assert index.is_marker("com.example.AllowBanned")
    assert not index.is_marker("XplatBanSuppression")


def test_node_without_scope_is_not_suppressed() -> None:
    node = VariableNode(location=loc(), name="x", declared_type="a.B")
    assert not SuppressionIndex().is_suppressed(node)


def test_marker_on_outer_scope_covers_nested_nodes() -> None:
    stack = ScopeStack()

    with stack.push("class", "Outer"):
        with stack.push("method", "m", ["XplatBanSuppression"]):
            with stack.push("local", "x"):
                inner = VariableNode(location=loc(), name="x", scope=stack.current)
                assert stack.depth == 3
        sibling = VariableNode(location=loc(), name="y", scope=stack.current)

    index = stack.index
    assert index.is_suppressed(inner)
    assert not index.is_suppressed(sibling)
    assert stack.current is None


def test_marker_on_the_declaration_itself() -> None:
    scope = Scope(kind="field", name="chrono", suppressed=True,
                  parent=Scope(kind="class", name="Illegal"))
    node = VariableNode(location=loc(), name="chrono", declared_type="org.joda.time.Chronology",
                        scope=scope)

    assert SuppressionIndex().is_suppressed(node)
    assert scope.path == "Illegal.chrono"


def test_scope_is_popped_when_the_block_raises() -> None:
    stack = ScopeStack()
    with pytest.raises(ValueError):
        with stack.push("class", "A"):
            raise ValueError("boom")
    assert stack.current is None
    assert stack.depth == 0
