# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for execution planning
"""

import pytest

from agentflow.workflow.exceptions import WorkflowPlanningError
from agentflow.workflow.planner import build_execution_plan
from tests.builders import action_node, condition_node, edge, linear_workflow, trigger_node, workflow


def _assert_topological(plan, wf):
    position = {node_id: i for i, node_id in enumerate(plan.node_ids)}
    for e in wf.edges:
        if e.source in position and e.target in position:
            assert position[e.source] < position[e.target], f"{e.source} must precede {e.target}"


def test_linear_order_excludes_trigger():
    plan = build_execution_plan(linear_workflow(4))

    assert plan.start_node_id == "trigger"
    assert plan.node_ids == ["s1", "s2", "s3", "s4"]
    assert plan.steps[0].dependencies == ["trigger"]
    assert not any(step.is_conditional for step in plan.steps)


def test_no_trigger_raises():
    with pytest.raises(WorkflowPlanningError):
        build_execution_plan(workflow([action_node("a")], []))


def test_diamond_is_topologically_sorted():
    wf = workflow(
        [trigger_node(), action_node("d"), action_node("c"), action_node("b"), action_node("a")],
        [edge("trigger", "a"), edge("a", "b"), edge("a", "c"), edge("b", "d"), edge("c", "d")],
    )
    plan = build_execution_plan(wf)

    assert sorted(plan.node_ids) == ["a", "b", "c", "d"]
    _assert_topological(plan, wf)
    assert plan.steps[-1].node_id == "d"
    assert sorted(plan.steps[-1].dependencies) == ["b", "c"]


def test_unreachable_nodes_are_pruned():
    wf = workflow(
        [trigger_node(), action_node("a"), action_node("orphan"), action_node("island1"), action_node("island2")],
        [edge("trigger", "a"), edge("island1", "island2")],
    )
    plan = build_execution_plan(wf)

    assert plan.node_ids == ["a"]


def test_unreachable_upstream_is_not_planned():
    wf = workflow(
        [trigger_node(), action_node("a"), action_node("b"), action_node("side")],
        [edge("trigger", "a"), edge("a", "b"), edge("side", "b")],
    )
    plan = build_execution_plan(wf)

    assert plan.node_ids == ["a", "b"]
    assert sorted(plan.steps[1].dependencies) == ["a", "side"]


def test_edges_to_missing_nodes_are_ignored():
    wf = workflow([trigger_node(), action_node("a")], [edge("trigger", "a"), edge("a", "ghost")])
    assert build_execution_plan(wf).node_ids == ["a"]


def test_conditional_flag():
    wf = workflow(
        [trigger_node(), action_node("a"), condition_node("c"), action_node("b"), action_node("d"), action_node("e")],
        [edge("trigger", "a"), edge("a", "c"), edge("c", "b", handle="true"),
         edge("c", "d", handle="false"), edge("b", "e")],
    )
    plan = build_execution_plan(wf)
    flags = {step.node_id: step.is_conditional for step in plan.steps}

    assert flags == {"a": False, "c": False, "b": True, "d": True, "e": False}
    _assert_topological(plan, wf)


def test_long_chain_plans_without_recursion():
    plan = build_execution_plan(linear_workflow(3000))

    assert len(plan.steps) == 3000
    assert plan.node_ids[0] == "s1"
    assert plan.node_ids[-1] == "s3000"
