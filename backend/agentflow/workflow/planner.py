# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Execution Planner

Turns a workflow graph into an ordered list of steps: nodes reachable from
the trigger, upstream dependencies first.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Set

from agentflow.models import NodeType, Workflow, WorkflowNode
from agentflow.workflow.exceptions import WorkflowPlanningError


@dataclass
class PlannedStep:
    node_id: str
    node: WorkflowNode
    dependencies: List[str] = field(default_factory=list)
    is_conditional: bool = False


@dataclass
class ExecutionPlan:
    start_node_id: str
    steps: List[PlannedStep] = field(default_factory=list)

    @property
    def node_ids(self) -> List[str]:
        return [step.node_id for step in self.steps]


def build_execution_plan(workflow: Workflow) -> ExecutionPlan:
    """
    Build the execution plan for a workflow.

    Nodes unreachable from the trigger are left out; the trigger itself is
    not a step.

    Raises:
        WorkflowPlanningError: workflow has no trigger node
    """
    trigger_nodes = workflow.trigger_nodes()
    if not trigger_nodes:
        raise WorkflowPlanningError("No trigger node found in workflow")
    trigger = trigger_nodes[0]

    node_map = workflow.node_map()

    # Adjacency maps, rebuilt per call
    adjacency: Dict[str, List[str]] = {node_id: [] for node_id in node_map}
    reverse_adjacency: Dict[str, List[str]] = {node_id: [] for node_id in node_map}
    for edge in workflow.edges:
        if edge.source not in node_map or edge.target not in node_map:
            continue
        adjacency[edge.source].append(edge.target)
        reverse_adjacency[edge.target].append(edge.source)

    reachable = _reachable_from(trigger.id, adjacency)
    order = _topological_order(reachable, reverse_adjacency)

    steps = []
    for node_id in order:
        if node_id == trigger.id:
            continue
        dependencies = reverse_adjacency[node_id]
        steps.append(PlannedStep(
            node_id=node_id,
            node=node_map[node_id],
            dependencies=list(dependencies),
            is_conditional=any(
                node_map[dep].type == NodeType.CONDITION for dep in dependencies
            ),
        ))

    return ExecutionPlan(start_node_id=trigger.id, steps=steps)


def _reachable_from(start: str, adjacency: Dict[str, List[str]]) -> List[str]:
    """BFS over forward edges; returns nodes in discovery order"""
    visited = {start}
    order = [start]
    queue = deque([start])

    while queue:
        node_id = queue.popleft()
        for neighbor in adjacency[node_id]:
            if neighbor not in visited:
                visited.add(neighbor)
                order.append(neighbor)
                queue.append(neighbor)

    return order


def _topological_order(reachable: List[str], reverse_adjacency: Dict[str, List[str]]) -> List[str]:
    """Post-order DFS over upstream edges, restricted to reachable nodes"""
    reachable_set: Set[str] = set(reachable)
    visited: Set[str] = set()
    order: List[str] = []

    for root in reachable:
        if root in visited:
            continue

        visited.add(root)
        stack = [(root, iter(reverse_adjacency[root]))]

        while stack:
            node_id, upstream = stack[-1]
            advanced = False

            for dep in upstream:
                if dep in reachable_set and dep not in visited:
                    visited.add(dep)
                    stack.append((dep, iter(reverse_adjacency[dep])))
                    advanced = True
                    break

            if not advanced:
                stack.pop()
                order.append(node_id)

    return order
