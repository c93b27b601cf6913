# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Validation

Structural checks on a workflow graph. Every check runs so that all defects
are reported in one pass; nothing here raises.
"""

from typing import Dict, List, Optional, Set

from agentflow.models import NodeType, ValidationResult, Workflow, WorkflowNode

# Node types whose data must carry an actionType
ACTION_NODE_TYPES = (NodeType.ACTION.value, NodeType.AI_TASK.value, NodeType.INTEGRATION.value)


class WorkflowValidator:
    """
    Validates workflow structure.

    When a trigger registry is supplied, the trigger node's configuration is
    also checked by its handler.
    """

    def __init__(self, trigger_registry=None):
        self.trigger_registry = trigger_registry

    def validate(self, workflow: Workflow) -> ValidationResult:
        errors: List[str] = []
        warnings: List[str] = []

        node_ids = {node.id for node in workflow.nodes}

        # 1. Duplicate node IDs
        seen: Set[str] = set()
        duplicates: List[str] = []
        for node in workflow.nodes:
            if node.id in seen and node.id not in duplicates:
                duplicates.append(node.id)
            seen.add(node.id)
        for node_id in duplicates:
            errors.append(f"Duplicate node ID: {node_id}")

        # 2. Trigger count
        trigger_nodes = workflow.trigger_nodes()
        if not trigger_nodes:
            errors.append("Workflow must have a trigger node")
        elif len(trigger_nodes) > 1:
            warnings.append("Workflow has multiple trigger nodes, only the first will be used")

        # 3. Disconnected nodes
        connected: Set[str] = set()
        for edge in workflow.edges:
            connected.add(edge.source)
            connected.add(edge.target)
        for node in workflow.nodes:
            if node.type != NodeType.TRIGGER and node.id not in connected:
                warnings.append(f'Node "{self._label(node)}" is not connected')

        # 4. Cycles
        if self._has_cycle(workflow, node_ids):
            errors.append("Workflow contains a cycle")

        # 5. Node-specific requirements
        for node in workflow.nodes:
            errors.extend(self._validate_node(node))

        # 6. Edge references
        for edge in workflow.edges:
            if edge.source not in node_ids:
                errors.append(f"Edge references non-existent source node: {edge.source}")
            if edge.target not in node_ids:
                errors.append(f"Edge references non-existent target node: {edge.target}")

        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    def _validate_node(self, node: WorkflowNode) -> List[str]:
        errors = []
        data = node.data
        label = self._label(node)

        if not data.label:
            errors.append(f"Node {node.id} must have a label")

        if node.type == NodeType.TRIGGER:
            if not data.trigger_type:
                errors.append(f'Trigger node "{label}" must have a trigger type')
            elif self.trigger_registry is not None:
                result = self.trigger_registry.validate_config(data.trigger_type, data.trigger_config or {})
                errors.extend(f'Trigger "{label}": {error}' for error in result.errors)

        elif node.type in ACTION_NODE_TYPES:
            if not data.action_type:
                errors.append(f'Action node "{label}" must have an action type')

        elif node.type == NodeType.CONDITION:
            if not data.condition_config:
                errors.append(f'Condition node "{label}" must have a condition configuration')

        elif node.type == NodeType.DELAY:
            if not data.delay_config:
                errors.append(f'Delay node "{label}" must have a delay configuration')

        return errors

    def _has_cycle(self, workflow: Workflow, node_ids: Set[str]) -> bool:
        """Iterative DFS; an edge into a node still on the stack is a cycle"""
        adjacency: Dict[str, List[str]] = {node_id: [] for node_id in node_ids}
        for edge in workflow.edges:
            if edge.source in node_ids and edge.target in node_ids:
                adjacency[edge.source].append(edge.target)

        visited: Set[str] = set()
        on_stack: Set[str] = set()

        for start in node_ids:
            if start in visited:
                continue

            visited.add(start)
            on_stack.add(start)
            stack = [(start, iter(adjacency[start]))]

            while stack:
                node_id, children = stack[-1]
                child: Optional[str] = next(children, None)

                if child is None:
                    stack.pop()
                    on_stack.discard(node_id)
                elif child in on_stack:
                    return True
                elif child not in visited:
                    visited.add(child)
                    on_stack.add(child)
                    stack.append((child, iter(adjacency[child])))

        return False

    @staticmethod
    def _label(node: WorkflowNode) -> str:
        return node.data.label or node.id
