# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Exceptions

Raised while planning or running a workflow.
"""

from agentflow.core.errors import ExecutionError


class WorkflowPlanningError(ExecutionError):
    """Workflow cannot be turned into an execution plan"""
    pass


class UnknownNodeTypeError(ExecutionError):
    """Node type has no execution behaviour"""
    def __init__(self, node_id: str, node_type: str):
        super().__init__(f"Unknown node type: {node_type}", node_id=node_id)
        self.node_type = node_type
