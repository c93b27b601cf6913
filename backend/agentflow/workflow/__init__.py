# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow validation, planning and execution.
"""

from agentflow.workflow.exceptions import UnknownNodeTypeError, WorkflowPlanningError
from agentflow.workflow.planner import ExecutionPlan, PlannedStep, build_execution_plan
from agentflow.workflow.runtime import AgentRuntime, RuntimeConfig, find_condition_branch
from agentflow.workflow.validation import WorkflowValidator

__all__ = [
    "AgentRuntime",
    "RuntimeConfig",
    "ExecutionPlan",
    "PlannedStep",
    "build_execution_plan",
    "find_condition_branch",
    "WorkflowValidator",
    "WorkflowPlanningError",
    "UnknownNodeTypeError",
]
