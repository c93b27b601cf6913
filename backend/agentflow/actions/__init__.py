# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Action contract and built-in control-flow executors.
"""

from agentflow.actions.base import ActionExecutor, ActionResult
from agentflow.actions.control_flow import ConditionExecutor, DelayExecutor, SetVariableExecutor
from agentflow.actions.evaluator import evaluate_condition
from agentflow.actions.registry import ActionRegistry, create_action_registry
from agentflow.actions.variables import get_nested_value, interpolate_variables

__all__ = [
    "ActionExecutor",
    "ActionResult",
    "ActionRegistry",
    "create_action_registry",
    "ConditionExecutor",
    "DelayExecutor",
    "SetVariableExecutor",
    "evaluate_condition",
    "get_nested_value",
    "interpolate_variables",
]
