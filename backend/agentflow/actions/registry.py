# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
In-process action registry.

Implements the contract the runtime depends on:
    await registry.execute(action_type, config, context) -> ActionResult
Any object exposing that coroutine can stand in for it.
"""

import logging
from typing import Dict, Any, List, Optional

from agentflow.actions.base import ActionExecutor, ActionResult
from agentflow.actions.control_flow import ConditionExecutor, DelayExecutor, SetVariableExecutor
from agentflow.models import ExecutionContext

logger = logging.getLogger(__name__)


class ActionRegistry:
    """Registry of action executors, keyed by action type"""

    def __init__(self, executors: Optional[List[ActionExecutor]] = None):
        self._executors: Dict[str, ActionExecutor] = {}
        for executor in executors or []:
            self.register(executor)

    def register(self, executor: ActionExecutor) -> None:
        """Register an executor; a later registration for the same type wins"""
        self._executors[executor.action_type] = executor

    def get(self, action_type: str) -> Optional[ActionExecutor]:
        return self._executors.get(action_type)

    def get_all(self) -> List[ActionExecutor]:
        return list(self._executors.values())

    async def execute(
        self,
        action_type: str,
        config: Dict[str, Any],
        context: ExecutionContext
    ) -> ActionResult:
        executor = self._executors.get(action_type)

        if executor is None:
            return ActionResult(
                success=False,
                error=f"No executor found for action type: {action_type}"
            )

        validation = executor.validate(config)
        if not validation.valid:
            return ActionResult(
                success=False,
                error=f"Configuration validation failed: {', '.join(validation.errors)}"
            )

        logger.debug("Executing action", extra={"action_type": action_type, "execution_id": context.execution_id})
        return await executor.execute(config, context)


def create_action_registry(max_inline_delay_ms: int = 30 * 1000) -> ActionRegistry:
    """Registry with the built-in control-flow executors"""
    return ActionRegistry([
        ConditionExecutor(),
        DelayExecutor(max_inline_ms=max_inline_delay_ms),
        SetVariableExecutor(),
    ])
