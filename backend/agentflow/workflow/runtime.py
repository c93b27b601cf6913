# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Agent Runtime

Sequential step executor for agent workflows.

Steps run one at a time in plan order. Before each step the time and step
budgets are checked; a failed step ends the run. Condition nodes activate
exactly one outgoing branch; steps directly behind a condition whose
branch was not taken are skipped rather than failed.
"""

import logging
import time
import traceback
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

from agentflow.actions.base import ActionResult
from agentflow.core.config import Config
from agentflow.core.logging import ExecutionLogger, log_event
from agentflow.models import (
    Agent,
    AgentExecution,
    AgentTrigger,
    ExecutionContext,
    ExecutionStep,
    NodeType,
    StepOutput,
    StepStatus,
    TriggerInfo,
    TriggerPayload,
    WorkflowEdge,
    new_id,
    utc_now,
)
from agentflow.workflow.exceptions import UnknownNodeTypeError
from agentflow.workflow.planner import ExecutionPlan, PlannedStep, build_execution_plan

logger = logging.getLogger(__name__)

# Node types dispatched to the action registry by their actionType
ACTION_NODE_TYPES = (NodeType.ACTION.value, NodeType.AI_TASK.value, NodeType.INTEGRATION.value)


@dataclass
class RuntimeConfig:
    max_execution_time_ms: int = 5 * 60 * 1000
    max_steps: int = 100
    debug: bool = False
    cost_per_1k_tokens: float = 0.002
    on_step_complete: Optional[Callable[[ExecutionStep], None]] = None
    on_execution_update: Optional[Callable[[AgentExecution], None]] = None

    @classmethod
    def from_config(cls, config: Config, **callbacks) -> "RuntimeConfig":
        return cls(
            max_execution_time_ms=config.max_execution_time_ms,
            max_steps=config.max_steps,
            debug=config.debug,
            cost_per_1k_tokens=config.cost_per_1k_tokens,
            **callbacks,
        )


@dataclass
class RunResult:
    success: bool
    output: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_details: Optional[Dict[str, Any]] = None


@dataclass
class BranchState:
    """Which nodes executed, and which target each condition selected"""
    active: Set[str] = field(default_factory=set)
    branch_targets: Dict[str, str] = field(default_factory=dict)

    def is_satisfied(self, dependency: str, node_id: str, condition_ids: Set[str]) -> bool:
        if dependency in condition_ids:
            return self.branch_targets.get(dependency) == node_id
        return dependency in self.active


def find_condition_branch(condition_id: str, branch: str, edges: List[WorkflowEdge]) -> Optional[str]:
    """
    Target of the first edge leaving condition_id for the given branch.

    sourceHandle decides when it is set; the edge label is only consulted
    for edges without a handle. Both compare case-insensitively.
    """
    for edge in edges:
        if edge.source != condition_id:
            continue
        marker = edge.source_handle if edge.source_handle is not None else edge.label
        if marker is not None and marker.lower() == branch:
            return edge.target
    return None


class AgentRuntime:
    """
    Executes agent workflows against an action registry.

    The registry only needs a coroutine
    execute(action_type, config, context) returning an ActionResult or an
    equivalent dict.
    """

    def __init__(self, action_registry, config: Optional[RuntimeConfig] = None):
        self.action_registry = action_registry
        self.config = config or RuntimeConfig()

    async def execute(
        self,
        agent: Agent,
        payload: TriggerPayload,
        trigger: Optional[AgentTrigger] = None,
    ) -> AgentExecution:
        """
        Run an agent's workflow for one trigger payload.

        Never raises for workflow problems: planning errors, failed steps and
        exhausted budgets all produce a failed execution.
        """
        started = time.monotonic()
        execution = self._create_execution(agent, payload, trigger)
        execution.mark_running()
        log = ExecutionLogger(logger, execution.id, agent.id)

        log_event(log, "Starting execution", trigger_type=execution.context.trigger.type)

        try:
            plan = build_execution_plan(agent.workflow)
            self._debug(log, "Execution plan built", steps=len(plan.steps))

            result = await self._execute_workflow(agent, plan, execution, started, log)
        except Exception as e:
            log.error("Execution failed with error", extra={"error": str(e)}, exc_info=True)
            result = RunResult(
                success=False,
                error=str(e) or type(e).__name__,
                error_details={"type": type(e).__name__, "stack": traceback.format_exc()},
            )

        execution.finalize(
            success=result.success,
            output_data=result.output,
            error_message=result.error,
            error_details=result.error_details,
            duration_ms=self._elapsed_ms(started),
        )

        log_event(
            log,
            "Execution completed",
            status=execution.status.value,
            duration_ms=execution.duration_ms,
            tokens_used=execution.tokens_used,
        )

        if self.config.on_execution_update:
            self.config.on_execution_update(execution)

        return execution

    def _create_execution(
        self,
        agent: Agent,
        payload: TriggerPayload,
        trigger: Optional[AgentTrigger],
    ) -> AgentExecution:
        execution_id = new_id()
        trigger_data = dict(payload.data)

        context = ExecutionContext(
            execution_id=execution_id,
            agent_id=agent.id,
            account_id=agent.account_id,
            trigger=TriggerInfo(
                id=trigger.id if trigger else "manual",
                type=trigger.trigger_type if trigger else "manual",
                data=trigger_data,
            ),
            variables=dict(agent.config.variables),
        )

        return AgentExecution(
            id=execution_id,
            agent_id=agent.id,
            trigger_id=trigger.id if trigger else None,
            trigger_data=trigger_data,
            context=context,
            variables=dict(agent.config.variables),
        )

    async def _execute_workflow(
        self,
        agent: Agent,
        plan: ExecutionPlan,
        execution: AgentExecution,
        started: float,
        log: ExecutionLogger,
    ) -> RunResult:
        node_map = agent.workflow.node_map()
        condition_ids = {
            node_id for node_id, node in node_map.items() if node.type == NodeType.CONDITION
        }
        branches = BranchState(active={plan.start_node_id})
        steps_executed = 0

        for planned in plan.steps:
            # Budgets
            if self._elapsed_ms(started) > self.config.max_execution_time_ms:
                return self._budget_exceeded(
                    execution, log, "max_execution_time_ms", self.config.max_execution_time_ms,
                    "Execution timeout exceeded",
                )

            if steps_executed >= self.config.max_steps:
                return self._budget_exceeded(
                    execution, log, "max_steps", self.config.max_steps,
                    "Maximum steps exceeded",
                )

            if not self._should_execute(planned, branches, condition_ids):
                self._debug(
                    log,
                    "Skipping node (branch not taken)",
                    node_id=planned.node_id,
                )
                continue

            step = await self._execute_step(planned, execution, steps_executed, log)
            steps_executed += 1

            execution.steps.append(step)
            execution.context.steps[planned.node_id] = StepOutput(
                node_id=planned.node_id,
                action_type=step.action_type,
                status=step.status,
                data=step.output_data,
                error=step.error_message,
                duration_ms=step.duration_ms or 0,
            )

            if step.output_data:
                execution.variables.update(step.output_data)
                execution.context.variables.update(step.output_data)

            branches.active.add(planned.node_id)
            if planned.node.type == NodeType.CONDITION and step.output_data:
                branch = "true" if step.output_data.get("result") is True else "false"
                target = find_condition_branch(planned.node_id, branch, agent.workflow.edges)
                if target:
                    branches.branch_targets[planned.node_id] = target

            if self.config.on_step_complete:
                self.config.on_step_complete(step)

            if step.status == StepStatus.FAILED:
                retry = agent.config.retry
                if retry and retry.max_attempts > 0:
                    log.warning(
                        "Retry configured but steps are not retried",
                        extra={"node_id": planned.node_id, "max_attempts": retry.max_attempts},
                    )

                return RunResult(
                    success=False,
                    output=self._aggregate_output(execution),
                    error=step.error_message or "Step execution failed",
                    error_details={
                        "failedStep": planned.node_id,
                        "failedAction": planned.node.data.action_type,
                    },
                )

        return RunResult(success=True, output=self._aggregate_output(execution))

    def _should_execute(self, planned: PlannedStep, branches: BranchState, condition_ids: Set[str]) -> bool:
        """
        Only conditional steps are ever skipped: they run when every
        dependency is satisfied. All other steps are always eligible.
        """
        if not planned.is_conditional:
            return True
        return all(
            branches.is_satisfied(dep, planned.node_id, condition_ids)
            for dep in planned.dependencies
        )

    async def _execute_step(
        self,
        planned: PlannedStep,
        execution: AgentExecution,
        step_order: int,
        log: ExecutionLogger,
    ) -> ExecutionStep:
        node = planned.node
        start = time.monotonic()

        step = ExecutionStep(
            execution_id=execution.id,
            node_id=planned.node_id,
            step_order=step_order,
            action_type=node.data.action_type,
            input_data=self._build_step_input(execution.context),
        )

        self._debug(
            log,
            "Executing step",
            node_id=planned.node_id,
            node_type=node.type,
            action_type=node.data.action_type,
        )

        try:
            result = await self._dispatch(planned, step, execution.context)

            step.status = StepStatus.COMPLETED if result.success else StepStatus.FAILED
            step.output_data = result.data
            step.error_message = result.error

            if result.tokens_used:
                execution.tokens_used += result.tokens_used
                execution.estimated_cost += result.tokens_used / 1000 * self.config.cost_per_1k_tokens

        except Exception as e:
            step.status = StepStatus.FAILED
            step.error_message = str(e) or type(e).__name__

        if step.status == StepStatus.FAILED:
            log_event(
                log,
                "Step failed",
                level="WARNING",
                node_id=planned.node_id,
                error=step.error_message,
            )

        step.completed_at = utc_now()
        step.duration_ms = int((time.monotonic() - start) * 1000)
        return step

    async def _dispatch(self, planned: PlannedStep, step: ExecutionStep, context: ExecutionContext) -> ActionResult:
        node = planned.node
        data = node.data

        if node.type in ACTION_NODE_TYPES:
            if not data.action_type:
                raise ValueError("Action type is required")
            result = await self.action_registry.execute(data.action_type, data.action_config or {}, context)

        elif node.type == NodeType.CONDITION:
            if not data.condition_config:
                raise ValueError("Condition config is required")
            result = await self.action_registry.execute("condition", data.condition_config, context)

        elif node.type == NodeType.DELAY:
            if not data.delay_config:
                raise ValueError("Delay config is required")
            result = await self.action_registry.execute("delay", data.delay_config, context)

        elif node.type == NodeType.OUTPUT:
            result = ActionResult(success=True, data=step.input_data)

        else:
            raise UnknownNodeTypeError(planned.node_id, node.type)

        if isinstance(result, dict):
            result = ActionResult.model_validate(result)
        return result

    def _build_step_input(self, context: ExecutionContext) -> Dict[str, Any]:
        return {
            "trigger": context.trigger.model_dump(),
            "variables": dict(context.variables),
            "previousSteps": {
                node_id: output.model_dump() for node_id, output in context.steps.items()
            },
        }

    def _aggregate_output(self, execution: AgentExecution) -> Dict[str, Any]:
        """Per-node outputs plus the last completed step that produced output"""
        output: Dict[str, Any] = {
            "variables": dict(execution.variables),
            "stepResults": {},
        }

        for step in execution.steps:
            if step.output_data:
                output["stepResults"][step.node_id] = step.output_data

        completed = [
            step for step in execution.steps
            if step.output_data and step.status == StepStatus.COMPLETED
        ]
        if completed:
            output["result"] = completed[-1].output_data

        return output

    def _budget_exceeded(
        self,
        execution: AgentExecution,
        log: ExecutionLogger,
        budget: str,
        limit: int,
        message: str,
    ) -> RunResult:
        log_event(
            log,
            "Execution budget exceeded",
            level="WARNING",
            budget=budget,
            limit=limit,
        )
        return RunResult(
            success=False,
            output=self._aggregate_output(execution),
            error=message,
            error_details={"budget": budget, "limit": limit},
        )

    def _debug(self, log: ExecutionLogger, event: str, **fields) -> None:
        if self.config.debug:
            log_event(log, event, level="DEBUG", **fields)

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.monotonic() - started) * 1000)
