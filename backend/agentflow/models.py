# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
AgentFlow Models

Pydantic models for workflow graphs, triggers and execution records.
JSON uses camelCase (the workflow-builder format), attributes are snake_case.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Dict, Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from agentflow.core.errors import ExecutionError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case keys, dumps camelCase with by_alias=True"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Enums
# ============================================================================

class NodeType(str, Enum):
    TRIGGER = "trigger"
    ACTION = "action"
    AI_TASK = "ai_task"
    INTEGRATION = "integration"
    CONDITION = "condition"
    DELAY = "delay"
    OUTPUT = "output"


class TriggerType(str, Enum):
    EMAIL_RECEIVED = "email_received"
    WEBHOOK = "webhook"
    SCHEDULE = "schedule"
    MANUAL = "manual"
    CRM_EVENT = "crm_event"
    PAYMENT_RECEIVED = "payment_received"


class ExecutionStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class StepStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


# ============================================================================
# Workflow Graph Models
# ============================================================================

class Position(CamelModel):
    x: float = 0
    y: float = 0


class Viewport(CamelModel):
    x: float = 0
    y: float = 0
    zoom: float = 1


class WorkflowNodeData(CamelModel):
    """Per-node configuration; which sub-config is required depends on the node type"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    label: Optional[str] = None
    description: Optional[str] = None
    trigger_type: Optional[str] = None
    trigger_config: Optional[Dict[str, Any]] = None
    action_type: Optional[str] = None
    action_config: Optional[Dict[str, Any]] = None
    condition_config: Optional[Dict[str, Any]] = None
    delay_config: Optional[Dict[str, Any]] = None


class WorkflowNode(CamelModel):
    """Single node in a workflow"""
    id: str
    type: str  # NodeType value; unknown types are rejected at execution time
    position: Position = Field(default_factory=Position)
    data: WorkflowNodeData = Field(default_factory=WorkflowNodeData)


class WorkflowEdge(CamelModel):
    """Directed connection between workflow nodes"""
    id: Optional[str] = None
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None
    label: Optional[str] = None


class Workflow(CamelModel):
    """Complete workflow definition"""
    nodes: List[WorkflowNode] = []
    edges: List[WorkflowEdge] = []
    viewport: Viewport = Field(default_factory=Viewport)

    def node_map(self) -> Dict[str, WorkflowNode]:
        return {node.id: node for node in self.nodes}

    def trigger_nodes(self) -> List[WorkflowNode]:
        return [node for node in self.nodes if node.type == NodeType.TRIGGER]


class ValidationResult(CamelModel):
    valid: bool
    errors: List[str] = []
    warnings: List[str] = []


# ============================================================================
# Agent Models
# ============================================================================

class RetryConfig(CamelModel):
    """Carried for persistence compatibility; the runtime does not retry steps"""
    max_attempts: int = 0
    backoff_ms: int = 0


class AgentConfig(CamelModel):
    variables: Dict[str, Any] = {}
    retry: Optional[RetryConfig] = None
    timeout_ms: Optional[int] = None
    log_level: Optional[str] = None


class Agent(CamelModel):
    id: str
    account_id: str
    name: str = ""
    status: str = "active"
    workflow: Workflow
    config: AgentConfig = Field(default_factory=AgentConfig)


# ============================================================================
# Trigger Models
# ============================================================================

class AgentTrigger(CamelModel):
    """Trigger definition owned by an agent's trigger node"""
    id: str = Field(default_factory=new_id)
    agent_id: Optional[str] = None
    trigger_type: str
    name: str = ""
    is_enabled: bool = True
    config: Dict[str, Any] = {}
    webhook_url: Optional[str] = None
    webhook_secret: Optional[str] = None


class TriggerMetadata(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    received_at: datetime = Field(default_factory=utc_now)
    source: str
    raw_data: Optional[Any] = None


class TriggerPayload(CamelModel):
    """Normalized handler output; immutable once produced"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    data: Dict[str, Any]
    metadata: TriggerMetadata


class SetupResult(CamelModel):
    success: bool
    webhook_url: Optional[str] = None
    webhook_secret: Optional[str] = None
    cron_job_id: Optional[str] = None
    error: Optional[str] = None


# ============================================================================
# Execution Models
# ============================================================================

class TriggerInfo(CamelModel):
    id: str
    type: str
    data: Dict[str, Any] = {}


class StepOutput(CamelModel):
    """Result of one executed node, as seen by later steps"""
    node_id: str
    action_type: Optional[str] = None
    status: StepStatus
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    duration_ms: int = 0
    tokens_used: Optional[int] = None


class ExecutionContext(CamelModel):
    """
    Per-run mutable state.

    Owned by exactly one AgentExecution and mutated only by the runtime
    driving that execution.
    """
    execution_id: str
    agent_id: str
    account_id: str
    trigger: TriggerInfo
    variables: Dict[str, Any] = {}
    timestamp: datetime = Field(default_factory=utc_now)
    steps: Dict[str, StepOutput] = {}

    def is_completed(self, node_id: str) -> bool:
        step = self.steps.get(node_id)
        return step is not None and step.status == StepStatus.COMPLETED

    def variable_context(self) -> Dict[str, Any]:
        """Names resolvable from {{path}} templates and condition fields"""
        context = {
            "trigger": self.trigger.model_dump(),
            "variables": self.variables,
            "steps": {node_id: step.model_dump() for node_id, step in self.steps.items()},
            "timestamp": self.timestamp.isoformat(),
            "execution_id": self.execution_id,
            "agent_id": self.agent_id,
            # Convenience shortcuts
            "data": self.trigger.data,
        }
        context.update(self.variables)
        return context


class ExecutionStep(CamelModel):
    """Append-only record of one executed node"""
    id: str = Field(default_factory=new_id)
    execution_id: str
    node_id: str
    step_order: int
    action_type: Optional[str] = None
    status: StepStatus = StepStatus.RUNNING
    input_data: Dict[str, Any] = {}
    output_data: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    started_at: datetime = Field(default_factory=utc_now)
    completed_at: Optional[datetime] = None
    duration_ms: Optional[int] = None


class AgentExecution(CamelModel):
    """Execution record: pending -> running -> completed | failed"""
    id: str = Field(default_factory=new_id)
    agent_id: str
    trigger_id: Optional[str] = None
    status: ExecutionStatus = ExecutionStatus.PENDING
    trigger_data: Dict[str, Any] = {}
    output_data: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    error_details: Optional[Dict[str, Any]] = None
    context: ExecutionContext
    variables: Dict[str, Any] = {}
    steps: List[ExecutionStep] = []
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_ms: Optional[int] = None
    tokens_used: int = 0
    estimated_cost: float = 0.0
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def is_terminal(self) -> bool:
        return self.status in (ExecutionStatus.COMPLETED, ExecutionStatus.FAILED)

    def mark_running(self) -> None:
        if self.status != ExecutionStatus.PENDING:
            raise ExecutionError(
                f"Cannot start execution in status '{self.status.value}'",
                execution_id=self.id
            )
        self.status = ExecutionStatus.RUNNING
        self.started_at = utc_now()

    def finalize(
        self,
        success: bool,
        output_data: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
        error_details: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[int] = None,
    ) -> None:
        """Move to a terminal state. Allowed exactly once."""
        if self.is_terminal:
            raise ExecutionFinalizedError(self.id, self.status)
        self.status = ExecutionStatus.COMPLETED if success else ExecutionStatus.FAILED
        self.completed_at = utc_now()
        self.duration_ms = duration_ms
        self.output_data = output_data
        if not success:
            self.error_message = error_message
            self.error_details = error_details


class ExecutionFinalizedError(ExecutionError):
    """Raised when a terminal execution is finalized a second time"""

    def __init__(self, execution_id: str, status: ExecutionStatus):
        super().__init__(
            f"Execution already finalized with status '{status.value}'",
            execution_id=execution_id
        )
        self.status = status
