# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow API Routes

Validation and execution planning for workflow graphs.
"""

from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException

from agentflow.api.dependencies import get_validator
from agentflow.models import Workflow
from agentflow.workflow.exceptions import WorkflowPlanningError
from agentflow.workflow.planner import build_execution_plan
from agentflow.workflow.validation import WorkflowValidator

router = APIRouter(prefix="/workflows", tags=["workflows"])


@router.post("/validate")
async def validate_workflow(
    workflow: Workflow,
    validator: WorkflowValidator = Depends(get_validator)
) -> Dict[str, Any]:
    """Validate a workflow graph; defects are reported, not raised"""
    return validator.validate(workflow).model_dump(by_alias=True)


@router.post("/plan")
async def plan_workflow(workflow: Workflow) -> Dict[str, Any]:
    """Return the execution order for a workflow"""
    try:
        plan = build_execution_plan(workflow)
    except WorkflowPlanningError as e:
        raise HTTPException(status_code=400, detail=e.message)

    return {
        "startNodeId": plan.start_node_id,
        "steps": [
            {
                "nodeId": step.node_id,
                "type": step.node.type,
                "dependencies": step.dependencies,
                "isConditional": step.is_conditional,
            }
            for step in plan.steps
        ],
    }
