# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Agent Trigger API Routes

Inbound webhooks and manual runs. Each request is parsed and filtered by
the trigger registry before the runtime executes the agent.
"""

import json
import logging
from typing import Dict, Any, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Request

from agentflow.api.dependencies import get_agent_lookup, get_app_config, get_runtime, get_trigger_registry
from agentflow.api.lookup import AgentLookup
from agentflow.core.config import Config
from agentflow.core.errors import NotFoundError, ValidationError, sanitize_error_for_user
from agentflow.models import Agent, AgentExecution, AgentTrigger, TriggerType
from agentflow.triggers.registry import TriggerRegistry
from agentflow.triggers.webhook import verify_signature
from agentflow.workflow.runtime import AgentRuntime

logger = logging.getLogger(__name__)

router = APIRouter(tags=["agents"])


def _execution_summary(execution: AgentExecution) -> Dict[str, Any]:
    return {
        "executionId": execution.id,
        "status": execution.status.value,
        "steps": [step.node_id for step in execution.steps],
        "output": execution.output_data,
        "error": execution.error_message,
    }


def _manual_trigger(agent: Agent) -> AgentTrigger:
    """Manual trigger built from the agent's trigger node, if it declares inputs"""
    config: Dict[str, Any] = {}
    for node in agent.workflow.trigger_nodes():
        if node.data.trigger_type == TriggerType.MANUAL:
            config = node.data.trigger_config or {}
            break
    return AgentTrigger(
        id=f"{agent.id}-manual",
        agent_id=agent.id,
        trigger_type=TriggerType.MANUAL.value,
        config=config,
    )


def _decode_body(raw_body: bytes) -> Optional[Any]:
    if not raw_body:
        return None
    try:
        return json.loads(raw_body)
    except ValueError:
        return raw_body.decode("utf-8", errors="replace")


@router.post("/api/webhooks/agents/{webhook_id}")
async def receive_webhook(
    webhook_id: str,
    request: Request,
    registry: TriggerRegistry = Depends(get_trigger_registry),
    runtime: AgentRuntime = Depends(get_runtime),
    lookup: AgentLookup = Depends(get_agent_lookup),
    config: Config = Depends(get_app_config)
) -> Dict[str, Any]:
    """Receive a webhook, verify its signature and run the owning agent"""
    try:
        trigger = await lookup.get_webhook_trigger(webhook_id)
        agent = await lookup.get_agent(trigger.agent_id)
    except NotFoundError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if not trigger.is_enabled:
        raise HTTPException(status_code=404, detail=f"Webhook not found: {webhook_id}")

    raw_body = await request.body()

    if trigger.webhook_secret:
        signature = request.headers.get(config.signature_header)
        if not verify_signature(raw_body, signature, trigger.webhook_secret):
            logger.warning("Invalid webhook signature", extra={"trigger_id": trigger.id})
            raise HTTPException(status_code=401, detail="Invalid webhook signature")

    raw_data = {
        "method": request.method,
        "headers": dict(request.headers),
        "body": _decode_body(raw_body),
        "query": dict(request.query_params),
        "ip": request.client.host if request.client else None,
    }

    try:
        payload = await registry.process_trigger(trigger, raw_data)
    except ValidationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if payload is None:
        return {"status": "filtered"}

    try:
        execution = await runtime.execute(agent, payload, trigger)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Agent execution failed: {sanitize_error_for_user(e)}")

    return _execution_summary(execution)


@router.post("/agents/{agent_id}/run")
async def run_agent(
    agent_id: str,
    inputs: Optional[Dict[str, Any]] = Body(None),
    registry: TriggerRegistry = Depends(get_trigger_registry),
    runtime: AgentRuntime = Depends(get_runtime),
    lookup: AgentLookup = Depends(get_agent_lookup)
) -> Dict[str, Any]:
    """Run an agent manually with the given inputs"""
    try:
        agent = await lookup.get_agent(agent_id)
    except NotFoundError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    trigger = _manual_trigger(agent)

    try:
        payload = await registry.process_trigger(trigger, inputs or {})
    except ValidationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if payload is None:
        return {"status": "filtered"}

    try:
        execution = await runtime.execute(agent, payload, trigger)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Agent execution failed: {sanitize_error_for_user(e)}")

    return _execution_summary(execution)
