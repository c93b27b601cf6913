# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow and agent builders shared by the test suites.
"""

from typing import Any, Dict, List, Optional

from agentflow.actions.base import ActionResult
from agentflow.models import Agent, AgentConfig, Workflow, WorkflowEdge, WorkflowNode


def trigger_node(node_id: str = "trigger", trigger_type: str = "manual", config: Optional[dict] = None) -> dict:
    return {
        "id": node_id,
        "type": "trigger",
        "data": {"label": "Start", "triggerType": trigger_type, "triggerConfig": config or {}},
    }


def action_node(node_id: str, action_type: str = "noop", config: Optional[dict] = None) -> dict:
    return {
        "id": node_id,
        "type": "action",
        "data": {"label": node_id.upper(), "actionType": action_type, "actionConfig": config or {}},
    }


def condition_node(node_id: str, config: Optional[dict] = None) -> dict:
    return {
        "id": node_id,
        "type": "condition",
        "data": {"label": node_id.upper(), "conditionConfig": config or {"return": True}},
    }


def edge(source: str, target: str, handle: Optional[str] = None, label: Optional[str] = None) -> dict:
    data = {"id": f"{source}-{target}", "source": source, "target": target}
    if handle is not None:
        data["sourceHandle"] = handle
    if label is not None:
        data["label"] = label
    return data


def workflow(nodes: List[dict], edges: List[dict]) -> Workflow:
    return Workflow.model_validate({"nodes": nodes, "edges": edges})


def linear_workflow(count: int) -> Workflow:
    """trigger -> s1 -> s2 -> ... -> s{count}"""
    ids = [f"s{i}" for i in range(1, count + 1)]
    nodes = [trigger_node()] + [action_node(node_id) for node_id in ids]
    chain = ["trigger"] + ids
    return workflow(nodes, [edge(a, b) for a, b in zip(chain, chain[1:])])


def agent_for(wf: Workflow, variables: Optional[Dict[str, Any]] = None, **config) -> Agent:
    return Agent(
        id="agent-1",
        account_id="account-1",
        name="Test Agent",
        workflow=wf,
        config=AgentConfig(variables=variables or {}, **config),
    )


class RecordingActionRegistry:
    """
    Action registry stand-in.

    Records every call; responses are looked up by the action config's
    "node" key, falling back to the action type, then to a plain success.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.responses = responses or {}
        self.calls: List[tuple] = []

    async def execute(self, action_type: str, config: Dict[str, Any], context) -> Any:
        self.calls.append((action_type, config))
        key = config.get("node", action_type)
        response = self.responses.get(key, ActionResult(success=True))
        if isinstance(response, Exception):
            raise response
        return response
