# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Agent Lookup

Resolves agents and webhook triggers for the HTTP routes. Storage lives
outside the engine; hosts provide an AgentLookup backed by their database.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from agentflow.core.errors import NotFoundError
from agentflow.models import Agent, AgentTrigger, TriggerType


class AgentLookup(ABC):
    @abstractmethod
    async def get_agent(self, agent_id: str) -> Agent:
        """Raises NotFoundError if the agent does not exist"""

    @abstractmethod
    async def get_webhook_trigger(self, webhook_id: str) -> AgentTrigger:
        """Raises NotFoundError if no webhook trigger owns webhook_id"""


class InMemoryAgentLookup(AgentLookup):
    """Dict-backed lookup for local runs and tests"""

    def __init__(self, agents: Optional[List[Agent]] = None, triggers: Optional[List[AgentTrigger]] = None):
        self._agents: Dict[str, Agent] = {agent.id: agent for agent in agents or []}
        self._webhooks: Dict[str, AgentTrigger] = {}
        for trigger in triggers or []:
            self.add_trigger(trigger)

    def add_agent(self, agent: Agent) -> None:
        self._agents[agent.id] = agent

    def add_trigger(self, trigger: AgentTrigger) -> None:
        if trigger.trigger_type != TriggerType.WEBHOOK:
            return
        # Webhook URLs end in their webhook id
        webhook_id = trigger.webhook_url.rstrip("/").rsplit("/", 1)[-1] if trigger.webhook_url else trigger.id
        self._webhooks[webhook_id] = trigger

    async def get_agent(self, agent_id: str) -> Agent:
        agent = self._agents.get(agent_id)
        if agent is None:
            raise NotFoundError("Agent", agent_id)
        return agent

    async def get_webhook_trigger(self, webhook_id: str) -> AgentTrigger:
        trigger = self._webhooks.get(webhook_id)
        if trigger is None:
            raise NotFoundError("Webhook", webhook_id)
        return trigger
