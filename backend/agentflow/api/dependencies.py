# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Dependency injection for the HTTP routes.

Every collaborator is created by create_app() and stored on app.state.
"""

from fastapi import Request

from agentflow.api.lookup import AgentLookup
from agentflow.core.config import Config
from agentflow.triggers.registry import TriggerRegistry
from agentflow.workflow.runtime import AgentRuntime
from agentflow.workflow.validation import WorkflowValidator


def get_app_config(request: Request) -> Config:
    return request.app.state.config


def get_trigger_registry(request: Request) -> TriggerRegistry:
    return request.app.state.trigger_registry


def get_runtime(request: Request) -> AgentRuntime:
    return request.app.state.runtime


def get_validator(request: Request) -> WorkflowValidator:
    return request.app.state.validator


def get_agent_lookup(request: Request) -> AgentLookup:
    return request.app.state.agent_lookup
