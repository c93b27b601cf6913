# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
AgentFlow API
Hosts trigger intake and workflow execution over HTTP
"""
# Load environment variables from .env file (local development)
from dotenv import load_dotenv
from pathlib import Path as _PathForEnv
_env_path = _PathForEnv(__file__).parent.parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agentflow.actions.registry import create_action_registry
from agentflow.api import agents, workflows
from agentflow.api.lookup import AgentLookup, InMemoryAgentLookup
from agentflow.core.config import Config, get_config
from agentflow.core.logging import configure_logging, log_event
from agentflow.triggers.registry import TriggerRegistry, create_trigger_registry
from agentflow.workflow.runtime import AgentRuntime, RuntimeConfig
from agentflow.workflow.validation import WorkflowValidator


def create_app(
    config: Optional[Config] = None,
    trigger_registry: Optional[TriggerRegistry] = None,
    runtime: Optional[AgentRuntime] = None,
    validator: Optional[WorkflowValidator] = None,
    agent_lookup: Optional[AgentLookup] = None,
) -> FastAPI:
    """
    Build the application with explicit collaborators.

    Anything not passed in is constructed from config. Collaborators are
    stored in app.state for dependency injection.
    """
    config = config or get_config()
    logger = configure_logging(config.log_level, config.log_format)

    trigger_registry = trigger_registry or create_trigger_registry(config)
    runtime = runtime or AgentRuntime(
        create_action_registry(config.max_inline_delay_ms),
        RuntimeConfig.from_config(config),
    )

    app = FastAPI(
        title="AgentFlow",
        description="Trigger dispatch and workflow execution for agents",
        version="1.0.0",
    )

    # CORS for the workflow builder
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.trigger_registry = trigger_registry
    app.state.runtime = runtime
    app.state.validator = validator or WorkflowValidator(trigger_registry)
    app.state.agent_lookup = agent_lookup or InMemoryAgentLookup()

    app.include_router(workflows.router)
    app.include_router(agents.router)

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "triggers": sorted(handler.trigger_type for handler in trigger_registry.get_all()),
        }

    log_event(logger, "Application created", handlers=len(trigger_registry.get_all()))
    return app
