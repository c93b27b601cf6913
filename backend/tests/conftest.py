# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Shared pytest fixtures.
"""

import pytest

from agentflow.core.config import Config
from agentflow.models import ExecutionContext, TriggerInfo
from agentflow.triggers.registry import create_trigger_registry
from agentflow.workflow.validation import WorkflowValidator


@pytest.fixture
def config():
    """Default configuration, no YAML involved"""
    return Config()


@pytest.fixture
def trigger_registry(config):
    return create_trigger_registry(config)


@pytest.fixture
def validator():
    return WorkflowValidator()


@pytest.fixture
def execution_context():
    """Context with trigger data, variables and no executed steps"""
    return ExecutionContext(
        execution_id="exec-1",
        agent_id="agent-1",
        account_id="account-1",
        trigger=TriggerInfo(id="trigger-1", type="manual", data={"amount": 150, "email": "bob@acme.com"}),
        variables={"customer": "Acme", "vip": True},
    )
