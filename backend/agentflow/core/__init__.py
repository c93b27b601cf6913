# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Core utilities and shared modules for AgentFlow.

This package contains:
- config: Configuration management
- errors: Custom exceptions
- logging: Structured logging
"""

from agentflow.core.config import get_config, load_config, Config
from agentflow.core.errors import AgentFlowError, NotFoundError, ValidationError
from agentflow.core.logging import ExecutionLogger, configure_logging, log_event

__all__ = [
    "get_config",
    "load_config",
    "Config",
    "AgentFlowError",
    "NotFoundError",
    "ValidationError",
    "ExecutionLogger",
    "configure_logging",
    "log_event",
]
