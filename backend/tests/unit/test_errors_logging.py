# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for the error hierarchy and structured logging
"""

import io
import json
import logging

from agentflow.core.errors import (
    AgentFlowError,
    ExecutionError,
    NotFoundError,
    ValidationError,
    sanitize_error_for_user,
)
from agentflow.core.logging import ExecutionLogger, JSONFormatter, TextFormatter, configure_logging, log_event
from agentflow.triggers.exceptions import RequiredInputMissingError, UnknownTriggerTypeError
from agentflow.workflow.exceptions import UnknownNodeTypeError, WorkflowPlanningError


def test_error_to_dict():
    error = NotFoundError("Agent", "agent-9")
    assert error.to_dict() == {
        "error": "NotFoundError",
        "message": "Agent not found: agent-9",
        "status_code": 404,
        "details": {},
    }


def test_hierarchy_status_codes():
    assert ValidationError("bad").status_code == 400
    assert UnknownTriggerTypeError("x").status_code == 400
    assert isinstance(RequiredInputMissingError("email"), ValidationError)
    assert isinstance(WorkflowPlanningError("no trigger"), ExecutionError)
    assert isinstance(WorkflowPlanningError("no trigger"), AgentFlowError)


def test_sanitize_error_truncates():
    message = sanitize_error_for_user(ValueError("x" * 600))
    assert message.startswith("ValueError: ")
    assert message.endswith("...")
    assert len(message) < 600


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("agentflow.test", logging.INFO, __file__, 1, "Step failed", None, None)
    record.node_id = "n1"
    record.execution_id = "e1"

    data = json.loads(JSONFormatter().format(record))

    assert data["message"] == "Step failed"
    assert data["level"] == "INFO"
    assert data["logger"] == "agentflow.test"
    assert data["node_id"] == "n1"
    assert data["execution_id"] == "e1"


def test_log_event_passes_fields(caplog):
    logger = logging.getLogger("agentflow.test.events")

    with caplog.at_level(logging.WARNING, logger="agentflow.test.events"):
        log_event(logger, "Execution budget exceeded", level="WARNING", budget="max_steps", limit=3)

    record = caplog.records[-1]
    assert record.getMessage() == "Execution budget exceeded"
    assert record.budget == "max_steps"
    assert record.limit == 3


def test_sanitize_error_keeps_first_line_only():
    error = RuntimeError("connection refused\nTraceback (most recent call last):\n  ...")
    assert sanitize_error_for_user(error, include_type=False) == "connection refused"


def test_unknown_node_type_error_carries_node():
    error = UnknownNodeTypeError("n7", "teleport")
    assert error.node_id == "n7"
    assert error.node_type == "teleport"
    assert error.message == "Unknown node type: teleport"


def test_execution_logger_merges_bound_and_call_fields(caplog):
    logger = logging.getLogger("agentflow.test.adapter")
    log = ExecutionLogger(logger, "exec-1", agent_id="agent-1")

    with caplog.at_level(logging.INFO, logger="agentflow.test.adapter"):
        log_event(log, "Step failed", node_id="n2")

    record = caplog.records[-1]
    assert record.execution_id == "exec-1"
    assert record.agent_id == "agent-1"
    assert record.node_id == "n2"


def test_text_formatter_appends_context():
    record = logging.LogRecord("agentflow.test", logging.WARNING, __file__, 1, "Budget hit", None, None)
    record.limit = 3
    record.budget = "max_steps"

    line = TextFormatter().format(record)

    assert "agentflow.test: Budget hit" in line
    assert line.endswith("[budget=max_steps limit=3]")


def test_configure_logging_replaces_handlers():
    stream = io.StringIO()
    configure_logging("DEBUG", "json")
    logger = configure_logging("DEBUG", "json", stream=stream)

    assert len(logger.handlers) == 1
    logging.getLogger("agentflow.test.configured").debug("hello", extra={"node_id": "n1"})

    data = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert data["message"] == "hello"
    assert data["node_id"] == "n1"
