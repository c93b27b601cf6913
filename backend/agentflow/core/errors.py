# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
AgentFlow exception hierarchy.

Every error carries the HTTP status the API layer answers with, so routes
translate them with `HTTPException(status_code=e.status_code, detail=e.message)`.
"""

from typing import Any, Dict, Optional

MAX_USER_MESSAGE_LENGTH = 500


class AgentFlowError(Exception):
    """Base class; `status_code` is overridden per subclass"""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }


class NotFoundError(AgentFlowError):
    """An agent, trigger or webhook does not exist (or is disabled)"""

    status_code = 404

    def __init__(self, resource: str, identifier: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"{resource} not found: {identifier}", details)
        self.resource = resource
        self.identifier = identifier


class ValidationError(AgentFlowError):
    """
    Rejected input: trigger payloads, trigger configuration, manual inputs.

    `field` names the offending input when there is one.
    """

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.field = field


class ConfigurationError(AgentFlowError):
    """The YAML config file is missing, unreadable or malformed"""

    def __init__(self, message: str, config_file: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.config_file = config_file


class ExecutionError(AgentFlowError):
    """Raised while planning or running a workflow"""

    def __init__(
        self,
        message: str,
        execution_id: Optional[str] = None,
        node_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.execution_id = execution_id
        self.node_id = node_id


def sanitize_error_for_user(error: Exception, include_type: bool = True) -> str:
    """
    First line of the error message, truncated, for API responses.

    Multi-line messages (tracebacks, dumped payloads) never reach the client.
    """
    lines = str(error).strip().splitlines()
    message = lines[0] if lines else ""

    if len(message) > MAX_USER_MESSAGE_LENGTH:
        message = message[:MAX_USER_MESSAGE_LENGTH] + "..."

    if include_type:
        return f"{type(error).__name__}: {message}"
    return message
