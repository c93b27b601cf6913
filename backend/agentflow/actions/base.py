# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Action executor interface.

Concrete actions (AI calls, integrations, HTTP calls) live behind the
registry; this module only defines the contract they share.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

from agentflow.models import CamelModel, ExecutionContext, ValidationResult


class ActionResult(CamelModel):
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    tokens_used: Optional[int] = None


class ActionExecutor(ABC):
    """Base class for action executors"""

    action_type: str = ""

    @abstractmethod
    async def execute(self, config: Dict[str, Any], context: ExecutionContext) -> ActionResult:
        """Run the action against the current execution context"""

    def validate(self, config: Dict[str, Any]) -> ValidationResult:
        return ValidationResult(valid=True)
