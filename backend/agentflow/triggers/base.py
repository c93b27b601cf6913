# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Trigger handler interface.

A handler turns raw external data into a normalized TriggerPayload and
decides whether that payload matches the trigger's configured filters.
Lifecycle hooks are opt-in through the supports_setup / supports_teardown
capability flags; the registry never calls a hook whose flag is False.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from agentflow.models import AgentTrigger, SetupResult, TriggerMetadata, TriggerPayload, ValidationResult
from agentflow.triggers.exceptions import InvalidPayloadError

ModelT = TypeVar("ModelT", bound=BaseModel)


class TriggerHandler(ABC):
    """Base class for trigger handlers"""

    trigger_type: str = ""
    supports_setup: bool = False
    supports_teardown: bool = False

    @abstractmethod
    def validate_config(self, config: Dict[str, Any]) -> ValidationResult:
        """Check a trigger's configuration without raising"""

    @abstractmethod
    async def parse_payload(self, raw_data: Any, config: Dict[str, Any]) -> TriggerPayload:
        """Normalize raw event data"""

    @abstractmethod
    def matches_filters(self, payload: TriggerPayload, config: Dict[str, Any]) -> bool:
        """Whether the normalized payload passes the trigger's filters"""

    async def setup(self, trigger: AgentTrigger) -> SetupResult:
        return SetupResult(success=True)

    async def teardown(self, trigger: AgentTrigger) -> None:
        return None

    def _build_payload(self, data: Dict[str, Any], source: str, raw_data: Optional[Any] = None) -> TriggerPayload:
        return TriggerPayload(
            data=data,
            metadata=TriggerMetadata(source=source, raw_data=raw_data),
        )

    def _parse_raw(self, model: Type[ModelT], raw_data: Any) -> ModelT:
        """Validate raw event data against a pydantic model"""
        try:
            return model.model_validate(raw_data if raw_data is not None else {})
        except PydanticValidationError as e:
            raise InvalidPayloadError(
                f"Invalid {self.trigger_type} payload: {e.error_count()} validation error(s)",
                details={"errors": e.errors(include_url=False, include_context=False)},
            )


def result_from_errors(errors) -> ValidationResult:
    return ValidationResult(valid=not errors, errors=list(errors))
