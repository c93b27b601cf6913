# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Trigger Registry

Routes raw events to the handler for their trigger type. Populated once at
startup and only read afterwards, so concurrent executions share it safely.
"""

import logging
from typing import Any, Dict, List, Optional

from agentflow.core.config import Config
from agentflow.core.logging import log_event
from agentflow.models import AgentTrigger, SetupResult, TriggerPayload, ValidationResult
from agentflow.triggers.base import TriggerHandler
from agentflow.triggers.crm import CRMEventTriggerHandler
from agentflow.triggers.email import EmailTriggerHandler
from agentflow.triggers.exceptions import UnknownTriggerTypeError
from agentflow.triggers.manual import ManualTriggerHandler
from agentflow.triggers.payment import PaymentTriggerHandler
from agentflow.triggers.schedule import ScheduleTriggerHandler
from agentflow.triggers.webhook import WebhookTriggerHandler

logger = logging.getLogger(__name__)


class TriggerRegistry:
    """Registry of trigger handlers keyed by trigger type"""

    def __init__(self, handlers: Optional[List[TriggerHandler]] = None):
        self._handlers: Dict[str, TriggerHandler] = {}
        for handler in handlers or []:
            self.register(handler)

    def register(self, handler: TriggerHandler) -> None:
        """Register a handler; the last registration for a trigger type wins"""
        self._handlers[handler.trigger_type] = handler

    def get(self, trigger_type: str) -> Optional[TriggerHandler]:
        return self._handlers.get(trigger_type)

    def get_all(self) -> List[TriggerHandler]:
        return list(self._handlers.values())

    def _require(self, trigger_type: str) -> TriggerHandler:
        handler = self._handlers.get(trigger_type)
        if handler is None:
            log_event(logger, "Unknown trigger type", level="WARNING", trigger_type=trigger_type)
            raise UnknownTriggerTypeError(trigger_type)
        return handler

    async def process_trigger(self, trigger: AgentTrigger, raw_data: Any) -> Optional[TriggerPayload]:
        """
        Parse and filter an incoming event.

        Returns the normalized payload, or None when the event does not match
        the trigger's filters (the caller must not execute on None).

        Raises:
            UnknownTriggerTypeError: no handler for trigger.trigger_type
            ValidationError: the handler rejected the raw data
        """
        handler = self._require(trigger.trigger_type)

        payload = await handler.parse_payload(raw_data, trigger.config)

        if not handler.matches_filters(payload, trigger.config):
            log_event(
                logger,
                "Trigger event filtered out",
                level="DEBUG",
                trigger_id=trigger.id,
                trigger_type=trigger.trigger_type,
            )
            return None

        return payload

    def validate_config(self, trigger_type: str, config: Dict[str, Any]) -> ValidationResult:
        handler = self._handlers.get(trigger_type)
        if handler is None:
            return ValidationResult(valid=False, errors=[f"Unknown trigger type: {trigger_type}"])
        return handler.validate_config(config or {})

    async def setup_trigger(self, trigger: AgentTrigger) -> SetupResult:
        """Run the handler's setup hook; handlers without one succeed as a no-op"""
        handler = self._require(trigger.trigger_type)
        if not handler.supports_setup:
            return SetupResult(success=True)
        return await handler.setup(trigger)

    async def teardown_trigger(self, trigger: AgentTrigger) -> None:
        handler = self._require(trigger.trigger_type)
        if handler.supports_teardown:
            await handler.teardown(trigger)


def create_trigger_registry(config: Optional[Config] = None) -> TriggerRegistry:
    """Registry with all built-in handlers"""
    config = config or Config()
    return TriggerRegistry([
        EmailTriggerHandler(),
        WebhookTriggerHandler(base_url=config.webhook_base_url),
        ScheduleTriggerHandler(),
        ManualTriggerHandler(),
        CRMEventTriggerHandler(),
        PaymentTriggerHandler(),
    ])
