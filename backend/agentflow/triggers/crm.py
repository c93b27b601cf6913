# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
CRM Event Trigger
Fires on entity changes reported by a CRM integration
"""

from typing import Dict, Any, Optional

from agentflow.models import CamelModel, TriggerPayload, TriggerType, ValidationResult
from agentflow.triggers.base import TriggerHandler, result_from_errors

EVENT_TYPES = ("created", "updated", "deleted")
ENTITY_TYPES = ("contact", "deal", "task", "invoice")
INTEGRATIONS = ("tripletex", "fiken")


class CrmEvent(CamelModel):
    event_type: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    entity: Dict[str, Any] = {}
    changes: Optional[Dict[str, Any]] = None
    previous_values: Optional[Dict[str, Any]] = None
    user_id: Optional[str] = None


class CRMEventTriggerHandler(TriggerHandler):
    trigger_type = TriggerType.CRM_EVENT.value

    def validate_config(self, config: Dict[str, Any]) -> ValidationResult:
        errors = []

        if config.get("eventType") not in EVENT_TYPES:
            errors.append(f"Invalid event type: {config.get('eventType')}")

        if config.get("entityType") not in ENTITY_TYPES:
            errors.append(f"Invalid entity type: {config.get('entityType')}")

        if config.get("integration") not in INTEGRATIONS:
            errors.append(f"Invalid integration: {config.get('integration')}")

        return result_from_errors(errors)

    async def parse_payload(self, raw_data: Any, config: Dict[str, Any]) -> TriggerPayload:
        event = self._parse_raw(CrmEvent, raw_data)
        integration = config.get("integration")

        # Event/entity type come from the event itself when the integration reports them
        data = {
            "event_type": event.event_type or config.get("eventType"),
            "entity_type": event.entity_type or config.get("entityType"),
            "integration": integration,
            "entity_id": event.entity_id,
            "entity": event.entity,
            "changes": event.changes,
            "previous_values": event.previous_values,
            "user_id": event.user_id,
        }
        return self._build_payload(data, source=f"crm_{integration}", raw_data=raw_data)

    def matches_filters(self, payload: TriggerPayload, config: Dict[str, Any]) -> bool:
        data = payload.data

        if data.get("event_type") != config.get("eventType"):
            return False

        if data.get("entity_type") != config.get("entityType"):
            return False

        entity = data.get("entity") or {}
        for field, expected in (config.get("filters") or {}).items():
            if field not in entity or entity[field] != expected:
                return False

        return True
