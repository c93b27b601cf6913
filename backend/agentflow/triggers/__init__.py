# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Trigger handlers and registry.
"""

from agentflow.triggers.base import TriggerHandler
from agentflow.triggers.crm import CRMEventTriggerHandler
from agentflow.triggers.email import EmailTriggerHandler, matches_email_pattern
from agentflow.triggers.exceptions import (
    InvalidInputError,
    InvalidPayloadError,
    RequiredInputMissingError,
    UnknownTriggerTypeError,
)
from agentflow.triggers.manual import ManualTriggerHandler
from agentflow.triggers.payment import PaymentTriggerHandler
from agentflow.triggers.registry import TriggerRegistry, create_trigger_registry
from agentflow.triggers.schedule import ScheduleTriggerHandler, describe_cron, get_next_run
from agentflow.triggers.webhook import WebhookTriggerHandler, sign_payload, verify_signature

__all__ = [
    "TriggerHandler",
    "TriggerRegistry",
    "create_trigger_registry",
    "EmailTriggerHandler",
    "WebhookTriggerHandler",
    "ScheduleTriggerHandler",
    "ManualTriggerHandler",
    "CRMEventTriggerHandler",
    "PaymentTriggerHandler",
    "matches_email_pattern",
    "sign_payload",
    "verify_signature",
    "describe_cron",
    "get_next_run",
    "InvalidInputError",
    "InvalidPayloadError",
    "RequiredInputMissingError",
    "UnknownTriggerTypeError",
]
