# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Payment Trigger
Fires on payments received through Vipps or Stripe
"""

from typing import Dict, Any, Optional

from agentflow.models import CamelModel, TriggerPayload, TriggerType, ValidationResult
from agentflow.triggers.base import TriggerHandler, result_from_errors

PROVIDERS = ("vipps", "stripe")


class PaymentEvent(CamelModel):
    transaction_id: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    status: Optional[str] = None
    customer_id: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    description: Optional[str] = None
    metadata: Dict[str, Any] = {}


class PaymentTriggerHandler(TriggerHandler):
    trigger_type = TriggerType.PAYMENT_RECEIVED.value

    def validate_config(self, config: Dict[str, Any]) -> ValidationResult:
        errors = []

        if config.get("provider") not in PROVIDERS:
            errors.append(f"Invalid provider: {config.get('provider')}")

        min_amount = config.get("minAmount")
        if min_amount is not None:
            if not isinstance(min_amount, (int, float)) or isinstance(min_amount, bool):
                errors.append(f"Invalid minimum amount: {min_amount}")
            elif min_amount < 0:
                errors.append("Minimum amount cannot be negative")

        return result_from_errors(errors)

    async def parse_payload(self, raw_data: Any, config: Dict[str, Any]) -> TriggerPayload:
        payment = self._parse_raw(PaymentEvent, raw_data)
        provider = config.get("provider")

        data = {"provider": provider}
        data.update(payment.model_dump())
        return self._build_payload(data, source=f"payment_{provider}", raw_data=raw_data)

    def matches_filters(self, payload: TriggerPayload, config: Dict[str, Any]) -> bool:
        data = payload.data

        min_amount = config.get("minAmount")
        if min_amount is not None:
            amount = data.get("amount")
            if amount is None or amount < min_amount:
                return False

        currency = config.get("currency")
        if currency:
            if (data.get("currency") or "").upper() != currency.upper():
                return False

        return True
