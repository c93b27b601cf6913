# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Manual Trigger
Started by a user with named, typed inputs
"""

import json
from typing import Dict, Any

from agentflow.models import TriggerPayload, TriggerType, ValidationResult
from agentflow.triggers.base import TriggerHandler, result_from_errors
from agentflow.triggers.exceptions import InvalidInputError, InvalidPayloadError, RequiredInputMissingError

INPUT_TYPES = ("string", "number", "boolean", "json")

TRUE_STRINGS = {"true", "1", "yes", "on"}
FALSE_STRINGS = {"false", "0", "no", "off", ""}


def coerce_input(name: str, value: Any, input_type: str) -> Any:
    """Coerce a submitted value to its declared input type"""
    if input_type == "number":
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise InvalidInputError(f"Input '{name}' must be a number", field=name)
        return int(number) if number.is_integer() else number

    if input_type == "boolean":
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in TRUE_STRINGS:
                return True
            if lowered in FALSE_STRINGS:
                return False
            raise InvalidInputError(f"Input '{name}' must be a boolean", field=name)
        return bool(value)

    if input_type == "json":
        if not isinstance(value, str):
            return value
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            raise InvalidInputError(f"Input '{name}' must be valid JSON", field=name)

    return str(value)


class ManualTriggerHandler(TriggerHandler):
    trigger_type = TriggerType.MANUAL.value

    def validate_config(self, config: Dict[str, Any]) -> ValidationResult:
        errors = []

        for input_def in config.get("requiredInputs") or []:
            if not str(input_def.get("name") or "").strip():
                errors.append("Input name cannot be empty")
            if input_def.get("type") not in INPUT_TYPES:
                errors.append(f"Invalid input type: {input_def.get('type')}")

        return result_from_errors(errors)

    async def parse_payload(self, raw_data: Any, config: Dict[str, Any]) -> TriggerPayload:
        if raw_data is None:
            raw_data = {}
        if not isinstance(raw_data, dict):
            raise InvalidPayloadError("Manual trigger input must be an object")

        validated: Dict[str, Any] = {}

        for input_def in config.get("requiredInputs") or []:
            name = input_def["name"]
            value = raw_data.get(name)

            if value is None:
                if input_def.get("required"):
                    raise RequiredInputMissingError(name)
                continue

            validated[name] = coerce_input(name, value, input_def.get("type", "string"))

        # Undeclared inputs pass through unchanged
        for key, value in raw_data.items():
            if key not in validated:
                validated[key] = value

        return self._build_payload(validated, source="manual")

    def matches_filters(self, payload: TriggerPayload, config: Dict[str, Any]) -> bool:
        return True
