# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Control-flow executors: condition, delay and set_variable.
"""

import asyncio
import json
import logging
import re
from datetime import datetime, timezone
from typing import Dict, Any, List

from agentflow.actions.base import ActionExecutor, ActionResult
from agentflow.actions.evaluator import check_expression, evaluate_condition
from agentflow.actions.variables import get_nested_value, interpolate_variables
from agentflow.models import ExecutionContext, ValidationResult

logger = logging.getLogger(__name__)


# =============================================================================
# CONDITION
# =============================================================================

CONDITION_OPERATORS = (
    "eq", "neq", "gt", "lt", "gte", "lte",
    "contains", "startsWith", "endsWith", "regex", "exists",
)


def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def compare(field_value: Any, operator: str, compare_value: Any) -> bool:
    """Apply one condition operator; numeric operators compare as floats (NaN never matches)"""
    if operator == "eq":
        return field_value == compare_value
    if operator == "neq":
        return field_value != compare_value
    if operator == "gt":
        return _as_number(field_value) > _as_number(compare_value)
    if operator == "lt":
        return _as_number(field_value) < _as_number(compare_value)
    if operator == "gte":
        return _as_number(field_value) >= _as_number(compare_value)
    if operator == "lte":
        return _as_number(field_value) <= _as_number(compare_value)
    if operator == "contains":
        return str(compare_value) in str(field_value)
    if operator == "startsWith":
        return str(field_value).startswith(str(compare_value))
    if operator == "endsWith":
        return str(field_value).endswith(str(compare_value))
    if operator == "regex":
        return re.search(str(compare_value), str(field_value)) is not None
    if operator == "exists":
        return field_value is not None
    return False


class ConditionExecutor(ActionExecutor):
    """
    Evaluates a condition node.

    Config is either {"expression": "..."} (safe AST evaluation) or
    {"conditions": [{field, operator, value, logicalOperator?}]}, folded
    left to right: each condition's logicalOperator joins it to the next one.
    """

    action_type = "condition"

    async def execute(self, config: Dict[str, Any], context: ExecutionContext) -> ActionResult:
        variables = context.variable_context()
        try:
            if config.get("expression"):
                result = evaluate_condition(config["expression"], variables)
            else:
                result = self._evaluate_conditions(config.get("conditions", []), variables)
        except (ValueError, SyntaxError, re.error) as e:
            return ActionResult(success=False, error=str(e))

        return ActionResult(
            success=True,
            data={"result": result, "branch": "true" if result else "false"},
        )

    def _evaluate_conditions(self, conditions: List[Dict[str, Any]], variables: Dict[str, Any]) -> bool:
        result = True
        current_operator = "and"

        for condition in conditions:
            field_value = get_nested_value(variables, condition["field"])
            matched = compare(field_value, condition["operator"], condition.get("value"))

            if current_operator == "and":
                result = result and matched
            else:
                result = result or matched

            if condition.get("logicalOperator"):
                current_operator = condition["logicalOperator"]

        return result

    def validate(self, config: Dict[str, Any]) -> ValidationResult:
        errors = []

        if config.get("expression"):
            errors = check_expression(config["expression"])
            return ValidationResult(valid=not errors, errors=errors)

        conditions = config.get("conditions") or []
        if not conditions:
            errors.append("At least one condition is required")

        for condition in conditions:
            if not condition.get("field"):
                errors.append("Condition field is required")
            if not condition.get("operator"):
                errors.append("Condition operator is required")
            elif condition["operator"] not in CONDITION_OPERATORS:
                errors.append(f"Invalid condition operator: {condition['operator']}")
            if condition.get("logicalOperator") not in (None, "and", "or"):
                errors.append(f"Invalid logical operator: {condition['logicalOperator']}")

        return ValidationResult(valid=not errors, errors=errors)


# =============================================================================
# DELAY
# =============================================================================

DELAY_UNITS_MS = {
    "seconds": 1000,
    "minutes": 60 * 1000,
    "hours": 60 * 60 * 1000,
    "days": 24 * 60 * 60 * 1000,
}


class DelayExecutor(ActionExecutor):
    """
    Waits before continuing.

    Only delays up to max_inline_ms are actually slept; longer ones are
    reported as completed so a scheduler outside this engine can resume them.
    """

    action_type = "delay"

    def __init__(self, max_inline_ms: int = 30 * 1000):
        self.max_inline_ms = max_inline_ms

    async def execute(self, config: Dict[str, Any], context: ExecutionContext) -> ActionResult:
        delay_ms = int(config["duration"] * DELAY_UNITS_MS[config["unit"]])

        if delay_ms <= self.max_inline_ms:
            await asyncio.sleep(delay_ms / 1000)
        else:
            logger.info(
                "Delay exceeds inline limit, not sleeping",
                extra={"delay_ms": delay_ms, "execution_id": context.execution_id}
            )

        return ActionResult(
            success=True,
            data={
                "delayed_ms": delay_ms,
                "resumed_at": datetime.now(timezone.utc).isoformat(),
            },
        )

    def validate(self, config: Dict[str, Any]) -> ValidationResult:
        errors = []

        duration = config.get("duration")
        if not isinstance(duration, (int, float)) or isinstance(duration, bool) or duration <= 0:
            errors.append("Duration must be greater than 0")

        if config.get("unit") not in DELAY_UNITS_MS:
            errors.append("Invalid duration unit")

        return ValidationResult(valid=not errors, errors=errors)


# =============================================================================
# SET VARIABLE
# =============================================================================

def coerce_variable(value: str, value_type: str) -> Any:
    if value_type == "number":
        number = float(value)
        return int(number) if number.is_integer() else number
    if value_type == "boolean":
        return value in ("true", "1")
    if value_type == "json":
        return json.loads(value)
    return value


class SetVariableExecutor(ActionExecutor):
    """Sets workflow variables from interpolated templates"""

    action_type = "set_variable"

    async def execute(self, config: Dict[str, Any], context: ExecutionContext) -> ActionResult:
        assigned = {}
        try:
            for variable in config["variables"]:
                value = interpolate_variables(str(variable.get("value", "")), context)
                assigned[variable["name"]] = coerce_variable(value, variable.get("type", "string"))
        except ValueError as e:
            return ActionResult(success=False, error=f"Failed to set variables: {e}")

        return ActionResult(success=True, data=assigned)

    def validate(self, config: Dict[str, Any]) -> ValidationResult:
        errors = []

        variables = config.get("variables") or []
        if not variables:
            errors.append("At least one variable is required")

        for variable in variables:
            if not str(variable.get("name", "")).strip():
                errors.append("Variable name is required")

        return ValidationResult(valid=not errors, errors=errors)
