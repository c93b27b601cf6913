# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for the action registry and built-in control-flow executors
"""

import pytest
from unittest.mock import AsyncMock, patch

from agentflow.actions.base import ActionExecutor, ActionResult
from agentflow.actions.control_flow import ConditionExecutor, DelayExecutor, SetVariableExecutor, compare
from agentflow.actions.registry import ActionRegistry, create_action_registry


class EchoExecutor(ActionExecutor):
    action_type = "echo"

    async def execute(self, config, context):
        return ActionResult(success=True, data=dict(config), tokens_used=10)


class TestActionRegistry:
    def test_builtins(self):
        registry = create_action_registry()
        assert sorted(e.action_type for e in registry.get_all()) == ["condition", "delay", "set_variable"]

    @pytest.mark.asyncio
    async def test_execute_dispatches_by_type(self, execution_context):
        registry = ActionRegistry([EchoExecutor()])
        result = await registry.execute("echo", {"a": 1}, execution_context)

        assert result.success
        assert result.data == {"a": 1}
        assert result.tokens_used == 10

    @pytest.mark.asyncio
    async def test_unknown_type_is_failure(self, execution_context):
        result = await ActionRegistry().execute("send_sms", {}, execution_context)

        assert not result.success
        assert result.error == "No executor found for action type: send_sms"

    @pytest.mark.asyncio
    async def test_invalid_config_is_not_executed(self, execution_context):
        registry = create_action_registry()
        result = await registry.execute("delay", {"duration": 0, "unit": "weeks"}, execution_context)

        assert not result.success
        assert "Duration must be greater than 0" in result.error
        assert "Invalid duration unit" in result.error


class TestCompare:
    @pytest.mark.parametrize("value,operator,other,expected", [
        (5, "eq", 5, True),
        ("a", "neq", "b", True),
        ("10", "gt", 9, True),
        ("abc", "gt", 1, False),
        (3, "lte", 3, True),
        ("hello world", "contains", "world", True),
        ("invoice-42", "startsWith", "invoice", True),
        ("report.pdf", "endsWith", ".pdf", True),
        ("INV-2025-001", "regex", r"^INV-\d{4}", True),
        (None, "exists", None, False),
        (0, "exists", None, True),
        (1, "between", 2, False),
    ])
    def test_operators(self, value, operator, other, expected):
        assert compare(value, operator, other) is expected


class TestConditionExecutor:
    @pytest.mark.asyncio
    async def test_conditions_list(self, execution_context):
        config = {"conditions": [{"field": "trigger.data.amount", "operator": "gt", "value": 100}]}
        result = await ConditionExecutor().execute(config, execution_context)

        assert result.success
        assert result.data == {"result": True, "branch": "true"}

    @pytest.mark.asyncio
    async def test_conditions_fold_left_to_right(self, execution_context):
        config = {"conditions": [
            {"field": "customer", "operator": "eq", "value": "Other", "logicalOperator": "or"},
            {"field": "vip", "operator": "eq", "value": True},
        ]}
        result = await ConditionExecutor().execute(config, execution_context)

        assert result.data["result"] is True

    @pytest.mark.asyncio
    async def test_expression(self, execution_context):
        result = await ConditionExecutor().execute({"expression": "data.amount > 500 or not vip"}, execution_context)

        assert result.success
        assert result.data == {"result": False, "branch": "false"}

    @pytest.mark.asyncio
    async def test_bad_expression_is_failure(self, execution_context):
        result = await ConditionExecutor().execute({"expression": "__import__('os')"}, execution_context)

        assert not result.success
        assert result.error

    def test_validate(self):
        executor = ConditionExecutor()
        assert executor.validate({"expression": "vip"}).valid
        assert not executor.validate({}).valid
        assert executor.validate({"conditions": [{"field": "x", "operator": "like"}]}).errors == [
            "Invalid condition operator: like"
        ]


class TestDelayExecutor:
    @pytest.mark.asyncio
    async def test_short_delay_sleeps(self, execution_context):
        with patch("agentflow.actions.control_flow.asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await DelayExecutor().execute({"duration": 2, "unit": "seconds"}, execution_context)

        sleep.assert_awaited_once_with(2)
        assert result.data["delayed_ms"] == 2000
        assert result.data["resumed_at"]

    @pytest.mark.asyncio
    async def test_long_delay_does_not_sleep(self, execution_context):
        with patch("agentflow.actions.control_flow.asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await DelayExecutor(max_inline_ms=1000).execute({"duration": 1, "unit": "hours"}, execution_context)

        sleep.assert_not_awaited()
        assert result.success
        assert result.data["delayed_ms"] == 3600 * 1000


class TestSetVariableExecutor:
    @pytest.mark.asyncio
    async def test_interpolates_and_coerces(self, execution_context):
        config = {"variables": [
            {"name": "greeting", "value": "Hello {{customer}}"},
            {"name": "amount", "value": "{{trigger.data.amount}}", "type": "number"},
            {"name": "flag", "value": "true", "type": "boolean"},
            {"name": "tags", "value": '["a"]', "type": "json"},
        ]}
        result = await SetVariableExecutor().execute(config, execution_context)

        assert result.success
        assert result.data == {"greeting": "Hello Acme", "amount": 150, "flag": True, "tags": ["a"]}

    @pytest.mark.asyncio
    async def test_bad_number_is_failure(self, execution_context):
        config = {"variables": [{"name": "n", "value": "{{missing}}", "type": "number"}]}
        result = await SetVariableExecutor().execute(config, execution_context)

        assert not result.success
        assert result.error.startswith("Failed to set variables")

    def test_validate(self):
        assert not SetVariableExecutor().validate({"variables": []}).valid
        assert SetVariableExecutor().validate({"variables": [{"name": ""}]}).errors == ["Variable name is required"]
