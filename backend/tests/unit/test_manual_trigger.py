# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for the manual trigger
"""

import pytest

from agentflow.triggers.exceptions import InvalidInputError, InvalidPayloadError, RequiredInputMissingError
from agentflow.triggers.manual import ManualTriggerHandler, coerce_input


@pytest.fixture
def handler():
    return ManualTriggerHandler()


@pytest.fixture
def config():
    return {
        "requiredInputs": [
            {"name": "email", "type": "string", "required": True},
            {"name": "count", "type": "number", "required": False},
            {"name": "notify", "type": "boolean"},
            {"name": "options", "type": "json"},
        ]
    }


class TestCoercion:
    def test_number(self):
        assert coerce_input("n", "42", "number") == 42
        assert coerce_input("n", "2.5", "number") == 2.5
        assert coerce_input("n", 7, "number") == 7

    def test_boolean(self):
        assert coerce_input("b", "yes", "boolean") is True
        assert coerce_input("b", "false", "boolean") is False

    def test_json(self):
        assert coerce_input("j", '{"a": [1, 2]}', "json") == {"a": [1, 2]}

    def test_invalid_values_raise(self):
        with pytest.raises(InvalidInputError):
            coerce_input("n", "many", "number")
        with pytest.raises(InvalidInputError):
            coerce_input("b", "maybe", "boolean")
        with pytest.raises(InvalidInputError):
            coerce_input("j", "{broken", "json")


class TestManualConfig:
    def test_valid(self, handler, config):
        assert handler.validate_config(config).valid

    def test_invalid_input_declarations(self, handler):
        result = handler.validate_config({"requiredInputs": [{"name": " ", "type": "date"}]})
        assert result.errors == ["Input name cannot be empty", "Invalid input type: date"]


class TestManualPayload:
    @pytest.mark.asyncio
    async def test_coerces_declared_inputs(self, handler, config):
        payload = await handler.parse_payload(
            {"email": "bob@acme.com", "count": "3", "notify": "true", "options": "[1]"},
            config,
        )
        assert payload.data == {"email": "bob@acme.com", "count": 3, "notify": True, "options": [1]}
        assert payload.metadata.source == "manual"

    @pytest.mark.asyncio
    async def test_missing_required_input_raises(self, handler, config):
        with pytest.raises(RequiredInputMissingError) as exc_info:
            await handler.parse_payload({"count": 1}, config)

        assert exc_info.value.message == "Required input missing: email"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_optional_inputs_may_be_absent(self, handler, config):
        payload = await handler.parse_payload({"email": "bob@acme.com"}, config)
        assert payload.data == {"email": "bob@acme.com"}

    @pytest.mark.asyncio
    async def test_undeclared_inputs_pass_through(self, handler, config):
        payload = await handler.parse_payload({"email": "a@b.co", "extra": {"k": "v"}}, config)
        assert payload.data["extra"] == {"k": "v"}

    @pytest.mark.asyncio
    async def test_non_object_rejected(self, handler, config):
        with pytest.raises(InvalidPayloadError):
            await handler.parse_payload("email=a@b.co", config)

    @pytest.mark.asyncio
    async def test_always_matches(self, handler):
        payload = await handler.parse_payload({}, {})
        assert handler.matches_filters(payload, {}) is True
