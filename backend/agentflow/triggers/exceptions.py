# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Trigger exceptions.
"""

from agentflow.core.errors import ValidationError


class UnknownTriggerTypeError(ValidationError):
    """No handler registered for the trigger type; indicates an upstream data bug"""

    def __init__(self, trigger_type: str):
        super().__init__(
            f"No handler found for trigger type: {trigger_type}",
            field="triggerType",
        )
        self.trigger_type = trigger_type


class InvalidPayloadError(ValidationError):
    """Raw trigger data could not be parsed"""
    pass


class RequiredInputMissingError(ValidationError):
    """A manual trigger input marked required was not supplied"""

    def __init__(self, input_name: str):
        super().__init__(f"Required input missing: {input_name}", field=input_name)
        self.input_name = input_name


class InvalidInputError(ValidationError):
    """A manual trigger input could not be coerced to its declared type"""
    pass

