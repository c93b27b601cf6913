# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Variable resolution for action configs.

Supports {{variable}} templates with dotted paths such as
{{trigger.data.email}} or {{steps.classify.data.label}}.
"""

import re
from typing import Any

from agentflow.models import ExecutionContext

TEMPLATE_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def get_nested_value(obj: Any, path: str) -> Any:
    """Get nested value using dot notation; None when any segment is missing"""
    current = obj
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def interpolate_variables(template: str, context: ExecutionContext) -> str:
    """Replace {{path}} references; unresolved references are left untouched"""
    variables = context.variable_context()

    def replace_ref(match):
        value = get_nested_value(variables, match.group(1).strip())
        return str(value) if value is not None else match.group(0)

    return TEMPLATE_PATTERN.sub(replace_ref, template)