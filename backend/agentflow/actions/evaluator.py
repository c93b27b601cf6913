# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Condition Expressions

Boolean expressions for condition nodes, e.g.
"data.amount > 100 and (vip or lower(data.tier) == 'gold')".

Expressions are parsed with `ast`, checked against a whitelist of node types
and then walked directly; nothing is ever passed to eval(). Names resolve
against the execution's variable context, dotted access reads dict keys.
"""

import ast
import operator
from functools import lru_cache
from typing import Any, Callable, Dict, List

BINARY_OPERATORS: Dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Mod: operator.mod,
}

UNARY_OPERATORS: Dict[type, Callable[[Any], Any]] = {
    ast.Not: operator.not_,
    ast.USub: operator.neg,
    ast.UAdd: operator.pos,
}

COMPARISONS: Dict[type, Callable[[Any, Any], bool]] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
    ast.In: lambda left, right: left in right,
    ast.NotIn: lambda left, right: left not in right,
    ast.Is: operator.is_,
    ast.IsNot: operator.is_not,
}

FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "len": len,
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "abs": abs,
    "min": min,
    "max": max,
    "lower": lambda value: str(value).lower(),
    "upper": lambda value: str(value).upper(),
}

# Workflow configs are JSON, so accept its literal spellings too
LITERALS = {"true": True, "false": False, "null": None}

ALLOWED_NODES = (
    ast.Expression, ast.Constant, ast.Name, ast.Load, ast.Attribute,
    ast.Subscript, ast.List, ast.Tuple, ast.BinOp, ast.UnaryOp,
    ast.Compare, ast.BoolOp, ast.And, ast.Or, ast.Call, ast.keyword,
) + tuple(BINARY_OPERATORS) + tuple(UNARY_OPERATORS) + tuple(COMPARISONS)


@lru_cache(maxsize=256)
def parse_expression(expression: str) -> ast.Expression:
    """
    Parse and whitelist-check an expression.

    Raises:
        SyntaxError: expression does not parse
        ValueError: expression uses a construct that is not allowed
    """
    try:
        tree = ast.parse(expression.strip(), mode="eval")
    except SyntaxError as e:
        raise SyntaxError(f"Invalid condition syntax: {e.msg}")

    for node in ast.walk(tree):
        if not isinstance(node, ALLOWED_NODES):
            raise ValueError(f"Expression construct not allowed: {type(node).__name__}")
        if isinstance(node, ast.Attribute) and node.attr.startswith("_"):
            raise ValueError(f"Private attribute not allowed: {node.attr}")
        if isinstance(node, ast.Call) and not (isinstance(node.func, ast.Name) and node.func.id in FUNCTIONS):
            raise ValueError(f"Function not allowed: {ast.unparse(node.func)}")

    return tree


def check_expression(expression: str) -> List[str]:
    """Problems that would stop `expression` from being evaluated; empty when fine"""
    try:
        parse_expression(expression)
    except (SyntaxError, ValueError) as e:
        return [str(e)]
    return []


def _lookup(container: Any, key: Any) -> Any:
    if isinstance(container, dict):
        return container.get(key)
    if isinstance(container, (list, tuple, str)) and isinstance(key, int) and not isinstance(key, bool):
        return container[key] if -len(container) <= key < len(container) else None
    raise ValueError(f"Cannot index into {type(container).__name__}")


def _evaluate(node: ast.AST, variables: Dict[str, Any]) -> Any:
    if isinstance(node, ast.Expression):
        return _evaluate(node.body, variables)

    if isinstance(node, ast.Constant):
        return node.value

    if isinstance(node, ast.Name):
        if node.id in variables:
            return variables[node.id]
        if node.id in LITERALS:
            return LITERALS[node.id]
        raise ValueError(f"Undefined variable: {node.id}")

    if isinstance(node, ast.Attribute):
        container = _evaluate(node.value, variables)
        if not isinstance(container, dict):
            raise ValueError(f"Attribute access not allowed on {type(container).__name__}")
        return container.get(node.attr)

    if isinstance(node, ast.Subscript):
        return _lookup(_evaluate(node.value, variables), _evaluate(node.slice, variables))

    if isinstance(node, ast.List):
        return [_evaluate(element, variables) for element in node.elts]

    if isinstance(node, ast.Tuple):
        return tuple(_evaluate(element, variables) for element in node.elts)

    if isinstance(node, ast.BinOp):
        apply = BINARY_OPERATORS[type(node.op)]
        return apply(_evaluate(node.left, variables), _evaluate(node.right, variables))

    if isinstance(node, ast.UnaryOp):
        return UNARY_OPERATORS[type(node.op)](_evaluate(node.operand, variables))

    if isinstance(node, ast.BoolOp):
        # Short-circuits, so "data and data.x > 1" is safe when data is null
        want = isinstance(node.op, ast.Or)
        for value in node.values:
            if bool(_evaluate(value, variables)) == want:
                return want
        return not want

    if isinstance(node, ast.Compare):
        left = _evaluate(node.left, variables)
        for op, comparator in zip(node.ops, node.comparators):
            right = _evaluate(comparator, variables)
            if not COMPARISONS[type(op)](left, right):
                return False
            left = right
        return True

    if isinstance(node, ast.Call):
        args = [_evaluate(arg, variables) for arg in node.args]
        kwargs = {kw.arg: _evaluate(kw.value, variables) for kw in node.keywords}
        return FUNCTIONS[node.func.id](*args, **kwargs)

    raise ValueError(f"Expression construct not allowed: {type(node).__name__}")


def evaluate_condition(condition: str, variables: Dict[str, Any]) -> bool:
    """
    Evaluate a condition expression against `variables`.

    Raises:
        SyntaxError: the expression does not parse
        ValueError: disallowed construct, undefined name, or a runtime
            failure such as comparing incompatible types

    Examples:
        >>> evaluate_condition("amount > 5", {"amount": 10})
        True
        >>> evaluate_condition("data.labels and len(data.labels) > 0", {"data": {"labels": ["a"]}})
        True
    """
    tree = parse_expression(condition)

    try:
        return bool(_evaluate(tree, variables))
    except ValueError:
        raise
    except Exception as e:
        raise ValueError(f"Condition evaluation failed: {e}")
