#!/usr/bin/env python3
"""
expressions.py - Restricted evaluation of deployment global values.

Mission authors write global values as JavaScript-flavoured literal
expressions: numbers, strings, booleans, null, arrays, objects, and
arithmetic on them ("2+2", "[1, 2, 3]", "{x: 1}", "!true").

SECURITY: Values are evaluated by walking a Python AST and accepting only
literal and operator nodes. Names other than the JavaScript constants, calls,
attribute access, subscripts and comprehensions are rejected, so nothing in a
mission file can execute code.

Usage:
    from missionxml.expressions import evaluate_expression

    evaluate_expression("2+2")       # 4
    evaluate_expression("[1, 'a']")  # [1, 'a']
"""

from __future__ import annotations

import ast
import math
import operator
from typing import Any, Callable, Dict, List, Optional, Tuple

from missionxml.errors import ExpressionError


JS_CONSTANTS: Dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
    "NaN": math.nan,
    "Infinity": math.inf,
}

# Longest spellings first so "!==" is not read as "!" followed by "=="
JS_OPERATORS: List[Tuple[str, str]] = [
    ("===", "=="),
    ("!==", "!="),
    ("&&", " and "),
    ("||", " or "),
    ("!=", "!="),
    # "~" has the precedence of JavaScript's "!" and is read as logical not
    ("!", "~"),
]

MAX_EXPONENT = 1024

# Larger integers cannot be written to the JSON editing store
MAX_INT_BITS = 4096

BINARY_OPERATORS: Dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Pow: operator.pow,
}

COMPARE_OPERATORS: Dict[type, Callable[[Any, Any], bool]] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
}


def evaluate_expression(source: str, path: Optional[str] = None) -> Any:
    """
    Evaluate a literal expression string.

    Args:
        source: Expression text as written in the mission file
        path: Location of the VALUE node, used in error messages

    Returns:
        The evaluated value (int, float, str, bool, None, list or dict)

    Raises:
        ExpressionError: if the text is not a supported literal expression
    """
    normalized = _normalize_js(source.strip(), path)
    if not normalized:
        raise ExpressionError("Global value is empty", path)
    try:
        tree = ast.parse(f"(\n{normalized}\n)", mode="eval")
    except SyntaxError as e:
        raise ExpressionError(f"Cannot parse global value {source!r}: {e.msg}", path)

    return _Evaluator(source, path).visit(tree.body)


def _normalize_js(source: str, path: Optional[str] = None) -> str:
    """Rewrite JavaScript operator spellings to Python, leaving string literals alone."""
    out: List[str] = []
    quote = None
    i = 0
    while i < len(source):
        ch = source[i]
        if quote:
            out.append(ch)
            if ch == "\\" and i + 1 < len(source):
                out.append(source[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
            i += 1
            continue

        if ch in ("'", '"'):
            quote = ch
            out.append(ch)
            i += 1
            continue

        if ch == "~":
            raise ExpressionError(f"Unsupported global value {source!r}: '~' is not allowed", path)

        for js, py in JS_OPERATORS:
            if source.startswith(js, i):
                out.append(py)
                i += len(js)
                break
        else:
            out.append(ch)
            i += 1

    return "".join(out)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float))


def _js_str(value: Any) -> str:
    """String conversion used by JavaScript's + when either side is a string."""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join(_js_str(v) for v in value)
    return str(value)


class _Evaluator(ast.NodeVisitor):
    """AST walker that only understands literal and operator nodes."""

    def __init__(self, source: str, path: Optional[str]):
        self.source = source
        self.path = path

    def fail(self, reason: str) -> ExpressionError:
        return ExpressionError(f"Unsupported global value {self.source!r}: {reason}", self.path)

    def generic_visit(self, node: ast.AST) -> Any:
        raise self.fail(f"{type(node).__name__} is not allowed")

    def visit_Constant(self, node: ast.Constant) -> Any:
        if node.value is None or isinstance(node.value, (bool, int, float, str)):
            return node.value
        raise self.fail(f"{type(node.value).__name__} literals are not allowed")

    def visit_Name(self, node: ast.Name) -> Any:
        if node.id in JS_CONSTANTS:
            return JS_CONSTANTS[node.id]
        raise self.fail(f"unknown name '{node.id}'")

    def visit_List(self, node: ast.List) -> List[Any]:
        return [self.visit(elt) for elt in node.elts]

    def visit_Tuple(self, node: ast.Tuple) -> Any:
        # "a, b" is the comma operator: the last operand wins
        if not node.elts:
            raise self.fail("empty parentheses")
        values = [self.visit(elt) for elt in node.elts]
        return values[-1]

    def visit_Dict(self, node: ast.Dict) -> Dict[Any, Any]:
        result = {}
        for key_node, value_node in zip(node.keys, node.values):
            if key_node is None:
                raise self.fail("spread in object literals is not allowed")
            # Bare identifiers are object keys in {x: 1}
            if isinstance(key_node, ast.Name) and key_node.id not in JS_CONSTANTS:
                key = key_node.id
            else:
                key = self.visit(key_node)
            if not isinstance(key, (str, int, float)):
                raise self.fail("object keys must be strings or numbers")
            result[key] = self.visit(value_node)
        return result

    def visit_UnaryOp(self, node: ast.UnaryOp) -> Any:
        operand = self.visit(node.operand)
        if isinstance(node.op, ast.Invert):
            return not operand
        if not _is_number(operand):
            raise self.fail("unary arithmetic needs a number")
        if isinstance(node.op, ast.USub):
            return -operand
        if isinstance(node.op, ast.UAdd):
            return +operand
        raise self.fail(f"{type(node.op).__name__} is not allowed")

    def visit_BoolOp(self, node: ast.BoolOp) -> Any:
        # Short-circuit and return the deciding operand, as JavaScript does
        value = self.visit(node.values[0])
        for operand in node.values[1:]:
            if isinstance(node.op, ast.And):
                if not value:
                    return value
            elif value:
                return value
            value = self.visit(operand)
        return value

    def visit_Compare(self, node: ast.Compare) -> bool:
        left = self.visit(node.left)
        for op, right_node in zip(node.ops, node.comparators):
            compare = COMPARE_OPERATORS.get(type(op))
            if compare is None:
                raise self.fail(f"{type(op).__name__} is not allowed")
            right = self.visit(right_node)
            try:
                if not compare(left, right):
                    return False
            except TypeError:
                raise self.fail("values cannot be compared")
            left = right
        return True

    def visit_BinOp(self, node: ast.BinOp) -> Any:
        left = self.visit(node.left)
        right = self.visit(node.right)

        if isinstance(node.op, ast.Add) and (isinstance(left, str) or isinstance(right, str)):
            return _js_str(left) + _js_str(right)

        if not (_is_number(left) and _is_number(right)):
            raise self.fail("arithmetic needs numbers")

        try:
            result = self._arithmetic(node.op, left, right)
        except (OverflowError, ZeroDivisionError, ValueError) as e:
            raise self.fail(f"arithmetic error ({e})")

        if isinstance(result, int) and result.bit_length() > MAX_INT_BITS:
            raise self.fail(f"integer result larger than {MAX_INT_BITS} bits")
        return result

    def _arithmetic(self, op: ast.operator, left: Any, right: Any) -> Any:
        if isinstance(op, ast.Div):
            return self._divide(left, right)
        if isinstance(op, ast.Mod):
            return self._remainder(left, right)
        if isinstance(op, ast.Pow):
            return self._power(left, right)

        binary = BINARY_OPERATORS.get(type(op))
        if binary is None:
            raise self.fail(f"{type(op).__name__} is not allowed")
        return binary(left, right)

    def _power(self, left: Any, right: Any) -> Any:
        if abs(right) > MAX_EXPONENT:
            raise self.fail(f"exponent larger than {MAX_EXPONENT}")
        if isinstance(left, int) and isinstance(right, int) and right > 0 and \
                left.bit_length() * right > MAX_INT_BITS:
            raise self.fail(f"integer result larger than {MAX_INT_BITS} bits")

        try:
            result = left ** right
        except ZeroDivisionError:
            # 0 ** -n
            return math.inf
        if isinstance(result, complex):
            return math.nan
        return result

    @staticmethod
    def _remainder(left: Any, right: Any) -> Any:
        # Sign follows the dividend
        if right == 0 or (isinstance(left, float) and math.isinf(left)):
            return math.nan
        if isinstance(left, int) and isinstance(right, int):
            result = abs(left) % abs(right)
            return -result if left < 0 else result
        return math.fmod(left, right)

    @staticmethod
    def _divide(left: Any, right: Any) -> Any:
        if right == 0:
            if left == 0 or (isinstance(left, float) and math.isnan(left)):
                return math.nan
            return math.copysign(math.inf, left) * math.copysign(1, right)
        result = left / right
        if isinstance(result, float) and result.is_integer() and \
                isinstance(left, int) and isinstance(right, int):
            return int(result)
        return result
