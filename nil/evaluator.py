"""Evaluator for nil constant expressions.

The evaluator walks an expression tree produced by `nil.parser` and
reduces it to a value: a Python `int` (Integer) or `bool` (Boolean).
Identifiers and the introspection operators `len`, `size` and `align` are
resolved against an `Environment`; type sizes use `LayoutParams`.

Evaluation rules:

* `if`/`then`/`else` needs a Boolean condition and evaluates only the
  selected branch.
* A comparison chain `a < b < c` means `(a < b) and (b < c)`; every
  operand is evaluated at most once and evaluation stops at the first
  false comparison.
* `and`, `or` and `not` take Booleans only; `and`/`or` short-circuit.
* `+ - * / %` take Integers only. `/` truncates toward zero and `%` has
  the sign of the dividend. Results must stay within the union of the
  i64 and u64 ranges or the evaluation fails with `NilOverflowError`.

Set `debug_level` to 1 to log operator results, or 2 to log every node,
through the `nil.evaluator` logger at DEBUG level.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from .ast import (
    Node, Ternary, Compare, BoolAnd, BoolOr, Not, Arith, Operator,
    IntLiteral, Ident,
)
from .builtin_operator import OPERATORS
from .environment import Environment, make_environment, resolve
from .errors import (
    NilError, NilTypeError, DivisionByZero, NilOverflowError,
)
from .parser import literal_value, parse_expression
from .types import LayoutParams, in_range, is_type_binding, to_string, type_name

logger = logging.getLogger(__name__)

Value = Union[int, bool]


class Evaluator:
    """Evaluates expression trees against a read-only environment."""
    def __init__(self, env: Optional[Environment] = None,
                 layout: Optional[LayoutParams] = None, debug_level: int = 0):
        self.env = env if env is not None else make_environment()
        self.layout = layout if layout is not None else LayoutParams()
        self.debug_level = debug_level

    def debug(self, msg: str):
        if self.debug_level > 0:
            logger.debug(msg)

    def evaluate(self, node: Node) -> Value:
        if self.debug_level >= 2:
            self.debug(f"evaluate {node!r}")
        if isinstance(node, IntLiteral):
            value = literal_value(node.text)
            if not in_range(value):
                raise NilOverflowError('literal', (node.text,), node.span)
            return value
        if isinstance(node, Ident):
            binding = self.lookup(node)
            if is_type_binding(binding):
                raise NilTypeError(f"name {node.name}", 'value', type_name(binding), node.span)
            if not isinstance(binding, bool) and not in_range(binding):
                raise NilOverflowError('name', (node.name,), node.span)
            return binding
        if isinstance(node, Ternary):
            cond = self.expect_bool(self.evaluate(node.cond), 'if condition', node.cond)
            if self.debug_level >= 2:
                self.debug(f"if condition -> {to_string(cond)}")
            return self.evaluate(node.then if cond else node.else_)
        if isinstance(node, Compare):
            left = self.evaluate(node.first)
            for op, operand in node.rest:
                right = self.evaluate(operand)
                if not self.compare(op, left, right, node):
                    return False
                left = right
            return True
        if isinstance(node, BoolAnd):
            for operand in node.operands:
                if not self.expect_bool(self.evaluate(operand), 'and', operand):
                    return False
            return True
        if isinstance(node, BoolOr):
            for operand in node.operands:
                if self.expect_bool(self.evaluate(operand), 'or', operand):
                    return True
            return False
        if isinstance(node, Not):
            value = self.expect_bool(self.evaluate(node.inner), 'not', node.inner)
            return value if node.count % 2 == 0 else not value
        if isinstance(node, Arith):
            return self.evaluate_arith(node)
        if isinstance(node, Operator):
            return self.apply_operator(node)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def evaluate_arith(self, node: Arith) -> int:
        # a flat chain parses to a left-deep tree; walk its left spine in a loop
        spine = []
        while isinstance(node, Arith):
            spine.append(node)
            node = node.left
        value = self.evaluate(node)
        for arith in reversed(spine):
            right = self.evaluate(arith.right)
            value = self.apply_binary_op(arith.op, value, right, arith)
        return value

    def lookup(self, node: Ident) -> Any:
        try:
            return resolve(self.env, node.name)
        except NilError as e:
            if e.span is None:
                e.span = node.span
            raise

    def expect_bool(self, value: Value, context: str, node: Node) -> bool:
        if not isinstance(value, bool):
            raise NilTypeError(context, 'Boolean', type_name(value), node.span)
        return value

    def expect_int(self, value: Value, context: str, node: Node) -> int:
        if isinstance(value, bool):
            raise NilTypeError(context, 'Integer', type_name(value), node.span)
        return value

    def compare(self, op: str, a: Value, b: Value, node: Node) -> bool:
        if op in ('==', '!='):
            if type_name(a) != type_name(b):
                raise NilTypeError(f"comparison {op}", type_name(a), type_name(b), node.span)
            return (a == b) if op == '==' else (a != b)
        a = self.expect_int(a, f"comparison {op}", node)
        b = self.expect_int(b, f"comparison {op}", node)
        if op == '<': return a < b
        if op == '>': return a > b
        if op == '<=': return a <= b
        if op == '>=': return a >= b
        raise NilTypeError('comparison', 'comparison operator', op, node.span)

    def apply_binary_op(self, op: str, a: Value, b: Value, node: Node) -> int:
        a = self.expect_int(a, f"operator {op}", node.left)
        b = self.expect_int(b, f"operator {op}", node.right)
        if op == '+':
            result = a + b
        elif op == '-':
            result = a - b
        elif op == '*':
            result = a * b
        elif op in ('/', '%'):
            if b == 0:
                raise DivisionByZero(op, node.span)
            # truncate toward zero; the remainder takes the dividend's sign
            quotient = abs(a) // abs(b)
            if (a < 0) != (b < 0):
                quotient = -quotient
            result = quotient if op == '/' else a - b * quotient
        else:
            raise NilTypeError('arithmetic', 'arithmetic operator', op, node.span)
        if not in_range(result):
            raise NilOverflowError(op, (a, b), node.span)
        if self.debug_level >= 1:
            self.debug(f"{a} {op} {b} = {result}")
        return result

    def apply_operator(self, node: Operator) -> int:
        operator = OPERATORS[node.name]
        try:
            binding = resolve(self.env, node.arg)
            if not is_type_binding(binding):
                raise NilTypeError(f"{node.name}({node.arg})", 'Type', type_name(binding))
            result = operator.fn(binding, self.env, self.layout)
        except NilError as e:
            if e.span is None:
                e.span = node.span
            raise
        if not in_range(result):
            raise NilOverflowError(node.name, (node.arg,), node.span)
        if self.debug_level >= 1:
            self.debug(f"{node.name}({node.arg}) = {result}")
        return result


def parse_and_eval(source: str,
                   env: Union[Environment, Mapping[str, Any], None] = None,
                   layout: Optional[LayoutParams] = None,
                   debug_level: int = 0) -> Value:
    """Parse `source` as one constant expression and evaluate it.

    `env` may be an Environment or a plain mapping of names to bindings.
    """
    if env is None or not isinstance(env, Environment):
        env = make_environment(env)
    tree = parse_expression(source)
    return Evaluator(env, layout, debug_level).evaluate(tree)
