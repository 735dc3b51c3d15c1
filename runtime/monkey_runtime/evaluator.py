"""
Monkey Evaluator

Tree-walking evaluation of the AST. Runtime failures are ``Error`` objects,
not exceptions: every sub-evaluation is checked with ``is_error()`` and an
error is returned as soon as it appears. ``return`` travels up through
blocks and any enclosing expression as a ``ReturnValue`` and is unwrapped at
the function call or at the program level.

Calling a function evaluates its body in a new scope enclosed by the
environment the function was *defined* in, which gives closures lexical
scoping.
"""

import logging
import sys
from typing import List, Optional, TextIO

from .builtins import make_builtins
from .environment import Environment
from .errors import E_INVALID_NODE, MonkeyError
from .nodes import (
    ArrayLiteral, BlockStatement, BooleanLiteral, CallExpression,
    ExpressionStatement, FunctionLiteral, HashLiteral, Identifier, IfExpression,
    IndexExpression, InfixExpression, IntegerLiteral, LetStatement, Node,
    PrefixExpression, Program, ReturnStatement, StringLiteral,
)
from .objects import (
    FALSE, NULL, TRUE, Array, Builtin, Error, Function, Hash, HashPair,
    Integer, Object, ReturnValue, String, is_hashable, native_bool_to_boolean,
)
from .tokenizer import INT64_MAX


logger = logging.getLogger(__name__)

INT64_MIN = -INT64_MAX - 1

DEFAULT_MAX_DEPTH = 500

# Python frames one Monkey call may need, used to size the recursion limit
FRAMES_PER_CALL = 20


def _halts(obj: Object) -> bool:
    """Error or pending return: stop here and hand it to the caller unchanged"""
    return obj.is_error() or isinstance(obj, ReturnValue)


class Evaluator:
    """Evaluate Monkey AST nodes against an Environment"""

    def __init__(self, output: Optional[TextIO] = None, max_depth: int = DEFAULT_MAX_DEPTH):
        """
        Initialize evaluator

        Args:
            output: stream for the ``puts`` builtin (default: stdout)
            max_depth: deepest allowed chain of nested function calls
        """
        self.builtins = make_builtins(output)
        self.max_depth = max_depth
        self._depth = 0

    def run(self, program: Program, env: Environment) -> Object:
        """Evaluate a whole program, reporting runaway recursion as an Error"""
        self._depth = 0
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(limit + self.max_depth * FRAMES_PER_CALL)
        try:
            return self.evaluate(program, env)
        except RecursionError:
            return Error("maximum call depth exceeded")
        finally:
            sys.setrecursionlimit(limit)

    def evaluate(self, node: Node, env: Environment) -> Object:
        """
        Evaluate an AST node

        Raises:
            MonkeyError: if node is not a Monkey AST node
        """
        # Statements
        if isinstance(node, Program):
            return self._eval_program(node, env)

        elif isinstance(node, BlockStatement):
            return self._eval_block(node, env)

        elif isinstance(node, ExpressionStatement):
            return self.evaluate(node.expression, env)

        elif isinstance(node, LetStatement):
            value = self.evaluate(node.value, env)
            if _halts(value):
                return value
            return env.set(node.name.name, value)

        elif isinstance(node, ReturnStatement):
            value = self.evaluate(node.value, env)
            if _halts(value):
                return value
            return ReturnValue(value)

        # Literals
        elif isinstance(node, IntegerLiteral):
            return Integer(node.value)

        elif isinstance(node, BooleanLiteral):
            return native_bool_to_boolean(node.value)

        elif isinstance(node, StringLiteral):
            return String(node.value)

        elif isinstance(node, ArrayLiteral):
            elements = self._eval_expressions(node.elements, env)
            if not isinstance(elements, list):
                return elements
            return Array(elements)

        elif isinstance(node, HashLiteral):
            return self._eval_hash_literal(node, env)

        elif isinstance(node, FunctionLiteral):
            return Function(node.parameters, node.body, env)

        # Expressions
        elif isinstance(node, Identifier):
            return self._eval_identifier(node, env)

        elif isinstance(node, PrefixExpression):
            right = self.evaluate(node.right, env)
            if _halts(right):
                return right
            return self._eval_prefix(node.operator, right)

        elif isinstance(node, InfixExpression):
            left = self.evaluate(node.left, env)
            if _halts(left):
                return left
            right = self.evaluate(node.right, env)
            if _halts(right):
                return right
            return self._eval_infix(node.operator, left, right)

        elif isinstance(node, IfExpression):
            condition = self.evaluate(node.condition, env)
            if _halts(condition):
                return condition
            if condition.is_truthy():
                return self.evaluate(node.consequence, env)
            elif node.alternative is not None:
                return self.evaluate(node.alternative, env)
            return NULL

        elif isinstance(node, CallExpression):
            function = self.evaluate(node.function, env)
            if _halts(function):
                return function
            args = self._eval_expressions(node.arguments, env)
            if not isinstance(args, list):
                return args
            return self.apply_function(function, args)

        elif isinstance(node, IndexExpression):
            left = self.evaluate(node.left, env)
            if _halts(left):
                return left
            index = self.evaluate(node.index, env)
            if _halts(index):
                return index
            return self._eval_index(left, index)

        raise MonkeyError(E_INVALID_NODE, f"Unknown AST node type: {type(node).__name__}")

    def apply_function(self, function: Object, args: List[Object]) -> Object:
        """Call a user function or builtin with already evaluated arguments"""
        if isinstance(function, Builtin):
            return function.fn(*args)

        if not isinstance(function, Function):
            return Error(f"not a function: {function.type_name}")

        if len(args) != len(function.parameters):
            return Error(
                f"wrong number of arguments: want={len(function.parameters)}, got={len(args)}"
            )
        if self._depth >= self.max_depth:
            return Error("maximum call depth exceeded")

        call_env = Environment.enclosed(function.env)
        for param, arg in zip(function.parameters, args):
            call_env.set(param.name, arg)

        logger.debug("calling fn(%s)", ", ".join(p.name for p in function.parameters))
        self._depth += 1
        try:
            result = self.evaluate(function.body, call_env)
        finally:
            self._depth -= 1

        if isinstance(result, ReturnValue):
            return result.value
        return result

    # ------------------------------------------------------------------

    def _eval_program(self, program: Program, env: Environment) -> Object:
        result: Object = NULL
        for statement in program.statements:
            result = self.evaluate(statement, env)
            if isinstance(result, ReturnValue):
                return result.value
            if result.is_error():
                return result
        return result

    def _eval_block(self, block: BlockStatement, env: Environment) -> Object:
        # ReturnValue stays wrapped so enclosing blocks stop too
        result: Object = NULL
        for statement in block.statements:
            result = self.evaluate(statement, env)
            if isinstance(result, ReturnValue) or result.is_error():
                return result
        return result

    def _eval_expressions(self, expressions, env: Environment):
        """Evaluate left to right; returns the first Error or ReturnValue instead of a list"""
        values: List[Object] = []
        for expression in expressions:
            value = self.evaluate(expression, env)
            if _halts(value):
                return value
            values.append(value)
        return values

    def _eval_identifier(self, node: Identifier, env: Environment) -> Object:
        value = env.get(node.name)
        if value is not None:
            return value
        if node.name in self.builtins:
            return self.builtins[node.name]
        return Error(f"identifier not found: {node.name}")

    def _eval_prefix(self, operator: str, right: Object) -> Object:
        if operator == '!':
            return FALSE if right.is_truthy() else TRUE
        if operator == '-':
            if not isinstance(right, Integer):
                return Error(f"unknown operator: -{right.type_name}")
            return self._checked_integer(-right.value, f"-{right.value}")
        return Error(f"unknown operator: {operator}{right.type_name}")

    def _eval_infix(self, operator: str, left: Object, right: Object) -> Object:
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self._eval_integer_infix(operator, left, right)
        if isinstance(left, String) and isinstance(right, String):
            return self._eval_string_infix(operator, left, right)
        if operator == '==':
            return native_bool_to_boolean(left == right)
        if operator == '!=':
            return native_bool_to_boolean(left != right)
        if left.type_name != right.type_name:
            return Error(f"type mismatch: {left.type_name} {operator} {right.type_name}")
        return Error(f"unknown operator: {left.type_name} {operator} {right.type_name}")

    def _eval_integer_infix(self, operator: str, left: Integer, right: Integer) -> Object:
        a, b = left.value, right.value
        expr = f"{a} {operator} {b}"
        if operator == '+':
            return self._checked_integer(a + b, expr)
        elif operator == '-':
            return self._checked_integer(a - b, expr)
        elif operator == '*':
            return self._checked_integer(a * b, expr)
        elif operator == '/':
            if b == 0:
                return Error("division by zero")
            # Truncate toward zero
            quotient = abs(a) // abs(b)
            if (a < 0) != (b < 0):
                quotient = -quotient
            return self._checked_integer(quotient, expr)
        elif operator == '<':
            return native_bool_to_boolean(a < b)
        elif operator == '>':
            return native_bool_to_boolean(a > b)
        elif operator == '==':
            return native_bool_to_boolean(a == b)
        elif operator == '!=':
            return native_bool_to_boolean(a != b)
        return Error(f"unknown operator: {left.type_name} {operator} {right.type_name}")

    def _eval_string_infix(self, operator: str, left: String, right: String) -> Object:
        if operator == '+':
            return String(left.value + right.value)
        elif operator == '==':
            return native_bool_to_boolean(left.value == right.value)
        elif operator == '!=':
            return native_bool_to_boolean(left.value != right.value)
        return Error(f"unknown operator: {left.type_name} {operator} {right.type_name}")

    def _eval_index(self, left: Object, index: Object) -> Object:
        if isinstance(left, Array) and isinstance(index, Integer):
            if 0 <= index.value < len(left.elements):
                return left.elements[index.value]
            return NULL
        if isinstance(left, Hash):
            if not is_hashable(index):
                return Error(f"unusable as hash key: {index.type_name}")
            pair = left.pairs.get(index.hash_key())
            return pair.value if pair is not None else NULL
        return Error(f"index operator not supported: {left.type_name}")

    def _eval_hash_literal(self, node: HashLiteral, env: Environment) -> Object:
        result = Hash()
        for key_node, value_node in node.pairs:
            key = self.evaluate(key_node, env)
            if _halts(key):
                return key
            if not is_hashable(key):
                return Error(f"unusable as hash key: {key.type_name}")
            value = self.evaluate(value_node, env)
            if _halts(value):
                return value
            result.pairs[key.hash_key()] = HashPair(key, value)
        return result

    @staticmethod
    def _checked_integer(value: int, expr: str) -> Object:
        if value < INT64_MIN or value > INT64_MAX:
            return Error(f"integer overflow: {expr}")
        return Integer(value)


def evaluate(node: Node, env: Environment) -> Object:
    """Evaluate node in env with a default Evaluator"""
    evaluator = Evaluator()
    if isinstance(node, Program):
        return evaluator.run(node, env)
    return evaluator.evaluate(node, env)


__all__ = ['Evaluator', 'evaluate', 'DEFAULT_MAX_DEPTH']
