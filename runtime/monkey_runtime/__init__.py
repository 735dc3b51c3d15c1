"""
Monkey Runtime - tokenizer, parser and object model for the Monkey language

**Front end:**
- Tokenizer: lazy stream of tokens from source text
- Parser: Pratt parser producing the AST, collecting syntax errors

**Runtime:**
- Objects: Integer, Boolean, Null, String, Array, Hash, Function, ...
- Environment: lexical scope chain used for closures
- Evaluator: tree-walking evaluation of the AST
- MonkeyRuntime: one-stop execute()/execute_file() facade

Version: 1.0.0
"""

import logging

__version__ = '1.0.0'

logging.getLogger(__name__).addHandler(logging.NullHandler())

# ============================================================================
# Front end
# ============================================================================

from .tokens import Token, TokenType, KEYWORDS
from .tokenizer import Tokenizer, tokenize
from .nodes import (
    Node, Program, LetStatement, ReturnStatement, ExpressionStatement,
    BlockStatement, Identifier, IntegerLiteral, BooleanLiteral, StringLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, IndexExpression, HashLiteral,
)
from .parser import Parser, Precedence, parse

# ============================================================================
# Runtime
# ============================================================================

from .errors import (
    MonkeyError,
    E_PARSE_ERROR, E_RUNTIME_ERROR, E_INVALID_BINDING, E_INVALID_NODE, E_IO_ERROR,
)
from .objects import (
    Object, Integer, Boolean, Null, String, ReturnValue, Error, Function,
    Builtin, Array, Hash, HashPair, TRUE, FALSE, NULL, native_bool_to_boolean,
)
from .environment import Environment
from .evaluator import Evaluator, evaluate
from .runtime import MonkeyRuntime, execute_monkey

# ============================================================================
# Exports
# ============================================================================

__all__ = [
    # Version
    '__version__',

    # Front end
    'Token', 'TokenType', 'KEYWORDS', 'Tokenizer', 'tokenize',
    'Parser', 'Precedence', 'parse',
    'Node', 'Program', 'LetStatement', 'ReturnStatement', 'ExpressionStatement',
    'BlockStatement', 'Identifier', 'IntegerLiteral', 'BooleanLiteral',
    'StringLiteral', 'PrefixExpression', 'InfixExpression', 'IfExpression',
    'FunctionLiteral', 'CallExpression', 'ArrayLiteral', 'IndexExpression',
    'HashLiteral',

    # Errors
    'MonkeyError',
    'E_PARSE_ERROR', 'E_RUNTIME_ERROR', 'E_INVALID_BINDING', 'E_INVALID_NODE',
    'E_IO_ERROR',

    # Objects and environment
    'Object', 'Integer', 'Boolean', 'Null', 'String', 'ReturnValue', 'Error',
    'Function', 'Builtin', 'Array', 'Hash', 'HashPair',
    'TRUE', 'FALSE', 'NULL', 'native_bool_to_boolean',
    'Environment',

    # Evaluation
    'Evaluator', 'evaluate', 'MonkeyRuntime', 'execute_monkey',
]
