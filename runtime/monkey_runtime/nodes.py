"""
Monkey AST Nodes

Every node renders deterministically with ``str()``; prefix and infix
expressions are fully parenthesized so the rendering shows how the parser
grouped them, e.g. ``((-a) * b)``.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union


@dataclass
class Node:
    """Base AST node"""

    def __str__(self) -> str:
        raise NotImplementedError


# ============================================================================
# Expressions
# ============================================================================

@dataclass
class Identifier(Node):
    """Variable reference"""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass
class IntegerLiteral(Node):
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class BooleanLiteral(Node):
    value: bool

    def __str__(self) -> str:
        return 'true' if self.value else 'false'


@dataclass
class StringLiteral(Node):
    value: str

    def __str__(self) -> str:
        escaped = self.value.replace('\\', '\\\\').replace('"', '\\"')
        return f'"{escaped}"'


@dataclass
class PrefixExpression(Node):
    """Unary operation"""
    operator: str
    right: 'Expression'

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass
class InfixExpression(Node):
    """Binary operation"""
    left: 'Expression'
    operator: str
    right: 'Expression'

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass
class IfExpression(Node):
    condition: 'Expression'
    consequence: 'BlockStatement'
    alternative: Optional['BlockStatement'] = None

    def __str__(self) -> str:
        text = f"if {self.condition} {self.consequence}"
        if self.alternative is not None:
            text += f" else {self.alternative}"
        return text


@dataclass
class FunctionLiteral(Node):
    parameters: List[Identifier]
    body: 'BlockStatement'

    def __str__(self) -> str:
        params = ', '.join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass
class CallExpression(Node):
    """Function call"""
    function: 'Expression'
    arguments: List['Expression'] = field(default_factory=list)

    def __str__(self) -> str:
        args = ', '.join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass
class ArrayLiteral(Node):
    elements: List['Expression'] = field(default_factory=list)

    def __str__(self) -> str:
        return '[' + ', '.join(str(e) for e in self.elements) + ']'


@dataclass
class IndexExpression(Node):
    left: 'Expression'
    index: 'Expression'

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


@dataclass
class HashLiteral(Node):
    """Hash literal; pairs keep source order"""
    pairs: List[Tuple['Expression', 'Expression']] = field(default_factory=list)

    def __str__(self) -> str:
        return '{' + ', '.join(f"{k}: {v}" for k, v in self.pairs) + '}'


Expression = Union[
    Identifier, IntegerLiteral, BooleanLiteral, StringLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, IndexExpression, HashLiteral,
]


# ============================================================================
# Statements
# ============================================================================

@dataclass
class LetStatement(Node):
    """Variable binding"""
    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return f"let {self.name} = {self.value};"


@dataclass
class ReturnStatement(Node):
    value: Expression

    def __str__(self) -> str:
        return f"return {self.value};"


@dataclass
class ExpressionStatement(Node):
    expression: Expression

    def __str__(self) -> str:
        return str(self.expression)


@dataclass
class BlockStatement(Node):
    """Block of statements"""
    statements: List['Statement'] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.statements:
            return '{ }'
        return '{ ' + ' '.join(str(s) for s in self.statements) + ' }'


Statement = Union[LetStatement, ReturnStatement, ExpressionStatement]


@dataclass
class Program(Node):
    """Top-level statements in source order"""
    statements: List[Statement] = field(default_factory=list)

    def __str__(self) -> str:
        return ''.join(str(s) for s in self.statements)


__all__ = [
    'Node', 'Expression', 'Statement', 'Program',
    'LetStatement', 'ReturnStatement', 'ExpressionStatement', 'BlockStatement',
    'Identifier', 'IntegerLiteral', 'BooleanLiteral', 'StringLiteral',
    'PrefixExpression', 'InfixExpression', 'IfExpression', 'FunctionLiteral',
    'CallExpression', 'ArrayLiteral', 'IndexExpression', 'HashLiteral',
]
