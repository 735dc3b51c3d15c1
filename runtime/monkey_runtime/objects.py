"""
Monkey runtime values.

``TRUE``, ``FALSE`` and ``NULL`` are the only Boolean and Null instances the
evaluator creates, so truthiness and equality checks on them can use
identity. ``ReturnValue`` and ``Error`` are control-flow markers: the
evaluator unwraps or propagates them and they are never bound to a name.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Tuple

if TYPE_CHECKING:
    from .environment import Environment
    from .nodes import BlockStatement, Identifier


INTEGER_OBJ = "INTEGER"
BOOLEAN_OBJ = "BOOLEAN"
NULL_OBJ = "NULL"
RETURN_VALUE_OBJ = "RETURN_VALUE"
ERROR_OBJ = "ERROR"
FUNCTION_OBJ = "FUNCTION"
STRING_OBJ = "STRING"
ARRAY_OBJ = "ARRAY"
HASH_OBJ = "HASH"
BUILTIN_OBJ = "BUILTIN"

HashKey = Tuple[str, object]


class Object:
    """Base class for runtime values"""
    type_name = ""

    def inspect(self) -> str:
        raise NotImplementedError

    def is_truthy(self) -> bool:
        return True

    def is_error(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.inspect()


@dataclass(frozen=True)
class Integer(Object):
    value: int
    type_name = INTEGER_OBJ

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return (self.type_name, self.value)


@dataclass(frozen=True)
class Boolean(Object):
    value: bool
    type_name = BOOLEAN_OBJ

    def inspect(self) -> str:
        return 'true' if self.value else 'false'

    def is_truthy(self) -> bool:
        return self.value

    def hash_key(self) -> HashKey:
        return (self.type_name, self.value)


class Null(Object):
    type_name = NULL_OBJ

    def inspect(self) -> str:
        return 'null'

    def is_truthy(self) -> bool:
        return False

    def __repr__(self) -> str:
        return 'NULL'


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool_to_boolean(value: bool) -> Boolean:
    """Return the canonical TRUE or FALSE instance"""
    return TRUE if value else FALSE


@dataclass(frozen=True)
class String(Object):
    value: str
    type_name = STRING_OBJ

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return (self.type_name, self.value)


@dataclass(frozen=True)
class ReturnValue(Object):
    """Wraps the value of a return statement while it unwinds"""
    value: Object
    type_name = RETURN_VALUE_OBJ

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass(frozen=True)
class Error(Object):
    message: str
    type_name = ERROR_OBJ

    def inspect(self) -> str:
        return f"ERROR: {self.message}"

    def is_error(self) -> bool:
        return True


@dataclass(eq=False)
class Function(Object):
    """User function closed over the environment it was defined in"""
    parameters: List['Identifier']
    body: 'BlockStatement'
    env: 'Environment' = field(repr=False)
    type_name = FUNCTION_OBJ

    def inspect(self) -> str:
        params = ', '.join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass(eq=False)
class Builtin(Object):
    name: str
    fn: Callable[..., Object] = field(repr=False)
    type_name = BUILTIN_OBJ

    def inspect(self) -> str:
        return 'builtin function'


@dataclass(eq=False)
class Array(Object):
    elements: List[Object] = field(default_factory=list)
    type_name = ARRAY_OBJ

    def inspect(self) -> str:
        return '[' + ', '.join(e.inspect() for e in self.elements) + ']'


@dataclass(frozen=True)
class HashPair:
    key: Object
    value: Object


@dataclass(eq=False)
class Hash(Object):
    """Pairs keyed by ``hash_key()`` of the key object, in insertion order"""
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)
    type_name = HASH_OBJ

    def inspect(self) -> str:
        items = ', '.join(f"{p.key.inspect()}: {p.value.inspect()}" for p in self.pairs.values())
        return '{' + items + '}'


def is_hashable(obj: Object) -> bool:
    return isinstance(obj, (Integer, Boolean, String))


__all__ = [
    'Object', 'Integer', 'Boolean', 'Null', 'String', 'ReturnValue', 'Error',
    'Function', 'Builtin', 'Array', 'Hash', 'HashPair', 'HashKey',
    'TRUE', 'FALSE', 'NULL', 'native_bool_to_boolean', 'is_hashable',
    'INTEGER_OBJ', 'BOOLEAN_OBJ', 'NULL_OBJ', 'RETURN_VALUE_OBJ', 'ERROR_OBJ',
    'FUNCTION_OBJ', 'STRING_OBJ', 'ARRAY_OBJ', 'HASH_OBJ', 'BUILTIN_OBJ',
]
