"""
Lexical scope chain.

Each Environment owns its own bindings and holds a reference to the
enclosing one. Lookups walk outward; ``set`` only ever writes the innermost
frame, so an inner binding shadows an outer one without changing it.
"""

from typing import Dict, Iterator, Optional

from .errors import E_INVALID_BINDING, MonkeyError
from .objects import Error, Object, ReturnValue


class Environment:
    """Variable bindings for one scope, linked to its enclosing scope"""

    def __init__(self, outer: Optional['Environment'] = None):
        self.store: Dict[str, Object] = {}
        self.outer = outer

    @classmethod
    def enclosed(cls, outer: 'Environment') -> 'Environment':
        """Create a child scope of outer"""
        return cls(outer=outer)

    def get(self, name: str) -> Optional[Object]:
        """Resolve name through the scope chain; None when unbound"""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: Object) -> Object:
        """Bind name in this scope only"""
        if isinstance(value, (ReturnValue, Error)):
            raise MonkeyError(
                E_INVALID_BINDING,
                f"cannot bind {value.type_name} to '{name}'",
            )
        self.store[name] = value
        return value

    def bindings(self) -> Dict[str, Object]:
        """Copy of this scope's own bindings"""
        return dict(self.store)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.store)

    def __repr__(self) -> str:
        return f"Environment({sorted(self.store)}, outer={self.outer is not None})"


__all__ = ['Environment']
