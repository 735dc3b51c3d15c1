"""
Built-in functions available to every Monkey program.
"""

import sys
from typing import Dict, Optional, TextIO

from .objects import (
    NULL, Array, Builtin, Error, Integer, Object, String,
)


def _wrong_arg_count(got: int, want: int) -> Error:
    return Error(f"wrong number of arguments: want={want}, got={got}")


def _len(*args: Object) -> Object:
    if len(args) != 1:
        return _wrong_arg_count(len(args), 1)
    arg = args[0]
    if isinstance(arg, String):
        return Integer(len(arg.value))
    if isinstance(arg, Array):
        return Integer(len(arg.elements))
    return Error(f"argument to `len` not supported, got {arg.type_name}")


def _first(*args: Object) -> Object:
    if len(args) != 1:
        return _wrong_arg_count(len(args), 1)
    if not isinstance(args[0], Array):
        return Error(f"argument to `first` must be ARRAY, got {args[0].type_name}")
    elements = args[0].elements
    return elements[0] if elements else NULL


def _last(*args: Object) -> Object:
    if len(args) != 1:
        return _wrong_arg_count(len(args), 1)
    if not isinstance(args[0], Array):
        return Error(f"argument to `last` must be ARRAY, got {args[0].type_name}")
    elements = args[0].elements
    return elements[-1] if elements else NULL


def _rest(*args: Object) -> Object:
    if len(args) != 1:
        return _wrong_arg_count(len(args), 1)
    if not isinstance(args[0], Array):
        return Error(f"argument to `rest` must be ARRAY, got {args[0].type_name}")
    elements = args[0].elements
    if not elements:
        return NULL
    return Array(list(elements[1:]))


def _push(*args: Object) -> Object:
    if len(args) != 2:
        return _wrong_arg_count(len(args), 2)
    if not isinstance(args[0], Array):
        return Error(f"argument to `push` must be ARRAY, got {args[0].type_name}")
    # Arrays are immutable from the language's point of view
    return Array(args[0].elements + [args[1]])


def make_builtins(output: Optional[TextIO] = None) -> Dict[str, Builtin]:
    """Build the builtin table; ``puts`` writes to output (default stdout)"""

    def _puts(*args: Object) -> Object:
        stream = output if output is not None else sys.stdout
        for arg in args:
            stream.write(arg.inspect() + "\n")
        return NULL

    table = {
        'len': _len,
        'first': _first,
        'last': _last,
        'rest': _rest,
        'push': _push,
        'puts': _puts,
    }
    return {name: Builtin(name, fn) for name, fn in table.items()}


__all__ = ['make_builtins']
