"""
Monkey Runtime

Ties the tokenizer, parser and evaluator together behind one object that
keeps its global environment between ``execute`` calls.
"""

import logging
from typing import Dict, Optional, TextIO

from .environment import Environment
from .errors import E_IO_ERROR, E_PARSE_ERROR, E_RUNTIME_ERROR, MonkeyError
from .evaluator import DEFAULT_MAX_DEPTH, Evaluator
from .objects import Object
from .parser import Parser
from .tokenizer import Tokenizer


logger = logging.getLogger(__name__)


class MonkeyRuntime:
    """Main Monkey runtime interface"""

    def __init__(
        self,
        env: Optional[Environment] = None,
        output: Optional[TextIO] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        raise_errors: bool = False,
    ):
        """
        Initialize runtime

        Args:
            env: global environment (default: a fresh one)
            output: stream for ``puts`` (default: stdout)
            max_depth: deepest allowed chain of nested function calls
            raise_errors: raise MonkeyError when evaluation yields an Error
                object instead of returning it
        """
        self.env = env if env is not None else Environment()
        self.evaluator = Evaluator(output=output, max_depth=max_depth)
        self.raise_errors = raise_errors

    def execute(self, source: str) -> Object:
        """
        Execute Monkey source code

        Returns:
            Result of the last statement (an Error object on runtime failure)

        Raises:
            MonkeyError: E_PARSE_ERROR when the source has syntax errors
                (the messages are in ``errors``), E_RUNTIME_ERROR when
                ``raise_errors`` is set and evaluation fails

        Example:
            >>> runtime = MonkeyRuntime()
            >>> runtime.execute('let x = 10;').inspect()
            '10'
            >>> runtime.execute('x * 2').inspect()
            '20'
        """
        parser = Parser(Tokenizer(source))
        program = parser.parse_program()
        if parser.errors:
            raise MonkeyError(
                E_PARSE_ERROR,
                f"{len(parser.errors)} syntax error(s): {parser.errors[0]}",
                errors=parser.errors,
                positions=parser.error_positions,
            )

        logger.debug("executing %d statements", len(program.statements))
        result = self.evaluator.run(program, self.env)

        if self.raise_errors and result.is_error():
            raise MonkeyError(E_RUNTIME_ERROR, result.message)
        return result

    def execute_file(self, filepath: str) -> Object:
        """Execute Monkey source file"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                source = f.read()
        except OSError as e:
            raise MonkeyError(E_IO_ERROR, f"'{filepath}' could not be opened: {e.strerror}")
        return self.execute(source)

    def get_var(self, name: str) -> Optional[Object]:
        """Get a variable from the global environment"""
        return self.env.get(name)

    def set_var(self, name: str, value: Object):
        """Set a variable in the global environment"""
        self.env.set(name, value)

    def get_env(self) -> Dict[str, Object]:
        """Get the global bindings"""
        return self.env.bindings()

    def clear_env(self):
        """Start over with an empty global environment"""
        self.env = Environment()


def execute_monkey(source: str) -> Object:
    """
    Execute Monkey source code (convenience function)

    Example:
        >>> execute_monkey('5 + 3').inspect()
        '8'
    """
    return MonkeyRuntime().execute(source)


__all__ = ['MonkeyRuntime', 'execute_monkey']
