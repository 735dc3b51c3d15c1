"""Runs a Monkey source file, or an interactive shell when no file is given.

    python -m monkey_runtime [file] [--no-color] [-v]
"""

import argparse
import cmd
import logging
import sys

from .diagnostics import format_error, format_note, format_parse_errors, format_runtime_error
from .errors import E_PARSE_ERROR, MonkeyError
from .runtime import MonkeyRuntime
from .tokenizer import tokenize
from .tokens import TokenType


class Shell(cmd.Cmd):
    """Monkey interpreter shell."""
    intro = "Monkey interpreter :: Python backend\nType 'exit' or Ctrl-D to quit."
    prompt = ">> "
    secondary_prompt = ".. "  # used for line continuations
    _tmp_prompt = ">> "

    def __init__(self, runtime, use_color=True, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.runtime = runtime
        self.use_color = use_color
        self._tmp_line = ""

    def default(self, line):
        """Executes arbitrary Monkey source."""
        source = self._tmp_line + line + "\n"
        if _is_open(source):
            self._tmp_line = source
            self.prompt = self.secondary_prompt
            return

        self._tmp_line = ""
        self.prompt = self._tmp_prompt
        run_source(self.runtime, source, "<in>", self.use_color)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return True

    def do_exit(self, arg):
        """Exits interpreter."""
        return True


def _is_open(source):
    """Whether source still has unclosed braces or parentheses outside string literals"""
    depth = 0
    for token in tokenize(source):
        if token.type in (TokenType.LBRACE, TokenType.LPAREN):
            depth += 1
        elif token.type in (TokenType.RBRACE, TokenType.RPAREN):
            depth -= 1
    return depth > 0


def run_source(runtime, source, path, use_color):
    """Execute source and print its result or errors. Returns an exit status."""
    try:
        result = runtime.execute(source)
    except MonkeyError as e:
        if e.code != E_PARSE_ERROR:
            raise
        print(format_parse_errors(source, e.errors, e.positions, path, use_color), file=sys.stderr)
        print(format_note("statement was not evaluated", use_color), file=sys.stderr)
        return 1

    if result.is_error():
        print(format_runtime_error(result, use_color), file=sys.stderr)
        return 1
    if path == "<in>":
        print(result.inspect())
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(prog="monkey", description="Monkey language interpreter")
    parser.add_argument("file", help="file to run (if empty, starts the interactive shell)", nargs="?")
    parser.add_argument("--no-color", action="store_true", help="plain text diagnostics")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    use_color = not args.no_color
    runtime = MonkeyRuntime()

    if args.file is None:
        Shell(runtime, use_color).cmdloop()
        return 0

    try:
        with open(args.file, "r", encoding="utf-8") as f:
            source = f.read()
    except OSError as e:
        print(format_error(f"'{args.file}' could not be opened: {e.strerror}", use_color), file=sys.stderr)
        return 1
    return run_source(runtime, source, args.file, use_color)


if __name__ == "__main__":
    sys.exit(main())
