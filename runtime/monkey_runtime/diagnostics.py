"""
Human-readable error reports for the shell and the file runner.

Parse errors are reported as ``<path>:<line>:<col>: error: <message>``
followed by the offending source line with a caret under the column.
"""

from typing import List, Optional, Sequence, Tuple

from termcolor import colored

from .objects import Error

ERROR = "red"
NOTE = "magenta"


def _paint(text: str, color: Optional[str], use_color: bool) -> str:
    if not use_color:
        return text
    return colored(text, color, attrs=["bold"])


def locate(source: str, pos: int) -> Tuple[int, int, str]:
    """Return (line number, column, line text) for a source offset, 1-based"""
    pos = max(0, min(pos, len(source)))
    line_start = source.rfind('\n', 0, pos) + 1
    line_end = source.find('\n', pos)
    if line_end == -1:
        line_end = len(source)
    line_num = source.count('\n', 0, pos) + 1
    return line_num, pos - line_start + 1, source[line_start:line_end]


def diagnose(source: str, pos: int, use_color: bool = True) -> str:
    """Offending line with a caret under pos"""
    __, col, line = locate(source, pos)
    caret = _paint("^", ERROR, use_color)
    return f"  {line}\n  {' ' * (col - 1)}{caret}"


def format_parse_errors(
    source: str,
    errors: Sequence[str],
    positions: Sequence[int],
    path: str = "<in>",
    use_color: bool = True,
) -> str:
    """Render every parse error with its location"""
    lines: List[str] = []
    for message, pos in zip(errors, positions):
        line_num, col, __ = locate(source, pos)
        header = _paint(f"{path}:{line_num}:{col}: ", None, use_color)
        header += _paint("error: ", ERROR, use_color) + message
        lines.append(header)
        lines.append(diagnose(source, pos, use_color))
    return "\n".join(lines)


def format_error(message: str, use_color: bool = True) -> str:
    return _paint("error: ", ERROR, use_color) + message


def format_runtime_error(error: Error, use_color: bool = True) -> str:
    """Render an Error object produced by evaluation"""
    return format_error(error.message, use_color)


def format_note(message: str, use_color: bool = True) -> str:
    return _paint("note: ", NOTE, use_color) + message


__all__ = [
    'locate', 'diagnose', 'format_parse_errors', 'format_error',
    'format_runtime_error', 'format_note',
]
