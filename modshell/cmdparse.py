"""Splitting of a command line into arguments using Windows quoting rules."""

from __future__ import annotations

_BLANKS = " \t"


def truncate_at_cr(text: str) -> str:
    """Return *text* cut off at its first carriage return."""
    return text.split("\r", 1)[0]


def _split_program(cmdline: str) -> tuple[str, int]:
    """Return the program name and the index just past it."""
    if cmdline[0] == '"':
        end = cmdline.find('"', 1)
        if end == -1:
            return cmdline[1:], len(cmdline)
        return cmdline[1:end], end + 1
    end = len(cmdline)
    for index, char in enumerate(cmdline):
        if char in _BLANKS:
            end = index
            break
    return cmdline[:end], min(end + 1, len(cmdline))


def _skip_blanks(cmdline: str, pos: int) -> int:
    while pos < len(cmdline) and cmdline[pos] in _BLANKS:
        pos += 1
    return pos


def command_line_to_argv(cmdline: str) -> list[str]:
    """Split *cmdline* into an argument list.

    The first word is the program name: it ends at the next blank, or at
    the closing quote if it starts with one, and backslashes in it are
    literal. The remaining words follow the Windows rules for quotes,
    backslashes before quotes and doubled quotes inside quoted text.

    Raises ValueError for an empty command line.
    """
    if not cmdline:
        raise ValueError("empty command line")

    program, pos = _split_program(cmdline)
    args = [program]
    pos = _skip_blanks(cmdline, pos)
    if pos >= len(cmdline):
        return args

    current: list[str] = []
    pending = True
    quotes = 0
    backslashes = 0
    length = len(cmdline)
    while pos < length:
        char = cmdline[pos]
        if char in _BLANKS and quotes == 0:
            args.append("".join(current))
            current = []
            backslashes = 0
            pos = _skip_blanks(cmdline, pos + 1)
            pending = pos < length
        elif char == "\\":
            current.append(char)
            backslashes += 1
            pos += 1
        elif char == '"':
            half = backslashes // 2
            if backslashes % 2 == 0:
                if half:
                    del current[-half:]
                quotes += 1
            else:
                del current[-(half + 1):]
                current.append('"')
            pos += 1
            backslashes = 0
            while pos < length and cmdline[pos] == '"':
                quotes += 1
                if quotes == 3:
                    current.append('"')
                    quotes = 0
                pos += 1
            if quotes == 2:
                quotes = 0
        else:
            current.append(char)
            backslashes = 0
            pos += 1
    if pending:
        args.append("".join(current))
    return args