"""Small string helpers shared by the shell and its commands."""

from __future__ import annotations


def strip_newline(text: str) -> str:
    """Remove a single trailing line feed from *text*, if there is one."""
    return text[:-1] if text.endswith("\n") else text


def c_compare(first: str | bytes, second: str | bytes) -> int:
    """Compare two strings byte by byte.

    Returns the difference between the first pair of bytes that differ,
    treating the end of a string as a zero byte, or 0 when they are equal.
    Text is compared as UTF-8, and comparison stops at a NUL.
    """
    left = first.encode("utf-8") if isinstance(first, str) else bytes(first)
    right = second.encode("utf-8") if isinstance(second, str) else bytes(second)
    left = left.split(b"\0", 1)[0]
    right = right.split(b"\0", 1)[0]
    for a, b in zip(left, right):
        if a != b:
            return a - b
    tail_left = left[len(right)] if len(left) > len(right) else 0
    tail_right = right[len(left)] if len(right) > len(left) else 0
    return tail_left - tail_right