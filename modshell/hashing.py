"""The djb2 string hash used to name commands, and opcode table generation."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Iterator, Sequence

_SEED = 5381
_MASK = 0xFFFFFFFF


def djb2(text: str | bytes) -> int:
    """Return the 32-bit djb2 hash of *text*.

    Text is hashed as UTF-8 bytes. Hashing stops at the first NUL byte,
    as it does for a C string.
    """
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    data = data.split(b"\0", 1)[0]
    value = _SEED
    for byte in data:
        value = (value * 33 + byte) & _MASK
    return value


def opcode_lines(names: Iterable[str]) -> Iterator[str]:
    """Yield ``#define OPCODE_<name> <hash>`` lines for each name.

    A name whose hash is zero is preceded by a warning line, since a zero
    hash cannot be told apart from the end of a dependency list.
    """
    for name in names:
        value = djb2(name)
        if value == 0:
            yield f"WARNING: {name}-->{value}. Name it something else"
        yield f"#define OPCODE_{name} {value}"


def main(argv: Sequence[str] | None = None) -> int:
    """Print an opcode definition for every name given on the command line."""
    names = sys.argv[1:] if argv is None else list(argv)
    for line in opcode_lines(names):
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())