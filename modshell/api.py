"""The command table, the dependency resolver and the core services given to commands."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, BinaryIO

from .hashing import djb2

MAX_MODULE_SIZE = 256
DEFAULT_CHUNK_SIZE = 1 << 6

_REQUIRED = ("name", "help", "run", "cleanup", "init")


class ModuleLoadError(Exception):
    """Raised when a command cannot be added to the table."""


class DependencyError(Exception):
    """Raised when a command depends on a command that is not loaded."""

    def __init__(self, value: int) -> None:
        super().__init__(f"Dependency error: {value}")
        self.hash = value


class Command(ABC):
    """A shell command: a name, a help text and a run entry point.

    ``output`` holds whatever the last run produced; :meth:`cleanup`
    releases it after every run.
    """

    name: str = ""
    help: str = ""

    def __init__(self) -> None:
        self.core: Core | None = None
        self.output: Any = None

    @property
    def hash(self) -> int:
        """The djb2 hash of the command name, used to look it up."""
        return djb2(self.name)

    def init(self, core: Core | None) -> bool:
        """Attach the command to *core*; return True when it is ready."""
        self.core = core
        return True

    @abstractmethod
    def run(self, argv: Sequence[str]) -> Any:
        """Run the command with *argv*, whose first item is the command name."""

    def cleanup(self) -> None:
        """Release the output of the last run."""
        self.output = None

    def _say(self, text: str) -> None:
        if self.core is not None:
            self.core.say(text)


@dataclass
class CommandDependency:
    """A command needed by another command, found by the hash of its name."""

    hash: int
    command: Command | None = None


class ModuleTable:
    """The loaded commands, in the order they were added."""

    def __init__(self, core: Core | None = None) -> None:
        self.core = core
        self._commands: list[Command] = []

    def add(self, command: Command) -> Command:
        """Initialise *command* with the core and add it to the table.

        Raises ModuleLoadError when the table is full or the command lacks
        one of its entry points; errors raised by its ``init`` propagate
        and leave the table unchanged.
        """
        if len(self._commands) >= MAX_MODULE_SIZE:
            raise ModuleLoadError(
                f"Failed to load {getattr(command, 'name', command)!s}: table is full"
            )
        for attribute in _REQUIRED:
            if not hasattr(command, attribute):
                raise ModuleLoadError(f"Missing Function {attribute}")
        command.init(self.core)
        self._commands.append(command)
        if self.core is not None:
            self.core.say(f"[!] Added New Module: {command.name}: {command.hash}\n")
        return command

    def find_hash(self, value: int) -> Command | None:
        """Return the first command whose name hashes to *value*, or None."""
        return next((cmd for cmd in self._commands if cmd.hash == value), None)

    def find(self, name: str) -> Command | None:
        """Return the first command called *name*, or None."""
        return self.find_hash(djb2(name))

    def resolve(self, deps: Iterable[CommandDependency]) -> list[CommandDependency]:
        """Point every dependency at its loaded command.

        Raises DependencyError for the first dependency that is not loaded.
        """
        resolved = list(deps)
        for dep in resolved:
            command = self.find_hash(dep.hash)
            if command is None:
                raise DependencyError(dep.hash)
            dep.command = command
        return resolved

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._commands))

    def __len__(self) -> int:
        return len(self._commands)


class Core:
    """Services shared with every command: output and the command table."""

    def __init__(
        self, stdout: BinaryIO | None = None, modules: ModuleTable | None = None
    ) -> None:
        self._stdout = stdout
        self.modules = modules if modules is not None else ModuleTable()
        self.modules.core = self

    @property
    def stdout(self) -> BinaryIO:
        return self._stdout if self._stdout is not None else sys.stdout.buffer

    def say(self, text: str) -> None:
        """Write *text* to standard output as UTF-8."""
        self.write_stdout(text.encode("utf-8"))

    def write_stdout(self, data: bytes) -> int:
        """Write *data* to standard output in one call; return its length."""
        stream = self.stdout
        stream.write(data)
        stream.flush()
        return len(data)

    def write_stdout_large(self, data: bytes, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
        """Write *data* in chunks of at most *chunk_size* bytes; return the total.

        Raises OSError if the stream stops accepting data.
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        stream = self.stdout
        view = memoryview(bytes(data))
        written = 0
        while written < len(view):
            count = stream.write(view[written : written + chunk_size])
            if count is None:
                count = min(chunk_size, len(view) - written)
            if count <= 0:
                raise OSError(f"Write terminated early after {written} bytes")
            written += count
        stream.flush()
        return written