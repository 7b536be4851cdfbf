"""The interactive shell: load commands by name and run what the user types."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import PurePath
from typing import Any, BinaryIO

from .api import Command, Core, ModuleLoadError, ModuleTable
from .cmdparse import command_line_to_argv
from .fs_commands import (
    CatCommand,
    CdCommand,
    DownloadCommand,
    LsCommand,
    PwdCommand,
    ReadfCommand,
)
from .lineio import read_line
from .text_commands import (
    B64Command,
    ClearCommand,
    EchoCommand,
    ExitCommand,
    HelpCommand,
    RmCommand,
    Sha256SumCommand,
    SleepCommand,
    TemplateCommand,
)
from .textutils import strip_newline

PROMPT = "\n>>>"
LINE_BUFFER_SIZE = 1024

_COMMAND_CLASSES: tuple[type[Command], ...] = (
    B64Command,
    CatCommand,
    CdCommand,
    ClearCommand,
    DownloadCommand,
    EchoCommand,
    ExitCommand,
    HelpCommand,
    LsCommand,
    PwdCommand,
    ReadfCommand,
    RmCommand,
    Sha256SumCommand,
    SleepCommand,
    TemplateCommand,
)


def available_commands() -> dict[str, type[Command]]:
    """Return every command the shell can load, keyed by command name."""
    return {cls.name: cls for cls in sorted(_COMMAND_CLASSES, key=lambda c: c.name)}


class Shell:
    """A command table with a prompt loop in front of it."""

    def __init__(self, stdout: BinaryIO | None = None) -> None:
        self.core = Core(stdout, ModuleTable())
        self.modules = self.core.modules

    def load(self, name: str) -> Command:
        """Load the command called *name* into the table.

        *name* may also be a path whose stem names the command, such as
        ``libs/echo/echo.dll``. Raises ModuleLoadError for an unknown name.
        """
        key = PurePath(name).stem if name else name
        cls = available_commands().get(key)
        if cls is None:
            raise ModuleLoadError(f"Failed to load {name}")
        return self.modules.add(cls())

    def execute(self, line: str) -> Any:
        """Run one command line and return what the command produced.

        An empty line does nothing; an unknown command prints a message.
        Both return None. The command is cleaned up after it runs.
        """
        line = strip_newline(line)
        if not line:
            return None
        argv = command_line_to_argv(line)
        argv[0] = strip_newline(argv[0])
        command = self.modules.find(argv[0])
        if command is None:
            self.core.say("Unknown command\n")
            return None
        try:
            return command.run(argv)
        finally:
            command.cleanup()

    def loop(self, stdin: BinaryIO) -> int:
        """Prompt for and run commands from *stdin* until it is exhausted.

        Returns 0 at end of input; an ``exit`` command raises SystemExit.
        """
        while True:
            self.core.say(PROMPT)
            raw = read_line(stdin, LINE_BUFFER_SIZE)
            if not raw:
                return 0
            self.execute(raw.decode("utf-8", errors="replace"))


def main(argv: Sequence[str] | None = None) -> int:
    """Load the commands named on the command line, then run the prompt loop."""
    names = sys.argv[1:] if argv is None else list(argv)
    shell = Shell()
    for name in names:
        try:
            shell.load(name)
        except ModuleLoadError:
            shell.core.say(f"Failed to load {name}\n")
            return 1
    try:
        return shell.loop(sys.stdin.buffer)
    except SystemExit as exc:
        code = exc.code
        return code if isinstance(code, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())