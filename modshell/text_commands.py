"""Commands that work on text or on the shell itself: b64, echo, sha256sum and others."""

from __future__ import annotations

import base64
import binascii
import hashlib
import re
import time
from collections.abc import Sequence

from .api import Command
from .textutils import c_compare

TEMPLATE_HELP = (
    "Starter template to demonstrate libraries. this just "
    "prints a message Example:"
    ">>>template "
    ">>>I am so modular"
)
MODULAR_MESSAGE = "I am so modular!\n"
CLEAR_SEQUENCE = b"\x1b[2J\x1b[H"

_LEADING_INT = re.compile(r"[+-]?\d+")


def _str_to_int(text: str) -> int:
    """Parse the leading decimal integer of *text*; 0 when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group()) if match else 0


class _TextCommand(Command):
    """A command that writes through the core when it has one."""

    def _write(self, data: bytes) -> None:
        if self.core is not None:
            self.core.write_stdout(data)


class B64Command(_TextCommand):
    """Base64 encode or decode a string."""

    name = "b64"
    help = (
        "Base64 encode or decode input.\n"
        "Usage:\n"
        "    b64 encode <input> - Encodes the input string\n"
        "    b64 decode <input> - Decodes the base64 encoded string"
    )

    def run(self, argv: Sequence[str]) -> str | bytes | None:
        """Encode to text or decode to bytes; None on bad arguments or input."""
        if len(argv) != 3:
            self._say(f"Invalid arguments.\n{self.help}")
            return None
        action, data = argv[1], argv[2]
        if c_compare(action, "encode") == 0:
            encoded = base64.b64encode(data.encode("utf-8")).decode("ascii")
            self._say(f"{encoded}\n")
            self.output = encoded
        elif c_compare(action, "decode") == 0:
            try:
                decoded = base64.b64decode("".join(data.split()), validate=True)
            except (binascii.Error, ValueError):
                self._say("Error decoding string.\n")
                return None
            self._say(f"{decoded.decode('utf-8', errors='replace')}\n")
            self.output = decoded
        else:
            self._say("Invalid command. Use 'encode' or 'decode'.\n")
            return None
        return self.output


class EchoCommand(_TextCommand):
    """Write a single argument back to the terminal as it is."""

    name = "echo"
    help = "echo a string back to the terminal. Example:>>>echo asdf>>>asdf"

    def run(self, argv: Sequence[str]) -> bool | None:
        """Echo ``argv[1]``; with any other count, list the arguments and return None."""
        if len(argv) != 2:
            self._write(b"argc != 2.")
            for arg in argv:
                self._say(f"{arg}\n")
            return None
        self._write(argv[1].encode("utf-8"))
        return True


class Sha256SumCommand(_TextCommand):
    """Print the SHA-256 digest of a string."""

    name = "sha256sum"
    help = "do later"

    def run(self, argv: Sequence[str]) -> str | None:
        """Return the hex SHA-256 digest of ``argv[1]`` as UTF-8."""
        if len(argv) != 2:
            program = argv[0] if argv else self.name
            self._say(f"Usage: {program} input_to_hash")
            return None
        digest = hashlib.sha256(argv[1].encode("utf-8")).hexdigest()
        self._say(f"{digest}\n")
        self.output = digest
        return digest


class SleepCommand(_TextCommand):
    """Pause the shell for a number of milliseconds."""

    name = "sleep"
    help = (
        "Pause execution (sleep) for the current thread."
        "Example Sleeping for 1 second:"
        ">>>sleep 1000 "
        ">>>"
    )

    def run(self, argv: Sequence[str]) -> int | None:
        """Sleep for the leading integer of ``argv[1]`` in milliseconds.

        Text with no leading number sleeps for 0 ms, and negative values
        are treated as 0. Returns the milliseconds slept.
        """
        if len(argv) != 2:
            self._say(f"Invalid input:\n {self.help}\n")
            return None
        millis = max(0, _str_to_int(argv[1]))
        time.sleep(millis / 1000)
        return millis


class TemplateCommand(_TextCommand):
    """A starter command that prints a fixed message."""

    name = "template"
    help = TEMPLATE_HELP

    def run(self, argv: Sequence[str]) -> None:
        self._say(MODULAR_MESSAGE)
        return None


class RmCommand(_TextCommand):
    """The rm command, which so far only prints the starter message."""

    name = "rm"
    help = TEMPLATE_HELP

    def run(self, argv: Sequence[str]) -> None:
        self._say(MODULAR_MESSAGE)
        return None


class HelpCommand(_TextCommand):
    """Print the help text of loaded commands."""

    name = "help"
    help = (
        "Print help messages for commands.\n"
        "Passed with no command names, it prints all avaiable commands help message"
        ">>>help echo"
        "echo a string back to the terminal. Example:...\n"
    )

    def run(self, argv: Sequence[str]) -> str:
        """Print help for the named commands, or for every loaded command.

        Returns the text that was printed.
        """
        modules = self.core.modules if self.core is not None else None
        parts: list[str] = []
        if len(argv) <= 1:
            for command in modules or ():
                parts.append(f"{command.name}\n{command.help}\n")
        else:
            for name in argv[1:]:
                command = modules.find(name) if modules is not None else None
                if command is None:
                    parts.append(f"Unknown command: {name}\n")
                else:
                    parts.append(f"{command.help}\n")
        text = "".join(parts)
        self._say(text)
        self.output = text
        return text


class ExitCommand(_TextCommand):
    """Leave the shell with exit code 0."""

    name = "exit"
    help = "exit the shell by calling ExitProcess with exitcode 0>>>exit\n$"

    def run(self, argv: Sequence[str]) -> None:
        raise SystemExit(0)


class ClearCommand(_TextCommand):
    """Clear the terminal and put the cursor at the top left."""

    name = "clear"
    help = "clear the screen"

    def run(self, argv: Sequence[str]) -> None:
        self._write(CLEAR_SEQUENCE)
        return None