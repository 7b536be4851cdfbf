"""Commands that work on the file system: cd, pwd, ls, readf, cat and download."""

from __future__ import annotations

import os
import shutil
import stat
import urllib.request
from collections.abc import Sequence
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path

from .api import Command, CommandDependency, Core, DependencyError
from .hashing import djb2

READ_CHUNK_SIZE = 1024 * 1024 * 1024


class _FsCommand(Command):
    """A command that can write raw bytes through the core."""

    def _write(self, data: bytes) -> None:
        if self.core is not None:
            self.core.write_stdout(data)


class CdCommand(_FsCommand):
    """Change the shell's current directory."""

    name = "cd"
    help = "Change the shell's current directory.\nUsage:\n    cd <path>"

    def run(self, argv: Sequence[str]) -> bool | None:
        """Change to ``argv[1]``; return True on success, None on failure."""
        if len(argv) != 2:
            self._say(f"Invalid arguments.\n{self.help}")
            return None
        try:
            os.chdir(argv[1])
        except OSError as exc:
            self._say(f"SetCurrentDirectory failed ({exc.errno})\n")
            return None
        self._say(f"Set current directory to {argv[1]}\n")
        return True


class PwdCommand(_FsCommand):
    """Print the shell's current working directory."""

    name = "pwd"
    help = "Print the shell's current working directory.\nUsage:\n    pwd C:\\vagrant"

    def run(self, argv: Sequence[str]) -> str | None:
        """Print and return the current directory; None if it cannot be found."""
        try:
            cwd = os.getcwd()
        except OSError as exc:
            self._say(f"GetCurrentDirectory failed ({exc.errno})\n")
            return None
        self._say(f"{cwd}\n")
        self.output = cwd
        return cwd


def _is_hidden(entry: os.DirEntry) -> bool:
    if entry.name.startswith("."):
        return True
    try:
        attrs = getattr(entry.stat(follow_symlinks=False), "st_file_attributes", 0)
    except OSError:
        return False
    return bool(attrs & stat.FILE_ATTRIBUTE_HIDDEN)


def format_entry(entry: os.DirEntry, show_attrs: bool) -> str:
    """Return the listing line for *entry*.

    The long form is three attribute flags (directory, archive, hidden),
    the size in bytes and the name, separated by tabs.
    """
    if not show_attrs:
        return entry.name
    info = entry.stat(follow_symlinks=False)
    attrs = getattr(info, "st_file_attributes", 0)
    flags = (
        ("d" if entry.is_dir(follow_symlinks=False) else "-")
        + ("a" if attrs & stat.FILE_ATTRIBUTE_ARCHIVE else "-")
        + ("h" if _is_hidden(entry) else "-")
    )
    return f"{flags}\t{info.st_size} bytes\t{entry.name}"


def _scan(directory: str | Path) -> list[os.DirEntry]:
    with os.scandir(directory) as entries:
        return sorted(entries, key=lambda entry: entry.name)


class LsCommand(_FsCommand):
    """List directory contents."""

    name = "ls"
    help = (
        "List information about the files (the current directory by default).\n"
        "Flags:\n"
        "    -R  List subdirectories recursively.\n"
        "    -a  Show all files, including hidden ones.\n"
        "    -l  Use a long listing format showing file attributes.\n"
        "Usage:\n"
        "    ls [-Ral] [path]"
    )

    def run(self, argv: Sequence[str]) -> list[str] | None:
        """List the directory or pattern in the last argument.

        Returns the printed entry lines, or None when nothing matches.
        """
        recurse = find_hidden = show_attrs = False
        target = "."
        for position, arg in enumerate(argv[1:], start=1):
            if arg.startswith("-"):
                recurse = recurse or "R" in arg[1:]
                find_hidden = find_hidden or "a" in arg[1:]
                show_attrs = show_attrs or "l" in arg[1:]
            elif position == len(argv) - 1:
                target = arg
        entries = self._select(target)
        if entries is None:
            self._say("\n")
            return None
        lines: list[str] = []
        self._list(entries, find_hidden, show_attrs, recurse, lines)
        self.output = lines
        return lines

    @staticmethod
    def _select(target: str) -> list[os.DirEntry] | None:
        path = Path(target)
        try:
            if path.is_dir():
                return _scan(path)
            parent = path.parent
            if not parent.is_dir():
                return None
            matches = [entry for entry in _scan(parent) if fnmatch(entry.name, path.name)]
        except OSError:
            return None
        return matches or None

    def _list(
        self,
        entries: list[os.DirEntry],
        find_hidden: bool,
        show_attrs: bool,
        recurse: bool,
        lines: list[str],
    ) -> None:
        visible = [entry for entry in entries if find_hidden or not _is_hidden(entry)]
        for entry in visible:
            line = format_entry(entry, show_attrs)
            self._say(f"{line}\n")
            lines.append(line)
        if not recurse:
            return
        for entry in visible:
            if not entry.is_dir(follow_symlinks=False):
                continue
            self._say(f"\n{entry.path}:\n")
            try:
                children = _scan(entry.path)
            except OSError:
                continue
            self._list(children, find_hidden, show_attrs, recurse, lines)


@dataclass
class ReadfResult:
    """The contents of a file read into memory, and their size."""

    size: int = 0
    buffer: bytes = b""


def _read_file(path: str) -> bytes:
    data = bytearray()
    with open(path, "rb") as handle:
        while chunk := handle.read(READ_CHUNK_SIZE):
            data.extend(chunk)
    return bytes(data)


class ReadfCommand(_FsCommand):
    """Read a whole file into memory; other commands build on it."""

    name = "readf"
    help = (
        "Read a file into memory, and print its VirtualAddress and file size\n"
        "It makes no assumptions on the file size. I.e., >4GB is possibe"
        "output here is a pointer to a struct that contains "
        "Example:\n"
        "    >>>readf file.txt"
        "    >>>file.txt has been loaded at %p and is of size %llu"
    )

    def run(self, argv: Sequence[str]) -> ReadfResult | None:
        """Load ``argv[1]``; return the shared result, or None on failure."""
        if len(argv) != 2:
            self._say(f"Invalid args: {self.help}\n")
            return None
        if self.output is None:
            self.output = ReadfResult()
        try:
            data = _read_file(argv[1])
        except OSError as exc:
            self._say(f"Failed to read {argv[1]}: {exc.strerror or exc}\n")
            return None
        self.output.buffer = data
        self.output.size = len(data)
        self._say(f"File {argv[1]} was loaded of size {len(data)}\n")
        return self.output

    def cleanup(self) -> None:
        """Release the buffer and the result."""
        if self.output is not None:
            self.output.buffer = b""
            self.output.size = 0
        self.output = None


class CatCommand(_FsCommand):
    """Concatenate files to standard output, reading them through readf."""

    name = "cat"
    help = (
        "Concatenate and print files to the standard output.\n"
        "Usage:\n"
        "    cat <file1> <file2> ...\n"
    )

    def __init__(self) -> None:
        super().__init__()
        self.deps = [CommandDependency(djb2("readf"))]
        self.readf: Command | None = None

    def init(self, core: Core | None) -> bool:
        """Attach to *core* and find the readf command; False if it is missing."""
        self.core = core
        if core is None:
            return False
        try:
            core.modules.resolve(self.deps)
        except DependencyError:
            self._say("Dependency failed!\n")
            return False
        self.readf = self.deps[0].command
        return True

    def run(self, argv: Sequence[str]) -> bytes | None:
        """Print each named file in turn; return all that was read.

        Files that readf cannot load are skipped.
        """
        if len(argv) < 2:
            self._say(f"Invalid arguments.\n{self.help}")
            return None
        if self.readf is None:
            self._say("Dependency failed!\n")
            return None
        chunks: list[bytes] = []
        for name in argv[1:]:
            result = self.readf.run([self.readf.name, name])
            if result is None:
                continue
            data = bytes(result.buffer)
            chunks.append(data)
            self._write(data)
        self.output = b"".join(chunks)
        return self.output

    def cleanup(self) -> None:
        """Clean up the dependencies, then release the output."""
        for dep in self.deps:
            if dep.command is not None:
                dep.command.cleanup()
        self.output = None


class DownloadCommand(_FsCommand):
    """Download a URL to a local file."""

    name = "download"
    help = (
        "Download a file from a specified URL to the local filesystem.\n"
        "Usage:\n"
        "    download <URL> <local file path>"
    )

    def run(self, argv: Sequence[str]) -> str | None:
        """Save ``argv[1]`` to ``argv[2]``; return the path, or None on failure."""
        if len(argv) != 3:
            self._say(f"Invalid arguments.\n{self.help}")
            return None
        url, destination = argv[1], argv[2]
        self._say(f"Downloading file {destination} from {url}\n")
        try:
            with urllib.request.urlopen(url) as response, open(destination, "wb") as out:
                shutil.copyfileobj(response, out)
        except (OSError, ValueError) as exc:
            self._say(f"Error downloading file. {exc}\n")
            return None
        self._say(f"Successfully downloaded file {destination}!\n")
        self.output = destination
        return destination