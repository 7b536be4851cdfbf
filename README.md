# modshell

An interactive shell made of pluggable commands. Each command has a name, a
help text and a `run`/`cleanup` pair. The shell looks a typed command up by
the djb2 hash of its name, runs it, then has it clean up after itself.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Starting the shell

Name the commands to load on the command line:

```
modshell echo b64 sha256sum help exit
```

A name may also be given as a path; its file stem is used as the command
name, so `libs/echo/echo.dll` loads `echo`. An unknown name prints
`Failed to load <name>` and the shell exits with status 1.

Each loaded command is announced with its hash, for example
`[!] Added New Module: echo: 2090214596`. The shell then prompts with `>>>`
and reads one line at a time from standard input. The line is split into
arguments with the Windows command-line rules (double quotes group words,
backslashes escape quotes), and the first argument picks the command. A name
that no loaded command has prints `Unknown command`. After each run the
command's `cleanup` is called.

Lines end only at a carriage return followed by a line feed (CR LF); a lone
line feed is kept as ordinary text, and a line is at most 1023 bytes. Input
from a terminal or file that uses bare line feeds is therefore read as one
long line. The shell stops at end of input (returning 0) or when the `exit`
command runs.

```
>>>echo "hello world"
hello world
>>>b64 encode hello
aGVsbG8=
>>>exit
```

### Commands that can be loaded

| Name        | What it does                                                        |
|-------------|---------------------------------------------------------------------|
| `b64`       | `b64 encode <input>` / `b64 decode <input>`                         |
| `echo`      | writes its single argument back, with no newline added              |
| `sha256sum` | prints the hex SHA-256 digest of its argument                       |
| `sleep`     | `sleep <milliseconds>`; text without a leading number sleeps 0 ms   |
| `template`  | prints `I am so modular!`                                           |
| `rm`        | prints `I am so modular!`; it removes nothing                       |
| `help`      | prints help for the named commands, or for every loaded command     |
| `exit`      | leaves the shell with exit code 0                                   |
| `clear`     | writes the ANSI clear-screen and cursor-home sequence               |
| `cd`        | `cd <path>` changes the working directory                           |
| `pwd`       | prints the working directory                                        |
| `ls`        | `ls [-Ral] [path]` lists a directory or a wildcard pattern          |
| `readf`     | `readf <file>` reads a file into memory and prints its size         |
| `cat`       | `cat <file> ...` writes files to standard output, using `readf`     |
| `download`  | `download <URL> <local file path>`                                  |

`ls` sorts entries by name and hides names starting with a dot (and, on
Windows, files with the hidden attribute) unless `-a` is given. `-l` prints
three flags (directory, archive, hidden), the size in bytes and the name,
separated by tabs; `-R` descends into subdirectories.

`cat` finds `readf` when it is loaded, so load `readf` first:

```
modshell readf cat
```

## Computing command hashes

Commands are identified by the 32-bit djb2 hash of their name. To print the
hash of one or more names as opcode definitions:

```
modshell-opcodes echo help
```

```
#define OPCODE_echo 2090214596
#define OPCODE_help 2090324718
```

A name whose hash comes out as zero is preceded by a warning line.

## Using it from Python

```python
from modshell.hashing import djb2
from modshell.cmdparse import command_line_to_argv
from modshell.shell import Shell, available_commands

djb2("echo")                                 # 2090214596
command_line_to_argv('echo "a b" c')          # ['echo', 'a b', 'c']

print(sorted(available_commands()))

shell = Shell()
shell.load("echo")
shell.execute("echo hi")                      # writes "hi", returns True
```

`Shell.execute` returns whatever the command's `run` returned: for example
the encoded text from `b64 encode`, the digest from `sha256sum`, or the
listed lines from `ls`.

New commands subclass `modshell.api.Command`, set `name` and `help`, and
implement `run(argv)`; add them with `shell.modules.add(MyCommand())`.
Output goes through `Core.say`, `Core.write_stdout` and
`Core.write_stdout_large`. A command can declare `CommandDependency`
entries and have `ModuleTable.resolve` point them at loaded commands; a
missing one raises `DependencyError`.

## What it does not do

- Commands cannot be loaded from separate files or shared libraries at run
  time: `modshell` loads only the commands listed above, which are built in.
- `rm` does not delete anything.
- There is no line editing or history; lines are read raw from standard
  input as described above.