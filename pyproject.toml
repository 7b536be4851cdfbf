[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "modshell"
version = "0.1.0"
description = "A small interactive shell whose commands are pluggable modules identified by djb2 hashes"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "repl", "commands", "plugins", "djb2", "command-line"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
modshell = "modshell.shell:main"
modshell-opcodes = "modshell.hashing:main"

[tool.setuptools.packages.find]
include = ["modshell*"]

[tool.pytest.ini_options]
addopts = "-ra"
