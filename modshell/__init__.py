"""An interactive shell built from pluggable, hash-addressed commands."""

__version__ = "0.1.0"