"""Contrib Inspector: who wrote the lines in this git repository?

Attributes every line in the current snapshot to its author, either by blame
or by walking the full history including overwritten lines, and rolls the
counts up into a directory tree.
"""

__version__ = "0.1.0"
