"""Babelfish: a Discord translation relay."""

__version__ = "0.2.0"
