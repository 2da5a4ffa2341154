"""Basis set file readers, parsing helpers and reference formatting tools."""

__version__ = "0.1.0"