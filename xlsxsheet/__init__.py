"""Worksheet model, sheet XML reading and writing, and zip and relationship helpers for .xlsx parts."""

__version__ = "0.1.0"