"""Rank the subdirectories of a folder by disk usage."""

__version__ = "0.1.0"
