"""
Command line interface for Sprout.
"""

from .main import cli, main

__all__ = ["cli", "main"]
