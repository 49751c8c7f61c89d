"""
CLI interface package for Country Info.

This package contains the Typer application and its output helpers.
"""

__all__ = ["app"]
