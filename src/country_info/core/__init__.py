"""
Core package for Country Info.

This package contains the request/response schema, the system prompt,
and the chat clients for the supported providers.
"""

__all__ = ["schema", "prompts", "client"]
