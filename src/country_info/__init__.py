"""
Country Info - ask a chat model for structured facts about a country.

This package provides a command-line interface that sends one
schema-constrained request to an LLM chat API and strictly decodes the reply.
"""

__version__ = "0.1.0"
__author__ = "Country Info Team"
__license__ = "Apache-2.0"

from typing import Final

# Package metadata
VERSION: Final[str] = __version__
PACKAGE_NAME: Final[str] = "country-info"
USER_AGENT: Final[str] = f"{PACKAGE_NAME}/{VERSION}"

__all__ = [
    "__version__",
    "VERSION",
    "PACKAGE_NAME",
    "USER_AGENT",
]
