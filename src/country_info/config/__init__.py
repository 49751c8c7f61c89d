"""
Configuration package for Country Info.

This package contains settings loaded from the environment, .env file
discovery, and the resolver that turns flags into a provider configuration.
"""

__all__ = ["settings", "env_loader", "resolver"]
