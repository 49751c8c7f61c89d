"""
Utility helpers for Country Info.
"""

__all__ = ["log_setup"]
