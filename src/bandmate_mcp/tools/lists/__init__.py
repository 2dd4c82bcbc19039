"""
Bandmate List Tools

Provides tools for reading and upserting song lists (setlists).
"""

from .tools import register_list_tools

__all__ = ["register_list_tools"]
