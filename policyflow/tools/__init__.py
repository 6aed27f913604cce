"""
Action registry and built-in policy actions
"""

from .registry import ActionRegistry, DEFAULT_ACTIONS, create_default_registry

__all__ = [
    "ActionRegistry",
    "DEFAULT_ACTIONS",
    "create_default_registry"
]
