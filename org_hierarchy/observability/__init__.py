"""
Observability Module.

Structured logging for the hierarchy integrity tools.
"""

from org_hierarchy.observability.logging import configure_logging

__all__ = [
    "configure_logging",
]
