"""
Org Hierarchy Integrity.

Detects and breaks cycles in the manager "reports-to" hierarchy.
"""

__version__ = "0.1.0"
