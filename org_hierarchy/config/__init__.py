"""Configuration for the hierarchy integrity tools."""

from org_hierarchy.config.credentials import StoreCredentials, load_credentials
from org_hierarchy.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "StoreCredentials",
    "load_credentials",
]
