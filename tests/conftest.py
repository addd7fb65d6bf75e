"""
Pytest Configuration and Shared Fixtures.

This module provides shared fixtures for testing the hierarchy integrity tools.
"""

import json
from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from org_hierarchy.config.settings import Settings, get_settings
from org_hierarchy.graph.manager_store import InMemoryManagerStore

FIXED_MILLIS = 1_700_000_000_000


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def credentials_file(tmp_path: Path) -> Path:
    """Write a valid store credential file."""
    path = tmp_path / "store-credentials.json"
    path.write_text(json.dumps({
        "uri": "bolt://localhost:7687",
        "username": "neo4j",
        "password": "password123",
        "database": "org",
    }))
    return path


@pytest.fixture
def test_settings(credentials_file: Path) -> Settings:
    """Provide test settings with mock values."""
    with patch.dict(
        "os.environ",
        {
            "ORG_HIERARCHY_CREDENTIALS": str(credentials_file),
            "STORE_LABEL": "Manager",
            "LOG_LEVEL": "debug",
        },
    ):
        get_settings.cache_clear()
        return get_settings()


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def fixed_clock() -> Callable[[], int]:
    return lambda: FIXED_MILLIS


@pytest.fixture
def names() -> dict[str, str]:
    return {
        "ceo": "Ada",
        "cto": "Grace",
        "vp": "Linus",
        "lead": "Barbara",
        "dev": "Ken",
    }


@pytest.fixture
def acyclic_store(names: dict[str, str]) -> InMemoryManagerStore:
    """ceo <- cto <- vp <- lead <- dev, a single chain."""
    return InMemoryManagerStore.from_edges(
        {"ceo": None, "cto": "ceo", "vp": "cto", "lead": "vp", "dev": "lead"},
        names=names,
    )


@pytest.fixture
def cyclic_store(names: dict[str, str]) -> InMemoryManagerStore:
    """cto -> vp -> lead -> cto, with dev hanging off the cycle and ceo a root."""
    return InMemoryManagerStore.from_edges(
        {"ceo": None, "cto": "vp", "vp": "lead", "lead": "cto", "dev": "lead"},
        names=names,
    )


@pytest.fixture
def two_cycle_store() -> InMemoryManagerStore:
    """Two disjoint three-node cycles plus an acyclic branch."""
    return InMemoryManagerStore.from_edges({
        "a1": "a2", "a2": "a3", "a3": "a1",
        "b1": "b2", "b2": "b3", "b3": "b1",
        "root": None, "c1": "root", "c2": "c1",
    })
