"""
Manager Store Module.

Reads manager records and persists reports-to edge removals.

Two backends share the ManagerStore interface:
- Neo4jManagerStore: manager records as labelled nodes in Neo4j
- InMemoryManagerStore: dict-backed, for previews and tests
"""

import copy
from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator, Iterable
from contextlib import asynccontextmanager
from typing import Any

import structlog
from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncSession, Query
from neo4j.exceptions import DriverError, Neo4jError
from pydantic import ValidationError

from org_hierarchy.config.credentials import StoreCredentials
from org_hierarchy.config.settings import StoreSettings, get_settings
from org_hierarchy.exceptions import ConfigurationError, StoreReadError, StoreWriteError
from org_hierarchy.graph.schema import ManagerNode

logger = structlog.get_logger(__name__)


class ManagerStore(ABC):
    """
    Abstract store of manager records.

    Implementations must always return the current state from
    fetch_managers(); callers reload between writes.
    """

    async def connect(self) -> None:
        """Open any underlying connection."""

    async def close(self) -> None:
        """Release any underlying connection."""

    @abstractmethod
    async def fetch_managers(self) -> list[ManagerNode]:
        """
        Read every manager record.

        Raises:
            StoreReadError: If the records cannot be read
        """
        pass

    @abstractmethod
    async def remove_reports_to(self, uid: str, updated_at: int) -> None:
        """
        Delete the reportsTo field of one record and stamp updatedAt.

        Args:
            uid: Manager to promote to a root
            updated_at: Epoch milliseconds to store in updatedAt

        Raises:
            StoreWriteError: If the write fails or the record does not exist
        """
        pass


class Neo4jManagerStore(ManagerStore):
    """
    Manager records stored as Neo4j nodes.

    Each manager is a node carrying ``uid``, ``displayName`` and an
    optional ``reportsTo`` property holding the manager's manager uid.
    """

    def __init__(
        self,
        credentials: StoreCredentials,
        settings: StoreSettings | None = None,
    ) -> None:
        self._credentials = credentials
        self._settings = settings or get_settings().store
        self._driver: AsyncDriver | None = None

        if not self._settings.label.isidentifier():
            raise ConfigurationError(f"Invalid manager label: {self._settings.label!r}")
        self._label = self._settings.label

    async def connect(self) -> None:
        """Establish connection to Neo4j database."""
        if self._driver is not None:
            return

        self._driver = AsyncGraphDatabase.driver(
            self._credentials.uri,
            auth=(self._credentials.username, self._credentials.password.get_secret_value()),
            max_connection_pool_size=self._settings.max_connection_pool_size,
        )
        await self._driver.verify_connectivity()
        logger.info("Connected to manager store", uri=self._credentials.uri)

    async def close(self) -> None:
        """Close the database connection."""
        if self._driver is not None:
            await self._driver.close()
            self._driver = None
            logger.info("Disconnected from manager store")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session."""
        if self._driver is None:
            await self.connect()

        assert self._driver is not None  # Type guard for mypy
        async with self._driver.session(database=self._credentials.database) as session:
            yield session

    def _query(self, text: str) -> Query:
        return Query(text, timeout=self._settings.query_timeout_ms / 1000)

    async def fetch_managers(self) -> list[ManagerNode]:
        query = f"""
        MATCH (m:{self._label})
        RETURN m.uid AS uid, m.displayName AS displayName, m.reportsTo AS reportsTo
        """

        try:
            async with self.session() as session:
                result = await session.run(self._query(query))
                records: list[dict[str, Any]] = await result.data()
        except (Neo4jError, DriverError) as e:
            logger.error("Failed to load manager records", error=str(e))
            raise StoreReadError(f"Failed to load manager records: {e}") from e

        managers = []
        for record in records:
            if not record.get("uid"):
                logger.warning("Skipping manager record without uid", record=record)
                continue
            try:
                managers.append(ManagerNode.model_validate(record))
            except ValidationError as e:
                logger.error("Invalid manager record", uid=record.get("uid"), error=str(e))
                raise StoreReadError(f"Invalid manager record {record.get('uid')!r}: {e}") from e

        logger.debug("Manager records loaded", count=len(managers))
        return managers

    async def remove_reports_to(self, uid: str, updated_at: int) -> None:
        query = f"""
        MATCH (m:{self._label} {{uid: $uid}})
        REMOVE m.reportsTo
        SET m.updatedAt = $updated_at
        RETURN count(m) AS updated
        """

        try:
            async with self.session() as session:
                result = await session.run(
                    self._query(query), {"uid": uid, "updated_at": updated_at}
                )
                record = await result.single()
        except (Neo4jError, DriverError) as e:
            logger.error("Failed to remove reportsTo", uid=uid, error=str(e))
            raise StoreWriteError(f"Failed to update manager {uid}: {e}", uid=uid) from e

        if not record or record["updated"] == 0:
            raise StoreWriteError(f"Manager record not found: {uid}", uid=uid)

        logger.debug("reportsTo removed", uid=uid, updated_at=updated_at)


class InMemoryManagerStore(ManagerStore):
    """
    Dict-backed manager store.

    Records are kept in their stored shape (``displayName``,
    ``reportsTo``, ``updatedAt``) keyed by uid. Every successful
    removal is appended to ``writes``.
    """

    def __init__(self, records: dict[str, dict[str, Any]] | None = None) -> None:
        self._records: dict[str, dict[str, Any]] = copy.deepcopy(records or {})
        self.writes: list[str] = []

    @classmethod
    def from_managers(cls, managers: Iterable[ManagerNode]) -> "InMemoryManagerStore":
        return cls({
            m.uid: m.model_dump(by_alias=True, exclude={"uid"}, exclude_none=True)
            for m in managers
        })

    @classmethod
    def from_edges(
        cls,
        edges: dict[str, str | None],
        names: dict[str, str] | None = None,
    ) -> "InMemoryManagerStore":
        """Build a store from a child -> parent mapping (None for roots)."""
        names = names or {}
        records: dict[str, dict[str, Any]] = {}
        for uid, parent in edges.items():
            record: dict[str, Any] = {}
            if uid in names:
                record["displayName"] = names[uid]
            if parent is not None:
                record["reportsTo"] = parent
            records[uid] = record
        return cls(records)

    @property
    def records(self) -> dict[str, dict[str, Any]]:
        return self._records

    def edges(self) -> dict[str, str]:
        """Current child -> parent edges."""
        return {
            uid: record["reportsTo"]
            for uid, record in self._records.items()
            if record.get("reportsTo")
        }

    async def fetch_managers(self) -> list[ManagerNode]:
        return [
            ManagerNode.model_validate({"uid": uid, **record})
            for uid, record in self._records.items()
        ]

    async def remove_reports_to(self, uid: str, updated_at: int) -> None:
        record = self._records.get(uid)
        if record is None:
            raise StoreWriteError(f"Manager record not found: {uid}", uid=uid)

        record.pop("reportsTo", None)
        record["updatedAt"] = updated_at
        self.writes.append(uid)
