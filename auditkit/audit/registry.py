"""Resolves the configured audit_with identifier to a concrete store."""

from typing import Callable, Dict, Optional, Union

from auditkit.audit.exceptions import AuditStoreNotConfiguredError
from auditkit.audit.memory_store import InMemoryAuditStore
from auditkit.audit.repository import AuditStore
from auditkit.config.settings import AuditSettings

StoreFactory = Callable[[AuditSettings], AuditStore]


def _sql_store(settings: AuditSettings) -> AuditStore:
    from auditkit.infrastructure.database.audit_store_db import SqlAuditStore

    return SqlAuditStore.from_settings(settings)


def _redis_store(settings: AuditSettings) -> AuditStore:
    from auditkit.infrastructure.cache.audit_store_redis import RedisAuditStore

    return RedisAuditStore.from_settings(settings)


class StoreRegistry:
    """
    Name -> store factory. Each store is built once, on first resolve,
    and shared by every writer using this registry.
    """

    def __init__(self) -> None:
        self._factories: Dict[str, StoreFactory] = {}
        self._stores: Dict[str, AuditStore] = {}

    def register(self, name: str, store: Union[AuditStore, StoreFactory]) -> None:
        """Register a store instance, or a factory taking AuditSettings."""
        key = name.lower()
        self._stores.pop(key, None)
        if hasattr(store, "create"):
            self._factories[key] = lambda _settings: store
            self._stores[key] = store
        else:
            self._factories[key] = store

    def names(self) -> list[str]:
        return sorted(self._factories)

    def resolve(self, name: Optional[str], settings: AuditSettings) -> AuditStore:
        key = (name or "").lower()
        if key not in self._factories:
            raise AuditStoreNotConfiguredError(
                f"No audit store named {name!r} is registered "
                f"(known stores: {', '.join(self.names()) or 'none'}).\n\n"
                "Either a) register it before building entities:\n\n"
                f"    registry.register({name!r}, MyAuditStore())\n\n"
                "Or b) point audit_with at an existing store:\n\n"
                "    AUDITKIT_AUDIT_WITH=memory\n"
            )
        if key not in self._stores:
            self._stores[key] = self._factories[key](settings)
        return self._stores[key]


def default_registry() -> StoreRegistry:
    registry = StoreRegistry()
    registry.register("memory", InMemoryAuditStore())
    registry.register("sql", _sql_store)
    registry.register("redis", _redis_store)
    return registry


# Process-wide registry used when none is passed explicitly
registry = default_registry()
