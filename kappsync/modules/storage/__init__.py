"""
Storage Module - Black Box Interface

Purpose: Persist resource specs and their derived attributes between events
Interface: lock(), get(), put(), delete(), identities(), lock_count()
Hidden: In-memory maps, per-identity locking

Lifecycle events on one identity are serialized through lock(); events on
different identities may run concurrently. A lock is forgotten once its
identity has no record and no event holds or waits on it.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from kappsync.modules.api.models import AppResourceSpec, AppResourceState


@dataclass
class StoredApp:
    """Last applied spec and persisted attributes of an app."""
    spec: AppResourceSpec
    state: AppResourceState


@dataclass
class _IdentityLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class StorageModule:
    """Black box storage abstraction."""

    def __init__(self):
        """Initialize empty storage."""
        self._records: Dict[str, StoredApp] = {}
        self._locks: Dict[str, _IdentityLock] = {}
        self._guard = threading.Lock()

    @contextmanager
    def lock(self, identity: str) -> Iterator[None]:
        """Hold the lock serializing events for `identity`."""
        with self._guard:
            entry = self._locks.setdefault(identity, _IdentityLock())
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                self._forget_lock(identity)

    def get(self, identity: str) -> Optional[StoredApp]:
        """Get a copy of the stored record, or None."""
        with self._guard:
            record = self._records.get(identity)
            if record is None:
                return None
            return StoredApp(spec=record.spec, state=record.state.model_copy())

    def put(self, spec: AppResourceSpec, state: AppResourceState) -> None:
        """Store a record under the spec's identity."""
        with self._guard:
            self._records[spec.identity] = StoredApp(spec=spec, state=state.model_copy())

    def delete(self, identity: str) -> bool:
        """Remove a record; returns whether it existed."""
        with self._guard:
            existed = self._records.pop(identity, None) is not None
            self._forget_lock(identity)
            return existed

    def identities(self) -> List[str]:
        """List stored identities."""
        with self._guard:
            return sorted(self._records)

    def lock_count(self) -> int:
        """Number of identities with a live lock."""
        with self._guard:
            return len(self._locks)

    def _forget_lock(self, identity: str) -> None:
        # Caller holds self._guard
        entry = self._locks.get(identity)
        if entry is not None and entry.users == 0 and identity not in self._records:
            del self._locks[identity]


__all__ = ["StorageModule", "StoredApp"]
