"""Extension-point records for a future synchronisation layer.

Nothing in the engine drives these yet; the store only keeps the tables
so a sync implementation can queue pending operations and record conflicts.
"""

from dataclasses import dataclass
from enum import Enum


class SyncOperation(str, Enum):
    """Kind of pending change."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class SyncQueueItem:
    """A local change waiting to be pushed to a remote."""

    id: str
    entity: str
    entity_id: str
    operation: SyncOperation
    created_at: str
    payload: dict | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "entity": self.entity,
            "entityId": self.entity_id,
            "operation": self.operation.value,
            "payload": self.payload,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SyncQueueItem":
        return cls(
            id=data["id"],
            entity=data["entity"],
            entity_id=data["entityId"],
            operation=SyncOperation(data["operation"]),
            created_at=data["createdAt"],
            payload=data.get("payload"),
        )


@dataclass
class SyncConflict:
    """A record that changed both locally and remotely."""

    id: str
    entity: str
    entity_id: str
    local_updated_at: str
    remote_updated_at: str
    created_at: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "entity": self.entity,
            "entityId": self.entity_id,
            "localUpdatedAt": self.local_updated_at,
            "remoteUpdatedAt": self.remote_updated_at,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SyncConflict":
        return cls(
            id=data["id"],
            entity=data["entity"],
            entity_id=data["entityId"],
            local_updated_at=data["localUpdatedAt"],
            remote_updated_at=data["remoteUpdatedAt"],
            created_at=data["createdAt"],
        )
