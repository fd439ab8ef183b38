"""User settings model (singleton record)."""

from dataclasses import dataclass, field
from enum import Enum

from .common import now_iso

SETTINGS_ID = "settings"


class UnitPreference(str, Enum):
    """Preferred measurement system."""

    METRIC = "metric"
    IMPERIAL = "imperial"


@dataclass
class UserSettings:
    """Application settings. There is only ever one, stored under SETTINGS_ID.

    The remote_* fields and last_sync are reserved for a future sync feature.
    """

    updated_at: str
    id: str = SETTINGS_ID
    sync_enabled: bool = False
    dark_mode: bool = True
    unit_preference: UnitPreference | None = None
    remote_url: str | None = None
    remote_key: str | None = None
    last_sync: str | None = None
    custom_fields: dict = field(default_factory=dict)

    @classmethod
    def default(cls) -> "UserSettings":
        """Fallback settings used when none are stored."""
        return cls(updated_at=now_iso())

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "id": self.id,
            "syncEnabled": self.sync_enabled,
            "darkMode": self.dark_mode,
            "unitPreference": self.unit_preference.value if self.unit_preference else None,
            "remoteUrl": self.remote_url,
            "remoteKey": self.remote_key,
            "lastSync": self.last_sync,
            "customFields": dict(self.custom_fields),
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserSettings":
        """Create from the wire representation."""
        unit = data.get("unitPreference")
        return cls(
            id=data.get("id", SETTINGS_ID),
            updated_at=data["updatedAt"],
            sync_enabled=bool(data.get("syncEnabled", False)),
            dark_mode=bool(data.get("darkMode", True)),
            unit_preference=UnitPreference(unit) if unit else None,
            remote_url=data.get("remoteUrl"),
            remote_key=data.get("remoteKey"),
            last_sync=data.get("lastSync"),
            custom_fields=dict(data.get("customFields") or {}),
        )
