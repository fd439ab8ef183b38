"""User settings access."""

from dataclasses import replace

from ..db import Store
from ..errors import ValidationError
from ..models.common import now_iso
from ..models.settings import UnitPreference, UserSettings


class SettingsService:
    """Reads and updates the singleton settings record."""

    def __init__(self, store: Store):
        self.store = store

    async def get_settings(self) -> UserSettings:
        """Get the stored settings, or the defaults if none are stored."""
        async with self.store.transaction(write=False) as uow:
            return await uow.settings.get() or UserSettings.default()

    async def update_settings(
        self,
        sync_enabled: bool | None = None,
        dark_mode: bool | None = None,
        unit_preference: UnitPreference | str | None = None,
        remote_url: str | None = None,
        remote_key: str | None = None,
        custom_fields: dict | None = None,
    ) -> UserSettings:
        """Update the provided settings fields."""
        try:
            unit = UnitPreference(unit_preference) if unit_preference else None
        except ValueError:
            raise ValidationError(f"Unknown unit preference: {unit_preference}") from None

        changes = {
            "sync_enabled": sync_enabled,
            "dark_mode": dark_mode,
            "unit_preference": unit,
            "remote_url": remote_url,
            "remote_key": remote_key,
            "custom_fields": custom_fields,
        }

        async with self.store.transaction() as uow:
            current = await uow.settings.get() or UserSettings.default()
            updated = replace(
                current,
                **{name: value for name, value in changes.items() if value is not None},
                updated_at=now_iso(),
            )
            await uow.settings.put(updated)

        return updated
