from __future__ import annotations

from typing import Optional, Protocol

from .model import CompanySettings


class SettingsRepository(Protocol):
    def get(self) -> Optional[CompanySettings]:
        """Return the stored settings row, or None if none was saved yet."""
        raise NotImplementedError

    def save(self, settings: CompanySettings) -> CompanySettings:
        """Insert or replace the singleton settings row."""
        raise NotImplementedError
