from __future__ import annotations

import logging
from dataclasses import replace
from datetime import time
from typing import Any, Mapping

from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_non_empty, require_positive
from ..core.constants import (
    DEFAULT_AUTO_CHECKOUT_TIME,
    DEFAULT_COMPANY_NAME,
    DEFAULT_OVERTIME_RATE,
    DEFAULT_WORKING_HOURS_END,
    DEFAULT_WORKING_HOURS_START,
)
from ..core.exceptions import ValidationError
from .model import CompanySettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

_TIME_FIELDS = {"working_hours_start", "working_hours_end", "auto_checkout_time"}
_BOOL_FIELDS = {"auto_checkout", "notifications_enabled", "require_photo"}


def default_settings() -> CompanySettings:
    return CompanySettings(
        company_name=DEFAULT_COMPANY_NAME,
        working_hours_start=parse_hhmm(DEFAULT_WORKING_HOURS_START),
        working_hours_end=parse_hhmm(DEFAULT_WORKING_HOURS_END),
        overtime_rate=DEFAULT_OVERTIME_RATE,
        auto_checkout=True,
        auto_checkout_time=parse_hhmm(DEFAULT_AUTO_CHECKOUT_TIME),
        notifications_enabled=True,
        require_photo=True,
    )


class SettingsService:
    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get_settings(self) -> CompanySettings:
        return self._settings.get() or default_settings()

    def overtime_multiplier(self) -> float:
        rate = self.get_settings().overtime_rate
        return float(rate) if rate and rate > 0 else DEFAULT_OVERTIME_RATE

    def update_settings(self, changes: Mapping[str, Any]) -> CompanySettings:
        """Partial update; unknown fields are rejected."""
        current = self.get_settings()
        allowed = set(CompanySettings.__dataclass_fields__) - {"updated_at"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        clean: dict[str, Any] = {}
        for name, value in changes.items():
            if name == "company_name":
                clean[name] = require_non_empty(value, "Company name")
            elif name == "overtime_rate":
                clean[name] = require_positive(value, "Overtime rate")
            elif name in _TIME_FIELDS:
                clean[name] = value if isinstance(value, time) else parse_hhmm(value)
            elif name in _BOOL_FIELDS:
                if not isinstance(value, bool):
                    raise ValidationError(f"{name} must be true or false")
                clean[name] = value

        updated = replace(current, **clean)
        if updated.working_hours_end <= updated.working_hours_start:
            raise ValidationError("Working hours end must be after start")

        saved = self._settings.save(updated)
        logger.info("Company settings updated: %s", ", ".join(sorted(clean)) or "-")
        return saved
