from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import PayrollLine, PayrollRecord, PayrollRow


class PayrollRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_for_month(self, month: str) -> Sequence[PayrollRow]:
        raise NotImplementedError

    def replace_month(self, month: str, lines: Sequence[PayrollLine]) -> Sequence[PayrollRecord]:
        """Delete every record for `month`, then insert `lines`, atomically.

        If the insert fails, the previous records for the month must survive.
        """
        raise NotImplementedError

    def mark_paid(self, record_id: int) -> bool:
        """Flip status generated -> paid. False if no generated record matched."""
        raise NotImplementedError
