"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

import importlib

from config import get_settings_module

from src.attendance_payroll.attendance_payroll.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    stats = container.dashboard_service.get_stats()
    print(f"{stats.present_today}/{stats.total_employees} employees clocked in today")

    for record in container.payroll_service.generate_payroll("2026-01"):
        print(record.user_id, f"{record.total_hours:.2f}h", f"{record.gross_pay:.2f}")


if __name__ == "__main__":
    main()
