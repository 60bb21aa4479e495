"""Example: drive the service layer directly (no Flask).

Controllers are thin; every payroll rule lives in the services.
"""

import importlib
import sys

from config import get_settings_module

from src.attendance_payroll.attendance_payroll.container import build_container
from src.attendance_payroll.attendance_payroll.core.policy import PayrollPolicy


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, policy=PayrollPolicy.from_settings(settings))

    employee_id = int(sys.argv[1]) if len(sys.argv) > 1 else 1
    year = int(sys.argv[2]) if len(sys.argv) > 2 else 2024
    month = int(sys.argv[3]) if len(sys.argv) > 3 else 1

    for day in container.attendance_service.month_calendar(employee_id, year, month):
        print(day.to_dict())
    print(container.payroll_service.payslip(employee_id, year, month).to_dict())


if __name__ == "__main__":
    main()
