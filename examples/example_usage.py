"""Using the service layer directly, without Flask.

Controllers are a thin layer; the lifecycle rules live in the services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.hr_lifecycle.hr_lifecycle.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    for balance in container.leave_ledger.list_balances(user_id=2, year=date.today().year):
        print(f"{balance.leave_type_id}: {balance.balance} of {balance.allocated} left")

    for record in container.attendance_service.get_history(user_id=2, limit=5):
        print(record.work_date, record.check_in_status, record.check_out_status, record.total_hours)


if __name__ == "__main__":
    main()
