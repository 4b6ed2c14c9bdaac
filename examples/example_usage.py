"""Example: calling the report service directly, without Flask.

Controllers stay thin; the aggregation lives in ReportService.
"""

import importlib

from config import get_settings_module

from src.attendance_alerts.attendance_alerts.container import build_container
from src.attendance_alerts.attendance_alerts.core.enums import Role
from src.attendance_alerts.attendance_alerts.ranges.resolver import resolve_range
from src.attendance_alerts.attendance_alerts.reports.model import Requester


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    admin = Requester(user_id=1, role=Role.ADMIN)
    summary = container.report_service.cohort_summary(1, resolve_range(), admin)
    print(f"cohort {summary.cohort_number}: {summary.attendance_rate}% attendance, {len(summary.alerts)} alerts")
    for alert in summary.alerts:
        print(f"  {alert.document_id} {alert.display_name}: {alert.criterion.value}")


if __name__ == "__main__":
    main()
