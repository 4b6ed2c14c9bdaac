from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.attendance_alerts.attendance_alerts.core.enums import Role
from src.attendance_alerts.attendance_alerts.ranges.resolver import month_to_range
from src.attendance_alerts.attendance_alerts.reports.model import Requester
from src.attendance_alerts.attendance_alerts.reports.service import ReportService
from tests.fakes import InMemoryLearners, InMemoryStore


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 20, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def january():
    return month_to_range(2026, 1)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def service(store: InMemoryStore) -> ReportService:
    return ReportService(store, InMemoryLearners(store), store, store)


@pytest.fixture
def admin() -> Requester:
    return Requester(user_id=1, role=Role.ADMIN)


@pytest.fixture
def coordinator() -> Requester:
    return Requester(user_id=2, role=Role.COORDINATOR)


@pytest.fixture
def instructor() -> Requester:
    return Requester(user_id=10, role=Role.INSTRUCTOR)
