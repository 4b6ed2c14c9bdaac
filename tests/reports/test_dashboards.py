from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

import pytest

from src.attendance_alerts.attendance_alerts.cohorts.model import CohortFilters
from src.attendance_alerts.attendance_alerts.core.enums import CohortStatus, Role
from src.attendance_alerts.attendance_alerts.core.exceptions import ForbiddenError
from src.attendance_alerts.attendance_alerts.reports.model import (
    AlertsByCriterion,
    CoordinationPanel,
    InstructorDashboard,
    Requester,
)
from tests.fakes import make_cohort, make_learner

JAN_1 = date(2026, 1, 1)


def add_cohort(store, cohort_id, patterns, **cohort_kwargs):
    """One learner per pattern, learner ids derived from the cohort id."""
    store.cohorts.append(make_cohort(cohort_id, **cohort_kwargs))
    for i, pattern in enumerate(patterns, start=1):
        learner_id = cohort_id * 100 + i
        store.learners.append(make_learner(learner_id, cohort_id=cohort_id))
        store.history(cohort_id, learner_id, JAN_1, pattern)


# ---- instructor dashboard ---------------------------------------------


def test_empty_portfolio_returns_zero_dashboard(service, january, instructor, fixed_now):
    assert service.instructor_dashboard(instructor, january, now=fixed_now) == InstructorDashboard()


def test_dashboard_aggregates_owned_cohorts(service, store, january, instructor, fixed_now):
    add_cohort(store, 1, ["UUUP", "PPPP"])
    add_cohort(store, 2, ["UUUP", "UPUPUPUPU", "PPPP"])
    add_cohort(store, 3, ["PPPP"])
    add_cohort(store, 4, ["UUUU"], instructor_id=99)

    dash = service.instructor_dashboard(instructor, january, now=fixed_now)

    assert dash.cohort_count == 3
    assert dash.learner_count == 6
    assert dash.session_count == 4 + 9 + 4
    assert dash.alert_count == 3
    assert [e.cohort_id for e in dash.top_at_risk_cohorts] == [2, 1]
    assert [e.alert_count for e in dash.top_at_risk_cohorts] == [2, 1]
    assert dash.top_at_risk_cohorts[0].program_name == "Program 1"

    # 18 present out of 29 records
    assert dash.average_attendance_rate == round(18 / 29 * 100, 2)


def test_at_risk_cohorts_limited_to_five(service, store, january, instructor, fixed_now):
    for cohort_id in range(1, 8):
        add_cohort(store, cohort_id, ["UUU"] * cohort_id)

    top = service.instructor_dashboard(instructor, january, now=fixed_now).top_at_risk_cohorts
    assert [e.cohort_id for e in top] == [7, 6, 5, 4, 3]


def test_upcoming_agenda_counts_next_seven_days(service, store, january, instructor, fixed_now):
    add_cohort(store, 1, ["P"])
    add_cohort(store, 2, ["P"], instructor_id=99)
    store.events.extend(
        [
            (1, fixed_now + timedelta(hours=2)),
            (1, fixed_now + timedelta(days=6, hours=23)),
            (1, fixed_now + timedelta(days=8)),
            (1, fixed_now - timedelta(days=1)),
            (2, fixed_now + timedelta(days=1)),
        ]
    )

    dash = service.instructor_dashboard(instructor, january, now=fixed_now)
    assert dash.upcoming_agenda_count == 2


def test_instructor_cannot_open_another_dashboard(service, store, january, instructor, fixed_now):
    add_cohort(store, 1, ["P"], instructor_id=11)
    with pytest.raises(ForbiddenError):
        service.instructor_dashboard(instructor, january, instructor_id=11, now=fixed_now)


def test_coordinator_can_open_any_dashboard(service, store, january, coordinator, fixed_now):
    add_cohort(store, 1, ["UUU"], instructor_id=11)
    dash = service.instructor_dashboard(coordinator, january, instructor_id=11, now=fixed_now)
    assert dash.cohort_count == 1
    assert dash.alert_count == 1


def test_learner_role_cannot_open_dashboard(service, january, fixed_now):
    with pytest.raises(ForbiddenError):
        service.instructor_dashboard(Requester(user_id=5, role=Role.LEARNER), january, now=fixed_now)


# ---- coordination panel -----------------------------------------------


@pytest.mark.parametrize(
    "filters",
    [CohortFilters(), CohortFilters(program_id=1), CohortFilters(cohort_status=CohortStatus.FINISHED)],
)
def test_instructor_refused_before_any_lookup(service, store, january, instructor, filters):
    add_cohort(store, 1, ["UUU"])
    with pytest.raises(ForbiddenError):
        service.coordination_panel(filters, january, instructor)
    assert store.calls == []


def test_panel_with_no_matching_cohorts_is_empty(service, store, january, admin):
    add_cohort(store, 1, ["UUU"], institution_id=1)
    panel = service.coordination_panel(CohortFilters(institution_id=2), january, admin)
    assert panel == CoordinationPanel()


def test_panel_counts_and_rankings(service, store, january, coordinator):
    add_cohort(store, 1, ["UUUP", "UPUPUPUPU"], program_id=1)
    add_cohort(store, 2, ["UUUPUU", "PPPP"], program_id=2)
    add_cohort(store, 3, ["UUUP"], program_id=1)
    add_cohort(store, 4, [], program_id=3)

    panel = service.coordination_panel(CohortFilters(), january, coordinator)

    assert panel.active_cohort_count == 4
    assert panel.active_learner_count == 5
    assert panel.alerts_by_criterion == AlertsByCriterion(consecutive_only=2, monthly_only=1, both=1)

    assert [(e.program_id, e.alert_count) for e in panel.program_ranking] == [(1, 3), (2, 1), (3, 0)]

    # cohort 4 has no records in range
    assert [(e.cohort_id, e.unexcused_count) for e in panel.cohort_ranking] == [(1, 8), (2, 5), (3, 3)]


def test_panel_applies_filters(service, store, january, admin):
    add_cohort(store, 1, ["UUU"], program_id=1, status=CohortStatus.ACTIVE)
    add_cohort(store, 2, ["UUU"], program_id=1, status=CohortStatus.FINISHED)
    add_cohort(store, 3, ["UUU"], program_id=2, status=CohortStatus.ACTIVE)

    panel = service.coordination_panel(
        CohortFilters(program_id=1, cohort_status=CohortStatus.ACTIVE), january, admin
    )
    assert panel.active_cohort_count == 1
    assert [e.cohort_id for e in panel.cohort_ranking] == [1]


def test_rankings_limited_to_ten(service, store, january, admin):
    for cohort_id in range(1, 13):
        add_cohort(store, cohort_id, ["U" * cohort_id], program_id=cohort_id)

    panel = service.coordination_panel(CohortFilters(), january, admin)
    assert len(panel.program_ranking) == 10
    assert len(panel.cohort_ranking) == 10
    assert panel.cohort_ranking[0].cohort_id == 12
    assert panel.cohort_ranking[0].unexcused_count == 12


def test_cohorts_without_program_name_are_labelled(service, store, january, admin, instructor, fixed_now):
    add_cohort(store, 1, ["UUU"], program_id=5)
    add_cohort(store, 2, ["UUU"], program_id=5)
    store.cohorts[0] = replace(store.cohorts[0], program_name=None)

    panel = service.coordination_panel(CohortFilters(), january, admin)
    assert [(e.program_name, e.alert_count) for e in panel.program_ranking] == [("Program 5", 2)]
    assert panel.cohort_ranking[0].program_name == "No program"

    dash = service.instructor_dashboard(instructor, january, now=fixed_now)
    assert {e.program_name for e in dash.top_at_risk_cohorts} == {"No program", "Program 5"}

    store.cohorts[1] = replace(store.cohorts[1], program_name=None)
    panel = service.coordination_panel(CohortFilters(), january, admin)
    assert panel.program_ranking[0].program_name == "No program"
