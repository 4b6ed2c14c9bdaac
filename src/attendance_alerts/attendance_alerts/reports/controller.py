from __future__ import annotations

import dataclasses
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session

from ..cohorts.model import CohortFilters
from ..container import Container
from ..core.enums import CohortStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..ranges.resolver import resolve_range
from .model import Requester


def to_jsonable(value: Any) -> Any:
    """Report dataclasses to plain JSON types (dates ISO, enums by value)."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    return value


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "Authentication required"}), 401
            return view(*args, **kwargs)

        return wrapper

    def _requester() -> Requester:
        try:
            role = Role(session.get("role"))
        except ValueError:
            raise AuthorizationError("Unknown role")
        return Requester(user_id=int(session["user_id"]), role=role)

    def _range():
        return resolve_range(request.args.get("from"), request.args.get("to"), request.args.get("month"))

    def _optional_int(name: str) -> Optional[int]:
        raw = request.args.get(name)
        if raw is None or raw == "":
            return None
        if not raw.isdigit():
            raise ValidationError(f"{name} must be an integer")
        return int(raw)

    def _csv_response(payload: str, filename: str):
        return app.response_class(
            payload.encode("utf-8"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(AuthorizationError)
    def handle_authorization_error(e):
        return jsonify({"error": str(e)}), 403

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.route("/reports/instructor/dashboard", methods=["GET"], endpoint="reports_instructor_dashboard")
    @login_required
    def instructor_dashboard():
        data = reports.instructor_dashboard(_requester(), _range(), instructor_id=_optional_int("instructor_id"))
        return jsonify(to_jsonable(data))

    @app.route("/reports/cohorts/<int:cohort_id>/summary", methods=["GET"], endpoint="reports_cohort_summary")
    @login_required
    def cohort_summary(cohort_id: int):
        data = reports.cohort_summary(cohort_id, _range(), _requester())
        return jsonify(to_jsonable(data))

    @app.route("/reports/cohorts/<int:cohort_id>/alerts", methods=["GET"], endpoint="reports_cohort_alerts")
    @login_required
    def cohort_alerts(cohort_id: int):
        include_details = (request.args.get("include_details") or "").lower() in {"1", "true", "yes"}
        data = reports.cohort_alerts(cohort_id, _range(), _requester(), include_details=include_details)
        return jsonify(to_jsonable(data))

    @app.route("/reports/learners/<int:learner_id>/summary", methods=["GET"], endpoint="reports_learner_summary")
    @login_required
    def learner_summary(learner_id: int):
        data = reports.learner_summary(learner_id, _range(), _requester())
        return jsonify(to_jsonable(data))

    @app.route("/reports/learners/<int:learner_id>/alert", methods=["GET"], endpoint="reports_learner_alert")
    @login_required
    def learner_alert(learner_id: int):
        data = reports.evaluate_learner_alert(learner_id, _range(), requester=_requester())
        return jsonify(to_jsonable(data))

    @app.route("/reports/coordination/panel", methods=["GET"], endpoint="reports_coordination_panel")
    @login_required
    def coordination_panel():
        requester = _requester()
        reports.ensure_coordination_access(requester)

        status_s = request.args.get("cohort_status")
        try:
            status = CohortStatus(status_s) if status_s else None
        except ValueError:
            raise ValidationError(f"Unknown cohort status: {status_s}")

        filters = CohortFilters(
            institution_id=_optional_int("institution_id"),
            program_id=_optional_int("program_id"),
            cohort_status=status,
        )
        data = reports.coordination_panel(filters, _range(), requester)
        return jsonify(to_jsonable(data))

    @app.route("/reports/cohorts/<int:cohort_id>/attendance.csv", methods=["GET"], endpoint="reports_attendance_csv")
    @login_required
    def attendance_csv(cohort_id: int):
        date_range = _range()
        payload = reports.export_attendance_csv(cohort_id, date_range, _requester())
        return _csv_response(payload, f"attendance_cohort_{cohort_id}_{date_range.label}.csv")

    @app.route("/reports/cohorts/<int:cohort_id>/alerts.csv", methods=["GET"], endpoint="reports_alerts_csv")
    @login_required
    def alerts_csv(cohort_id: int):
        month = request.args.get("month")
        if not month:
            raise ValidationError("month (YYYY-MM) is required")
        payload = reports.export_alerts_csv(cohort_id, resolve_range(year_month=month), _requester())
        return _csv_response(payload, f"alerts_cohort_{cohort_id}_{month}.csv")
