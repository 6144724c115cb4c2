from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..common.http import admin_required, current_actor, flag, json_body, json_ok, login_required
from ..common.validators import require_choice
from ..container import Container
from ..core.enums import EvidenceSource
from ..core.exceptions import ValidationError
from .catalog import DAILY_ACTIVITIES


def register(app: Flask, container: Container) -> None:
    @app.route("/api/activities", methods=["GET"], endpoint="activity_catalog")
    @login_required
    def activity_catalog():
        return json_ok(
            [
                {
                    "id": a.activity_id,
                    "category": a.category,
                    "title": a.title,
                    "monthlyTarget": a.monthly_target,
                    "trigger": a.trigger,
                }
                for a in DAILY_ACTIVITIES
            ]
        )

    @app.route("/api/ledger/<employee_id>", methods=["GET"], endpoint="read_ledger")
    @login_required
    def read_ledger(employee_id: str):
        actor_id, role = current_actor()
        ledger = container.ledger_service.read_ledger(current_role=role, actor_id=actor_id, employee_id=employee_id)
        return json_ok(ledger)

    @app.route("/api/ledger/<employee_id>/<month_key>", methods=["GET"], endpoint="read_ledger_month")
    @login_required
    def read_ledger_month(employee_id: str, month_key: str):
        actor_id, role = current_actor()
        known = request.args.get("knownMergedAt")
        view = container.ledger_service.read_month(
            current_role=role,
            actor_id=actor_id,
            employee_id=employee_id,
            month_key=month_key,
            known_merged_at=parse_iso_datetime(known) if known else None,
        )
        return json_ok(view.to_dict())

    @app.route("/api/ledger/<employee_id>/editable", methods=["GET"], endpoint="ledger_editable")
    @login_required
    def ledger_editable(employee_id: str):
        target = parse_iso_date(request.args.get("date", ""))
        decision = container.ledger_service.check_editable(employee_id=employee_id, target=target)
        return json_ok({"date": target.isoformat(), "editable": decision.editable, "reason": decision.reason})

    @app.route("/api/ledger/ingest/<source>", methods=["POST"], endpoint="ingest_evidence")
    @admin_required
    def ingest_evidence(source: str):
        src = require_choice(source, EvidenceSource, "Sumber")
        body = request.get_json(silent=True)
        items = body.get("items") if isinstance(body, dict) else body
        if not isinstance(items, list):
            raise ValidationError("Body harus berisi daftar 'items'")
        report = container.ledger_service.ingest(src, items)
        return json_ok(report.to_dict())

    @app.route("/api/ledger/self-report", methods=["POST"], endpoint="self_report")
    @login_required
    def self_report():
        actor_id, _ = current_actor()
        body = json_body()
        report = container.ledger_service.record_self_report(
            actor_id=actor_id,
            employee_id=str(body.get("employeeId") or actor_id),
            activity_id=str(body.get("activityId") or ""),
            date_value=str(body.get("date") or ""),
            present=flag(body.get("present", True)),
        )
        return json_ok(report.to_dict())
