from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, flag, json_body, json_ok, login_required
from ..common.validators import require_choice
from ..container import Container
from ..core.enums import Decision, ReviewerRole


def register(app: Flask, container: Container) -> None:
    @app.route("/api/submissions", methods=["POST"], endpoint="create_submission")
    @login_required
    def create_submission():
        actor_id, _ = current_actor()
        sub = container.submission_service.create(
            actor_id=actor_id,
            employee_id=actor_id,
            month_key=str(json_body().get("monthKey") or ""),
        )
        return json_ok(sub.to_dict(), 201)

    @app.route("/api/submissions/mine", methods=["GET"], endpoint="my_submissions")
    @login_required
    def my_submissions():
        actor_id, role = current_actor()
        subs = container.submission_service.list_for_employee(actor_id=actor_id, current_role=role, employee_id=actor_id)
        return json_ok([s.to_dict() for s in subs])

    @app.route("/api/submissions/review", methods=["GET"], endpoint="submissions_to_review")
    @login_required
    def submissions_to_review():
        actor_id, _ = current_actor()
        role = request.args.get("role")
        subs = container.submission_service.list_for_reviewer(
            reviewer_id=actor_id,
            role=require_choice(role, ReviewerRole, "Peran") if role else None,
            pending_only=flag(request.args.get("pendingOnly", "0")),
        )
        return json_ok([s.to_dict() for s in subs])

    @app.route("/api/submissions/<int:submission_id>", methods=["GET"], endpoint="get_submission")
    @login_required
    def get_submission(submission_id: int):
        actor_id, role = current_actor()
        sub = container.submission_service.get(actor_id=actor_id, current_role=role, submission_id=submission_id)
        return json_ok(sub.to_dict())

    @app.route("/api/submissions/<int:submission_id>/advance", methods=["POST"], endpoint="advance_submission")
    @login_required
    def advance_submission(submission_id: int):
        actor_id, role = current_actor()
        body = json_body()
        sub = container.submission_service.advance(
            actor_id=actor_id,
            actor_role=role,
            submission_id=submission_id,
            reviewer_role=require_choice(body.get("role"), ReviewerRole, "Peran"),
            decision=require_choice(body.get("decision"), Decision, "Keputusan"),
            notes=body.get("notes"),
            refresh_snapshot=flag(body.get("refreshSnapshot", False)),
        )
        return json_ok(sub.to_dict())
