from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, json_body, json_ok, login_required
from ..common.validators import require_choice
from ..container import Container
from ..core.enums import Decision, RequestKind, RequestStatus


def register(app: Flask, container: Container) -> None:
    def _kind(value: str) -> RequestKind:
        return require_choice(value.replace("-", "_"), RequestKind, "Jenis pengajuan")

    @app.route("/api/requests/<kind>", methods=["POST"], endpoint="create_manual_request")
    @login_required
    def create_manual_request(kind: str):
        actor_id, _ = current_actor()
        body = json_body()
        service = container.manual_request_service
        if _kind(kind) == RequestKind.TADARUS:
            req = service.create_tadarus(
                actor_id=actor_id,
                employee_id=actor_id,
                date_value=str(body.get("date") or ""),
                category=body.get("category"),
                notes=body.get("notes"),
            )
        else:
            req = service.create_missed_prayer(
                actor_id=actor_id,
                employee_id=actor_id,
                date_value=str(body.get("date") or ""),
                prayer_id=str(body.get("prayerId") or ""),
                notes=body.get("notes"),
            )
        return json_ok(req.to_dict(), 201)

    @app.route("/api/requests/<kind>/mine", methods=["GET"], endpoint="my_manual_requests")
    @login_required
    def my_manual_requests(kind: str):
        actor_id, role = current_actor()
        reqs = container.manual_request_service.list_for_employee(
            kind=_kind(kind), actor_id=actor_id, current_role=role, employee_id=actor_id
        )
        return json_ok([r.to_dict() for r in reqs])

    @app.route("/api/requests/<kind>/review", methods=["GET"], endpoint="manual_requests_to_review")
    @login_required
    def manual_requests_to_review(kind: str):
        actor_id, _ = current_actor()
        status = request.args.get("status")
        reqs = container.manual_request_service.list_for_reviewer(
            kind=_kind(kind),
            reviewer_id=actor_id,
            status=require_choice(status, RequestStatus, "Status") if status else None,
        )
        return json_ok([r.to_dict() for r in reqs])

    @app.route("/api/requests/<kind>/<int:request_id>/review", methods=["POST"], endpoint="review_manual_request")
    @login_required
    def review_manual_request(kind: str, request_id: int):
        actor_id, role = current_actor()
        body = json_body()
        req = container.manual_request_service.review(
            kind=_kind(kind),
            actor_id=actor_id,
            actor_role=role,
            request_id=request_id,
            decision=require_choice(body.get("decision"), Decision, "Keputusan"),
            reviewer_notes=body.get("notes"),
        )
        return json_ok(req.to_dict())

    @app.route("/api/requests/<kind>/<int:request_id>/retry-sync", methods=["POST"], endpoint="retry_manual_request_sync")
    @login_required
    def retry_manual_request_sync(kind: str, request_id: int):
        actor_id, role = current_actor()
        req = container.manual_request_service.retry_ledger_merge(
            kind=_kind(kind), actor_id=actor_id, actor_role=role, request_id=request_id
        )
        return json_ok(req.to_dict())
