from __future__ import annotations

from flask import Flask

from ..common.http import current_actor, json_body, json_ok, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees/me", methods=["GET"], endpoint="my_profile")
    @login_required
    def my_profile():
        actor_id, _ = current_actor()
        emp = container.employee_service.get(actor_id)
        return json_ok(
            {
                "id": emp.employee_id,
                "fullName": emp.full_name,
                "role": emp.role.value,
                "mentorId": emp.mentor_id,
                "supervisorId": emp.supervisor_id,
                "kaUnitId": emp.ka_unit_id,
                "managerId": emp.manager_id,
                "activatedMonths": sorted(emp.activated_months),
            }
        )

    @app.route("/api/employees/me/activations", methods=["POST"], endpoint="activate_month")
    @login_required
    def activate_month():
        actor_id, _ = current_actor()
        months = container.employee_service.activate_month(
            actor_id=actor_id,
            employee_id=actor_id,
            month_key=str(json_body().get("monthKey") or ""),
        )
        return json_ok({"activatedMonths": list(months)})

    @app.route("/api/employees/me/mentees", methods=["GET"], endpoint="my_mentees")
    @login_required
    def my_mentees():
        actor_id, _ = current_actor()
        mentees = container.employee_service.list_mentees(reviewer_id=actor_id)
        return json_ok([{"id": m.employee_id, "fullName": m.full_name} for m in mentees])
