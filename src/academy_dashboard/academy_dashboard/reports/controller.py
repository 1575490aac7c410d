from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.session import current_auth, roles_required
from ..common.responses import error_response
from ..common.validators import require_iso_date
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/reports/attendance", methods=["GET"], endpoint="reports_attendance")
    @roles_required(Role.SUPER_ADMIN, Role.BRANCH_MANAGER, Role.COACH)
    def reports_attendance():
        """Historical attendance; defaults to the last week of the user's branch."""

        auth = current_auth()
        try:
            start = require_iso_date(request.args["start"], "start") if request.args.get("start") else None
            end = require_iso_date(request.args["end"], "end") if request.args.get("end") else None
            branch_id = request.args.get("branch_id") if auth.role == Role.SUPER_ADMIN else None
            data = container.report_service.build_report(auth, start=start, end=end, branch_id=branch_id)
        except DomainError as e:
            return error_response(e)

        return jsonify(
            {
                "success": True,
                "rows": [r.to_dict() for r in data.rows],
                "summary": data.summary,
                "stats": data.stats.to_dict(),
            }
        )
