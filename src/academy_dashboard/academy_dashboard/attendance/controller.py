from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..auth.session import current_auth, login_required, roles_required
from ..common.responses import error_response
from ..common.validators import require_iso_date
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError
from .model import RosterFilter

MARKING_ROLES = (Role.SUPER_ADMIN, Role.BRANCH_MANAGER, Role.COACH)


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _roster_filter() -> RosterFilter:
        auth = current_auth()
        if auth.role == Role.SUPER_ADMIN:
            branch_id = request.args.get("branch_id") or None
        else:
            # Managers and coaches only ever see their own branch
            branch_id = auth.branch_id
        return RosterFilter(
            search=request.args.get("search", ""),
            course_id=request.args.get("course_id") or None,
            branch_id=branch_id,
        )

    @app.route("/attendance/roster", methods=["GET"], endpoint="attendance_roster")
    @roles_required(*MARKING_ROLES)
    def attendance_roster():
        try:
            raw_date = request.args.get("date")
            day = require_iso_date(raw_date, "date") if raw_date else date.today()
            data = service.load_roster(current_auth(), day, _roster_filter())
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, **data})

    @app.route("/attendance/roster/current", methods=["GET"], endpoint="attendance_roster_current")
    @roles_required(*MARKING_ROLES)
    def attendance_roster_current():
        """Roster as held locally, without going back to the backend."""
        return jsonify({"success": True, **service.roster(current_auth())})

    @app.route("/attendance/roster/<record_id>/status", methods=["POST"], endpoint="attendance_set_status")
    @roles_required(*MARKING_ROLES)
    def attendance_set_status(record_id: str):
        auth = current_auth()
        data = request.get_json(silent=True) or {}
        try:
            record = service.set_status(auth, record_id, data.get("status", ""))
        except DomainError as e:
            return error_response(e)

        summary = service.workspace_for(auth).engine.summary()
        return jsonify({"success": True, "record": record.to_dict(), **summary})

    @app.route("/attendance/roster/<record_id>/discard", methods=["POST"], endpoint="attendance_discard")
    @roles_required(*MARKING_ROLES)
    def attendance_discard(record_id: str):
        try:
            record = service.discard(current_auth(), record_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "record": record.to_dict()})

    @app.route("/attendance/roster/<record_id>/save", methods=["POST"], endpoint="attendance_save_one")
    @roles_required(*MARKING_ROLES)
    def attendance_save_one(record_id: str):
        try:
            record = service.save_one(current_auth(), record_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "record": record.to_dict()})

    @app.route("/attendance/save", methods=["POST"], endpoint="attendance_save_all")
    @roles_required(*MARKING_ROLES)
    def attendance_save_all():
        try:
            result = service.save_all(current_auth())
        except DomainError as e:
            return error_response(e)

        if result.auth_failed:
            return jsonify({"success": False, "message": "Authentication failed. Please log in again.", **result.to_dict()}), 401

        body = {"success": result.error_count == 0, **result.to_dict()}
        if result.error_count:
            body["warning"] = result.message
        return jsonify(body)

    @app.route("/attendance/export.csv", methods=["GET"], endpoint="attendance_export_csv")
    @login_required
    def attendance_export_csv():
        auth = current_auth()
        try:
            export = container.export_service.export(auth, service.visible_records(auth))
        except DomainError as e:
            return error_response(e)

        return app.response_class(
            export.content.encode("utf-8-sig"),
            mimetype="text/csv",
            headers={
                "Content-Disposition": f"attachment; filename={export.filename}",
                "X-Export-Source": export.source,
            },
        )
