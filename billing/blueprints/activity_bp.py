"""
Activity Blueprint - logged work on Activity tasks.

Endpoints:
    GET    /api/v1/activities/<key>    - key: all | <uuid>
        ?description= &begin_date= &end_date= &hourly_rate_min= &hourly_rate_max=
        &user_uuid= &task_uuid=
    POST   /api/v1/activities          - log work (project)
    PUT    /api/v1/activities          - update (project)
    DELETE /api/v1/activities/<uuid>   - delete (project)
"""

from flask import Blueprint, jsonify, request

from billing.blueprints import datetime_arg, json_body, money_arg
from billing.middleware.permission_required import current_capabilities, require_capability
from billing.services import activity_service
from billing.utils.errors import E, api_error
from billing.utils.helpers import db_commit_or_error

activity_bp = Blueprint("activities", __name__, url_prefix="/api/v1")


@activity_bp.route("/activities/<key>", methods=["GET"])
def list_activities(key):
    filters = {
        "description": request.args.get("description"),
        "begin_date": datetime_arg("begin_date"),
        "end_date": datetime_arg("end_date"),
        "hourly_rate_min": money_arg("hourly_rate_min"),
        "hourly_rate_max": money_arg("hourly_rate_max"),
        "user_uuid": request.args.get("user_uuid"),
        "task_uuid": request.args.get("task_uuid"),
    }
    return jsonify(activity_service.list_activities(key, current_capabilities(), filters)), 200


@activity_bp.route("/activities", methods=["POST"])
@require_capability("project")
def create_activity():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    entry = activity_service.create_activity(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Activity created",
                    "activity": activity_service.format_activity(entry)}), 201


@activity_bp.route("/activities", methods=["PUT"])
@require_capability("project")
def update_activity():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    entry = activity_service.update_activity(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Activity updated",
                    "activity": activity_service.format_activity(entry)}), 200


@activity_bp.route("/activities/<activity_uuid>", methods=["DELETE"])
@require_capability("project")
def delete_activity(activity_uuid):
    activity_service.delete_activity(activity_uuid)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Activity deleted"}), 200
