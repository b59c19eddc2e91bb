"""
Status Blueprint - workflow statuses.

Endpoints:
    GET    /api/v1/status/<key>    - key: all | <uuid>; ?name= &priority=1,2
    POST   /api/v1/status          - create (project)
    PUT    /api/v1/status          - update (project)
    DELETE /api/v1/status/<uuid>   - delete (project; refused while in use)
"""

from flask import Blueprint, jsonify, request

from billing.blueprints import csv_arg, json_body
from billing.middleware.permission_required import require_capability
from billing.services import status_service
from billing.utils.errors import E, api_error
from billing.utils.helpers import db_commit_or_error

status_bp = Blueprint("status", __name__, url_prefix="/api/v1")


@status_bp.route("/status/<key>", methods=["GET"])
def list_statuses(key):
    priorities = [int(p) for p in csv_arg("priority") if p.isdigit()]
    statuses = status_service.list_statuses(key, name=request.args.get("name"),
                                            priorities=priorities)
    return jsonify(statuses), 200


@status_bp.route("/status", methods=["POST"])
@require_capability("project")
def create_status():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    status = status_service.create_status(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Status created", "status": status.to_dict()}), 201


@status_bp.route("/status", methods=["PUT"])
@require_capability("project")
def update_status():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    status = status_service.update_status(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Status updated", "status": status.to_dict()}), 200


@status_bp.route("/status/<status_uuid>", methods=["DELETE"])
@require_capability("project")
def delete_status(status_uuid):
    status_service.delete_status(status_uuid)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Status deleted"}), 200
