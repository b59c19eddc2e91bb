"""
Role Blueprint - capability bundles.

Endpoints:
    GET    /api/v1/roles/<key>    - key: all | this | <uuid>; ?type=a,b&auth=admin,financial
    POST   /api/v1/roles          - create (admin)
    PUT    /api/v1/roles          - update (admin; owner role refused)
    DELETE /api/v1/roles/<uuid>   - delete (admin; owner role refused)
"""

from flask import Blueprint, g, jsonify

from billing.blueprints import csv_arg, json_body
from billing.middleware.permission_required import require_capability
from billing.services import role_service
from billing.utils.errors import E, api_error
from billing.utils.helpers import db_commit_or_error

role_bp = Blueprint("roles", __name__, url_prefix="/api/v1")


@role_bp.route("/roles/<key>", methods=["GET"])
def list_roles(key):
    roles = role_service.list_roles(
        key,
        own_role_uuid=g.role_uuid,
        types=csv_arg("type"),
        required=csv_arg("auth"),
    )
    return jsonify(roles), 200


@role_bp.route("/roles", methods=["POST"])
@require_capability("admin")
def create_role():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    role = role_service.create_role(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Role created", "role": role.to_dict()}), 201


@role_bp.route("/roles", methods=["PUT"])
@require_capability("admin")
def update_role():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    role = role_service.update_role(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Role updated", "role": role.to_dict()}), 200


@role_bp.route("/roles/<role_uuid>", methods=["DELETE"])
@require_capability("admin")
def delete_role(role_uuid):
    role_service.delete_role(role_uuid)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Role deleted"}), 200
