"""
User Blueprint - read-only, redacted.

Endpoints:
    GET /api/v1/users/<key>   - key: all | this | <uuid>
        ?username= &email= &cpf= &name= &phone= &status=true|false &auth=<role uuids>
        &hourly_rate_min= &hourly_rate_max=
"""

from flask import Blueprint, g, jsonify, request

from billing.blueprints import csv_arg, money_arg
from billing.middleware.permission_required import current_capabilities
from billing.services import user_service
from billing.utils.helpers import parse_bool_arg

user_bp = Blueprint("users", __name__, url_prefix="/api/v1")


@user_bp.route("/users/<key>", methods=["GET"])
def list_users(key):
    filters = {
        name: request.args.get(name)
        for name in ("username", "email", "cpf", "name", "phone")
    }
    filters["active"] = parse_bool_arg(request.args.get("status"))
    filters["role_uuids"] = csv_arg("auth")
    filters["hourly_rate_min"] = money_arg("hourly_rate_min")
    filters["hourly_rate_max"] = money_arg("hourly_rate_max")

    users = user_service.list_users(
        key,
        own_uuid=g.user_uuid,
        capabilities=current_capabilities(),
        filters=filters,
    )
    return jsonify(users), 200
