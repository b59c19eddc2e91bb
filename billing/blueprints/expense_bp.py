"""
Expense Blueprint - spending entries on Expense tasks.

Endpoints:
    GET    /api/v1/expenses/<key>    - key: all | <uuid>
        ?description= &date_min= &date_max= &cost_min= &cost_max=
        &task_uuid= &supplier_uuid=
    POST   /api/v1/expenses          - record (project)
    PUT    /api/v1/expenses          - update (project)
    DELETE /api/v1/expenses/<uuid>   - delete (project)
"""

from flask import Blueprint, jsonify, request

from billing.blueprints import datetime_arg, json_body, money_arg
from billing.middleware.permission_required import current_capabilities, require_capability
from billing.services import expense_service
from billing.utils.errors import E, api_error
from billing.utils.helpers import db_commit_or_error

expense_bp = Blueprint("expenses", __name__, url_prefix="/api/v1")


@expense_bp.route("/expenses/<key>", methods=["GET"])
def list_expenses(key):
    filters = {
        "description": request.args.get("description"),
        "date_min": datetime_arg("date_min"),
        "date_max": datetime_arg("date_max"),
        "cost_min": money_arg("cost_min"),
        "cost_max": money_arg("cost_max"),
        "task_uuid": request.args.get("task_uuid"),
        "supplier_uuid": request.args.get("supplier_uuid"),
    }
    return jsonify(expense_service.list_expenses(key, current_capabilities(), filters)), 200


@expense_bp.route("/expenses", methods=["POST"])
@require_capability("project")
def create_expense():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    entry = expense_service.create_expense(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Expense created",
                    "expense": expense_service.format_expense(entry)}), 201


@expense_bp.route("/expenses", methods=["PUT"])
@require_capability("project")
def update_expense():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    entry = expense_service.update_expense(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Expense updated",
                    "expense": expense_service.format_expense(entry)}), 200


@expense_bp.route("/expenses/<expense_uuid>", methods=["DELETE"])
@require_capability("project")
def delete_expense(expense_uuid):
    expense_service.delete_expense(expense_uuid)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Expense deleted"}), 200
