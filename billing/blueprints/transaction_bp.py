"""
Transaction Blueprint - the ledger.

Endpoints:
    GET    /api/v1/transactions/<key>   - key: all | <uuid>
        ?type=Income,Expense,... &date_min= &date_max= &amount_min= &amount_max=
        &description= &client_uuid= &project_uuid= &user_uuid=
    POST   /api/v1/transactions         - create (financial)
    PUT    /api/v1/transactions         - update (financial)
    DELETE /api/v1/transactions/<uuid>  - delete (financial)
"""

from flask import Blueprint, g, jsonify, request

from billing.blueprints import datetime_arg, json_body, kinds_arg, money_arg
from billing.core.records import TransactionKind
from billing.middleware.permission_required import current_capabilities, require_capability
from billing.services import transaction_service
from billing.utils.errors import E, api_error
from billing.utils.helpers import db_commit_or_error

transaction_bp = Blueprint("transactions", __name__, url_prefix="/api/v1")


@transaction_bp.route("/transactions/<key>", methods=["GET"])
def list_transactions(key):
    filters = {
        "type": kinds_arg("type", TransactionKind),
        "date_min": datetime_arg("date_min"),
        "date_max": datetime_arg("date_max"),
        "amount_min": money_arg("amount_min"),
        "amount_max": money_arg("amount_max"),
        "description": request.args.get("description"),
        "client_uuid": request.args.get("client_uuid"),
        "project_uuid": request.args.get("project_uuid"),
        "user_uuid": request.args.get("user_uuid"),
    }
    entries = transaction_service.list_transactions(key, current_capabilities(), filters)
    return jsonify(entries), 200


@transaction_bp.route("/transactions", methods=["POST"])
@require_capability("financial")
def create_transaction():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    entry = transaction_service.create_transaction(data, user_uuid=g.user_uuid)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Transaction created", "uuid": entry.uuid}), 201


@transaction_bp.route("/transactions", methods=["PUT"])
@require_capability("financial")
def update_transaction():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    entry = transaction_service.update_transaction(data, user_uuid=g.user_uuid)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Transaction updated", "uuid": entry.uuid}), 200


@transaction_bp.route("/transactions/<transaction_uuid>", methods=["DELETE"])
@require_capability("financial")
def delete_transaction(transaction_uuid):
    transaction_service.delete_transaction(transaction_uuid)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Transaction deleted"}), 200
