"""
Client Blueprint - clients and suppliers.

Endpoints (the same set under /suppliers):
    GET    /api/v1/clients/<key>    - key: all | <uuid>
        ?type=Person,Enterprise &cpf= &cnpj= &name= &fantasy= &email= &phone=
        &status=true|false
    POST   /api/v1/clients          - create (project)
    PUT    /api/v1/clients          - update (project)
    DELETE /api/v1/clients/<uuid>   - delete (project; refused while in use)
"""

from flask import Blueprint, jsonify, request

from billing.blueprints import csv_arg, json_body
from billing.middleware.permission_required import require_capability
from billing.models.client import Client, Supplier
from billing.services import client_service
from billing.services.client_service import TEXT_FILTERS
from billing.utils.errors import E, api_error
from billing.utils.helpers import db_commit_or_error, parse_bool_arg

client_bp = Blueprint("clients", __name__, url_prefix="/api/v1")

MODELS = {"clients": Client, "suppliers": Supplier}


@client_bp.route("/<any(clients, suppliers):kind>/<key>", methods=["GET"])
def list_parties(kind, key):
    filters = {name: request.args.get(name) for name in TEXT_FILTERS}
    filters["types"] = csv_arg("type")
    filters["active"] = parse_bool_arg(request.args.get("status"))
    return jsonify(client_service.list_parties(MODELS[kind], key, filters)), 200


@client_bp.route("/<any(clients, suppliers):kind>", methods=["POST"])
@require_capability("project")
def create_party(kind):
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    model = MODELS[kind]
    party = client_service.create_party(model, data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": f"{model.__name__} created", "uuid": party.uuid}), 201


@client_bp.route("/<any(clients, suppliers):kind>", methods=["PUT"])
@require_capability("project")
def update_party(kind):
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    model = MODELS[kind]
    party = client_service.update_party(model, data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": f"{model.__name__} updated", "uuid": party.uuid}), 200


@client_bp.route("/<any(clients, suppliers):kind>/<party_uuid>", methods=["DELETE"])
@require_capability("project")
def delete_party(kind, party_uuid):
    model = MODELS[kind]
    client_service.delete_party(model, party_uuid)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": f"{model.__name__} deleted"}), 200
