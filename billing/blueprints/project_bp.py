"""
Project Blueprint - projects with rollups, budget snapshots, live tasks.

Endpoints:
    GET    /api/v1/projects/<key>                    - key: all | <uuid>, with rollup
    POST   /api/v1/projects                          - create project + budget
    PUT    /api/v1/projects                          - update project
    DELETE /api/v1/projects/<uuid>                   - delete project + budget
    GET    /api/v1/projects/budget/<budget_uuid>     - budget snapshot
    PUT    /api/v1/projects/budget                   - budget date + snapshot tasks
    GET    /api/v1/projects/tasks/<project_uuid>     - live tasks
    PUT    /api/v1/projects/tasks                    - reconcile live tasks

Layer contract:
    - No ORM calls here; project_service does the work and flushes.
    - One commit per mutating request, through db_commit_or_error.
"""

import logging

from flask import Blueprint, jsonify, request

from billing.blueprints import json_body
from billing.middleware.permission_required import current_capabilities, require_capability
from billing.services import project_service
from billing.services.project_store import get_project_store
from billing.utils.errors import E, api_error
from billing.utils.helpers import db_commit_or_error, parse_bool_arg

logger = logging.getLogger(__name__)

project_bp = Blueprint("projects", __name__, url_prefix="/api/v1")


# ── Projects ─────────────────────────────────────────────────────────────────

@project_bp.route("/projects/<key>", methods=["GET"])
def list_projects(key):
    """Query params: name, description, status (true|false), client_uuid, status_uuid."""
    filters = {
        "name": request.args.get("name"),
        "description": request.args.get("description"),
        "active": parse_bool_arg(request.args.get("status")),
        "client_uuid": request.args.get("client_uuid"),
        "status_uuid": request.args.get("status_uuid"),
    }
    projects = project_service.list_projects(key, filters, current_capabilities(), get_project_store())
    return jsonify(projects), 200


@project_bp.route("/projects", methods=["POST"])
@require_capability("project")
def create_project():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    project = project_service.create_project(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Project created", "project": project.to_dict()}), 201


@project_bp.route("/projects", methods=["PUT"])
@require_capability("project")
def update_project():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    project = project_service.update_project(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Project updated", "project": project.to_dict()}), 200


@project_bp.route("/projects/<project_uuid>", methods=["DELETE"])
@require_capability("project")
def delete_project(project_uuid):
    project_service.delete_project(project_uuid)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Project deleted"}), 200


# ── Budget snapshot ──────────────────────────────────────────────────────────

@project_bp.route("/projects/budget/<budget_uuid>", methods=["GET"])
def get_budget(budget_uuid):
    return jsonify(project_service.get_budget(budget_uuid, current_capabilities())), 200


@project_bp.route("/projects/budget", methods=["PUT"])
@require_capability("project")
def update_budget():
    """Body: {uuid, date, tasks: [{uuid?, type, description, begin_date, ...}]}"""
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    counts = project_service.update_budget(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Budget updated", **counts}), 200


# ── Live tasks ───────────────────────────────────────────────────────────────

@project_bp.route("/projects/tasks/<project_uuid>", methods=["GET"])
def list_live_tasks(project_uuid):
    return jsonify(project_service.list_live_tasks(project_uuid, current_capabilities())), 200


@project_bp.route("/projects/tasks", methods=["PUT"])
@require_capability("project")
def update_live_tasks():
    """Body: {project_uuid, tasks: [...]}"""
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    counts = project_service.update_live_tasks(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Tasks updated", **counts}), 200
