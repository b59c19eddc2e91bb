"""
Task Blueprint - tasks with planned vs. actual valuation.

Endpoints:
    GET    /api/v1/tasks/<key>    - key: all | <uuid>
        ?type=Activity,Expense &description= &begin_date= &end_date=
        &hourly_rate_min= &hourly_rate_max= &cost_min= &cost_max=
        &revenue_min= &revenue_max= &status_uuid= &user_uuid=
        &project_uuid= &budget_uuid=<uuid|null>
    POST   /api/v1/tasks          - create (project)
    PUT    /api/v1/tasks          - update a live task (project)
    DELETE /api/v1/tasks/<uuid>   - delete (project)
"""

from flask import Blueprint, jsonify, request

from billing.blueprints import datetime_arg, json_body, kinds_arg, money_arg
from billing.core.records import TaskKind
from billing.middleware.permission_required import current_capabilities, require_capability
from billing.services import task_service
from billing.services.redaction import redact_task
from billing.utils.errors import E, api_error
from billing.utils.helpers import db_commit_or_error

task_bp = Blueprint("tasks", __name__, url_prefix="/api/v1")


@task_bp.route("/tasks/<key>", methods=["GET"])
def list_tasks(key):
    capabilities = current_capabilities()
    filters = {
        "type": kinds_arg("type", TaskKind),
        "description": request.args.get("description"),
        "begin_date": datetime_arg("begin_date"),
        "end_date": datetime_arg("end_date"),
        "status_uuid": request.args.get("status_uuid"),
        "user_uuid": request.args.get("user_uuid"),
        "project_uuid": request.args.get("project_uuid"),
        "budget_uuid": request.args.get("budget_uuid"),
    }
    for name in task_service.MONEY_FILTERS:
        filters[f"{name}_min"] = money_arg(f"{name}_min")
        filters[f"{name}_max"] = money_arg(f"{name}_max")
    tasks = task_service.list_tasks(key, capabilities, filters)
    return jsonify([redact_task(t, capabilities) for t in tasks]), 200


@task_bp.route("/tasks", methods=["POST"])
@require_capability("project")
def create_task():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    task = task_service.create_task(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Task created", "task": task_service.format_task(task)}), 201


@task_bp.route("/tasks", methods=["PUT"])
@require_capability("project")
def update_task():
    data = json_body()
    if data is None:
        return api_error(E.VALIDATION_INVALID, "JSON body required")
    task = task_service.update_task(data)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Task updated", "task": task_service.format_task(task)}), 200


@task_bp.route("/tasks/<task_uuid>", methods=["DELETE"])
@require_capability("project")
def delete_task(task_uuid):
    task_service.delete_task(task_uuid)
    err = db_commit_or_error()
    if err:
        return err
    return jsonify({"message": "Task deleted"}), 200
