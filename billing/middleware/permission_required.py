"""
Capability Decorators - role-based gates for mutating routes.

Usage:
    @project_bp.route("/projects", methods=["POST"])
    @require_capability("project")
    def create_project():
        ...

The caller's role comes from the token (g.role_uuid) and is resolved through
the project store. A role that no longer exists is a 403, not a 404.
"""

import functools

from flask import g

from billing.services.authorization import require, resolve_capabilities
from billing.services.project_store import get_project_store


def current_capabilities():
    """Capabilities of the caller's role, cached on ``g`` for the request.

    Raises NotFoundError when the role no longer resolves; read endpoints let
    that surface as 404.
    """
    caps = getattr(g, "capabilities", None)
    if caps is None:
        caps = resolve_capabilities(g.role_uuid, get_project_store())
        g.capabilities = caps
    return caps


def require_capability(*names: str):
    """Decorator: the caller's role must hold every capability in ``names``."""
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            g.capabilities = require(g.role_uuid, get_project_store(), *names)
            return f(*args, **kwargs)
        return decorated
    return decorator
