"""
Rate limiting - per-blueprint limits on top of the app-wide Limiter.

The Limiter is created in billing/__init__.py without default limits; this
module attaches limits per route category.

Usage:
    from billing.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

import logging

logger = logging.getLogger(__name__)

LOGIN_LIMIT = "10/minute"
WRITE_LIMIT = "60/minute"
READ_LIMIT = "200/minute"

WRITE_BLUEPRINTS = (
    "roles", "projects", "tasks", "activities", "expenses", "transactions", "clients", "status",
)
READ_BLUEPRINTS = ("users",)


def init_rate_limits(app, limiter):
    """
    Limits (per remote IP):
        - auth (login):        10/minute
        - mutation blueprints: 60/minute
        - read blueprints:     200/minute
        - health:              exempt

    Disabled under testing.
    """
    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    bp = app.blueprints.get("auth")
    if bp:
        limiter.limit(LOGIN_LIMIT)(bp)

    for name in WRITE_BLUEPRINTS:
        bp = app.blueprints.get(name)
        if bp:
            limiter.limit(WRITE_LIMIT)(bp)

    for name in READ_BLUEPRINTS:
        bp = app.blueprints.get(name)
        if bp:
            limiter.limit(READ_LIMIT)(bp)

    bp = app.blueprints.get("health")
    if bp:
        limiter.exempt(bp)

    app.logger.info("Rate limiter configured: login %s, write %s, read %s",
                    LOGIN_LIMIT, WRITE_LIMIT, READ_LIMIT)
