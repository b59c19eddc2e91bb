"""
WSGI and Flask CLI entry point.

Usage:
    gunicorn wsgi:app
    flask --app wsgi seed-owner --email owner@example.com --password ...
    flask --app wsgi db init        # first time only (creates migrations/)
    flask --app wsgi db migrate -m "description"
    flask --app wsgi db upgrade
"""

from billing import create_app

app = create_app()
