"""
Project Billing Backend
SQLAlchemy models package.

Usage:
    from billing.models import db
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
