"""Shared utility functions for blueprints and services.

parse_datetime:      inbound timestamps (ISO or dd/mm/yyyy [HH:MM])
format_datetime:     outbound timestamps ("dd/mm/yy HH:MM")
parse_bool_arg:      "true"/"false" query params
db_commit_or_error:  single commit point for request handlers
"""
import logging
from datetime import date, datetime, timezone

from flask import jsonify

from billing.models import db

logger = logging.getLogger(__name__)

DISPLAY_FORMAT = "%d/%m/%y %H:%M"
_INPUT_FORMATS = ("%d/%m/%Y %H:%M", "%d/%m/%Y", "%d/%m/%y %H:%M", "%d/%m/%y")


def parse_datetime(value):
    """Parse a timestamp string to a naive UTC datetime.

    Returns None for empty input. Raises ValueError for anything that is not
    ISO-8601 or a Brazilian dd/mm/yyyy [HH:MM] string, so blueprints can turn
    it into a 400.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            for fmt in _INPUT_FORMATS:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
            else:
                raise ValueError(
                    f"Invalid date {text!r}. Use ISO-8601 or dd/mm/yyyy HH:MM."
                ) from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def format_datetime(value):
    """Display format used by every response: 'dd/mm/yy HH:MM'."""
    if not value:
        return None
    return value.strftime(DISPLAY_FORMAT)


def parse_bool_arg(value):
    """'true' -> True, 'false' -> False, anything else -> None (no filter)."""
    if value == "true":
        return True
    if value == "false":
        return False
    return None


# ── Database commit helper ───────────────────────────────────────────────────

def db_commit_or_error():
    """Commit the current SQLAlchemy session, returning an error response on failure.

    Returns:
        None on success.
        (response, status_code) tuple on failure - ready for ``return``.

    Usage::

        err = db_commit_or_error()
        if err:
            return err

    IntegrityError → 409 (duplicate / constraint violation)
    OperationalError → 500 (connection / lock issues)
    Other → 500 (unexpected)
    """
    from sqlalchemy.exc import IntegrityError, OperationalError

    try:
        db.session.commit()
        return None
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Integrity error on commit: %s", exc.orig)
        return jsonify({"error": "Duplicate or constraint violation"}), 409
    except OperationalError:
        db.session.rollback()
        logger.exception("Database operational error on commit")
        return jsonify({"error": "Database error"}), 500
    except Exception:
        db.session.rollback()
        logger.exception("Unexpected database error on commit")
        return jsonify({"error": "Database error"}), 500
