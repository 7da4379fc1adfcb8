"""
extensions.py — Flask extension singletons.

Initialises SQLAlchemy and marshmallow as module-level objects so they can be
imported anywhere without creating circular dependencies.

Pattern:
    1. Create the extension object here (no app attached yet).
    2. Call init_app(app) inside the app factory in app/__init__.py.
    3. Import `db` or `ma` from here wherever needed.

    from backend.app.extensions import db, ma

Do not pass the app object directly to SQLAlchemy() or Marshmallow() at
import time — that would prevent running tests with a separate test app.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_marshmallow import Marshmallow

db = SQLAlchemy()

# Marshmallow instance — available for model serialization helpers.
#
# IMPORTANT — schema inheritance rule:
#   All validation Schema classes (in app/schemas/) inherit from
#   marshmallow.Schema directly, NOT from ma.Schema. ma.Schema requires an
#   active Flask application context, and the unit tests in tests/unit/
#   instantiate schemas without one.
ma = Marshmallow()


def get_store():
    """
    Returns a RecordStore bound to the current request's SQLAlchemy session.

    Routes call this once per request and hand the store to the service
    layer. Services never import `db` themselves.
    """
    from backend.app.store.sql_store import SqlRecordStore  # local import to avoid circular dep
    return SqlRecordStore(db.session)
