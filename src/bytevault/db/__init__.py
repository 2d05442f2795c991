"""
bytevault.db

Persistence package for the object index.

Responsibilities:
- SQLAlchemy base, ORM models, engine/session helpers and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Blob bytes never enter the database; only their index rows do.
