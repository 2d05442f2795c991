"""
bytevault.services

Service layer package.

Responsibilities:
- Object lifecycle (transaction boundary over blobs + index).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services own commit/rollback; repositories only flush.
