"""
bytevault.storage

Blob storage package.

Responsibilities:
- Filesystem blob store with temp-then-rename publishing.
- Derived-name allocation for uploads.
- Per-name async locks serializing operations on one object.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing here knows about the index; `services.object_store` ties blobs and
# index rows together.
