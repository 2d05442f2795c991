"""
bytevault.auth

Authentication/authorization package.

Responsibilities:
- Credential store and bcrypt verification.
- Server-side session store.
- The auth gate deciding Authorized / Denied / RedirectToLogin.
- FastAPI auth dependencies threading the resolved `Principal` into routes.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package touches the object store; routes only reach it after
# a dependency here has produced a Principal.
