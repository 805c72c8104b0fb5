"""
todo_api.auth

Identity and access-control core.

Responsibilities:
- Secret hashing and signed token issuing/verification.
- Principal resolution from the Authorization header.
- The ownership/role access decision procedure used by every service.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package performs storage I/O; services load owners before deciding.
