"""
todo_api.services

Service-layer package.

Responsibilities:
- Authorize every operation against the calling principal.
- Own transaction boundaries and persistence decisions.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services take the principal as an explicit argument and never touch HTTP types.
