"""
todo_api.api.__main__

`python -m todo_api.api` / `todo-api`: serve the app with uvicorn using settings from
the environment (`TODO_*`).
"""

from __future__ import annotations

import uvicorn

from todo_api.api.app import create_app
from todo_api.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        # structlog owns the log format; RequestContextMiddleware writes the access log.
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()
