"""
tokenkeeper.api.__main__

Entrypoint for running the FastAPI application via `python -m tokenkeeper.api`.

Responsibilities:
- Load settings.
- Create the app.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import uvicorn

from tokenkeeper.api.app import create_app
from tokenkeeper.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()


# --- Module Notes -----------------------------------------------------------
# Startup succeeds without TOKENKEEPER_JWT_SECRET; `/readyz` stays 503 and
# token endpoints answer 403 until a secret is configured.
