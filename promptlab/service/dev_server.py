from __future__ import annotations

import uvicorn

from promptlab.config import get_settings


def main() -> None:
    """Start the development server for the promptlab FastAPI app.

    Host, port and reload behavior come from the environment (``.env`` is
    honored):

    - PROMPTLAB_HOST: interface to bind (default "127.0.0.1")
    - PROMPTLAB_PORT: port to bind (default 8000)
    - PROMPTLAB_RELOAD: "true"/"false" to toggle auto-reload (default false)
    """
    settings = get_settings()
    uvicorn.run(
        "promptlab.service.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    main()
