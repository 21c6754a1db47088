from __future__ import annotations

import uvicorn

from vdfy.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "vdfy.api.app:app",
        host=settings.host,
        port=settings.port,
        # Uploads of long recordings keep the connection busy for minutes.
        timeout_keep_alive=int(settings.upload_timeout_seconds),
        log_config=None,
    )


if __name__ == "__main__":
    main()
