from __future__ import annotations

import uvicorn

from chipper.core.settings import get_settings


def main() -> None:
    settings = get_settings()

    # Import after settings so .env is honored by the app module
    from apps.api.main import app  # noqa: WPS433

    # reload breaks when launched from an IDE debugger
    uvicorn.run(app, host=settings.app_host, port=settings.app_port, reload=False)


if __name__ == "__main__":
    main()
