"""Run the service with uvicorn: ``python -m shortener``."""

import uvicorn

from shortener.core.config import settings


def main() -> None:
    # Logging is configured in the application lifespan
    uvicorn.run(
        "shortener.main:app",
        host=settings.LISTEN_HOST,
        port=settings.PORT,
        log_config=None,
        proxy_headers=True,
    )


if __name__ == "__main__":
    main()
