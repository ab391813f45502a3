"""Run the quickstream server: ``python -m quickstream``."""

import uvicorn

from quickstream.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "quickstream.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
