"""
BeliLite Backend — Command-Line Entry Point
=============================================

Usage:
    python -m belilite
    belilite            (console script installed by pip)

Runs uvicorn on HOST:PORT from the environment. uvicorn handles SIGINT and
SIGTERM by running the lifespan shutdown, which closes the database.
"""

import uvicorn

from belilite.config import settings


def main() -> None:
    uvicorn.run(
        "belilite.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
