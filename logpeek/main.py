"""Server entry point."""

from __future__ import annotations

import uvicorn

from logpeek import create_app
from logpeek.core.config import settings

app = create_app()


def run() -> None:
    uvicorn.run("logpeek.main:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    run()
