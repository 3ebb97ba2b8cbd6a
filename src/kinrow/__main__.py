"""Entry point for running kinrow via ``python -m kinrow``."""

from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
    """Start the FastAPI-powered kinrow web server."""

    level = os.environ.get("KINROW_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.environ.get("KINROW_HOST", "0.0.0.0")
    port = int(os.environ.get("KINROW_PORT", "8000"))
    uvicorn.run("kinrow.api:app", host=host, port=port, reload=False, log_level=level.lower())


if __name__ == "__main__":
    main()
