"""API server entry point."""

import json
import logging
import logging.config
import os
from pathlib import Path

import uvicorn

from airspace.config import ApiServerConfig

logger = logging.getLogger(__name__)


def is_running_in_container() -> bool:
    """Detect a container deployment via the ECS metadata variables it injects."""
    return bool(
        os.environ.get("ECS_CONTAINER_METADATA_URI_V4")
        or os.environ.get("ECS_CONTAINER_METADATA_URI")
    )


def configure_logging() -> None:
    """Configure logging based on environment.

    In a container: logging.json with structured output, trace id injection
    and health check filtering.

    Locally: logging-dev.json with a plain text format.
    """
    config_file = "logging.json" if is_running_in_container() else "logging-dev.json"
    config_path = Path(__file__).parent.parent / config_file

    if config_path.exists():
        with open(config_path) as f:
            logging.config.dictConfig(json.load(f))
    else:
        logging.basicConfig(
            level=logging.INFO,
            format=(
                '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
                '"logger": "%(name)s", "message": "%(message)s"}'
            ),
            datefmt="%Y-%m-%dT%H:%M:%S",
        )


def run_server(host: str | None = None, port: int | None = None) -> None:
    """Run the API with uvicorn.

    Args:
        host: Interface to bind (ApiServerConfig default if omitted)
        port: Port to listen on (ApiServerConfig default if omitted)
    """
    config = ApiServerConfig()
    host = host or config.host
    port = port or config.port

    logger.info(f"Starting restriction API on {host}:{port}")
    uvicorn.run("airspace.api:app", host=host, port=port, log_config=None)


def main():
    configure_logging()
    run_server()


if __name__ == "__main__":
    main()
