"""CLI entry point: userapi.

    userapi                          # serve on USERAPI_HOST:USERAPI_PORT
    userapi --port 9000 --reload     # dev server
    userapi --log-format json        # structured logs for shipping
    python -m userapi --env-file prod.env
"""

from __future__ import annotations

import os
from pathlib import Path

import click
import uvicorn
from dotenv import load_dotenv

from userapi.core.logging import ENV_LOG_FORMAT, ENV_LOG_LEVEL, LOG_FORMATS


@click.command()
@click.option("--host", envvar="USERAPI_HOST", default="0.0.0.0", show_default=True)
@click.option("--port", envvar="USERAPI_PORT", default=8000, type=int, show_default=True)
@click.option("--reload", is_flag=True, help="Restart on code changes (development only).")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help=f"Overrides {ENV_LOG_LEVEL}.",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS, case_sensitive=False),
    default=None,
    help=f"Overrides {ENV_LOG_FORMAT}.",
)
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(".env"),
    show_default=True,
    help="Environment file loaded before the app is built; missing file is ignored.",
)
def main(
    host: str,
    port: int,
    reload: bool,
    log_level: str | None,
    log_format: str | None,
    env_file: Path,
) -> None:
    """Serve the user API with uvicorn."""
    load_dotenv(env_file)
    # uvicorn builds the app from an import string (and in a child process
    # under --reload), so options reach create_app through the environment.
    if log_level:
        os.environ[ENV_LOG_LEVEL] = log_level.upper()
    if log_format:
        os.environ[ENV_LOG_FORMAT] = log_format.lower()
    uvicorn.run(
        "userapi.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
