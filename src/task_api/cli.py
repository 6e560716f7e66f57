"""Command-line entrypoint: `task-api` starts the HTTP server with uvicorn."""

from __future__ import annotations

import argparse
import logging
import os

import uvicorn

from task_api.config.settings import get_settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the task API server.")
    parser.add_argument("--host", default=settings.host, help="Interface to bind.")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on.")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change (development only).",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Root logging level.")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    # uvicorn imports the app after this point; its settings must see the CLI values.
    os.environ["TASK_API_HOST"] = args.host
    os.environ["TASK_API_PORT"] = str(args.port)
    get_settings.cache_clear()
    docs_url = get_settings().docs_url
    logger.info("Servidor escuchando en http://%s:%s", args.host, args.port)
    logger.info("Documentación Swagger en http://%s:%s%s", args.host, args.port, docs_url)
    uvicorn.run(
        "task_api.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
