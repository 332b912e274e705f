from __future__ import annotations
import argparse
import logging
import os
import uvicorn
from registry_fetcher.infrastructure.config import get_settings

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="registry-fetcher",
        description="Serve component registry sources, demos and blocks over HTTP.",
    )
    parser.add_argument(
        "--github-api-key",
        "-g",
        default=None,
        help="GitHub personal access token (overrides GITHUB_PERSONAL_ACCESS_TOKEN)",
    )
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Start the uvicorn ASGI server."""
    args = build_arg_parser().parse_args(argv)
    if args.github_api_key:
        os.environ["GITHUB_PERSONAL_ACCESS_TOKEN"] = args.github_api_key
        get_settings.cache_clear()

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    if settings.token:
        logger.info("GitHub API configured with token")
    else:
        logger.warning("No GitHub API key provided. Rate limited to 60 requests/hour.")

    uvicorn.run(
        "registry_fetcher.interface.app:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
