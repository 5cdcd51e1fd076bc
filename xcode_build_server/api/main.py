import argparse
from typing import List, Optional

import uvicorn

from xcode_build_server.api.server import create_app
from xcode_build_server.common.config.settings import get_settings
from xcode_build_server.common.config.logging_config import setup_logging, get_logger


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Serve the Xcode build tools over HTTP")
    parser.add_argument("base_dir", nargs="?", help="Directory under which build-logs/ is created")
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.base_dir:
        settings = settings.model_copy(update={"base_dir": args.base_dir})
    if not settings.base_dir:
        parser.error("Base directory argument is required")

    setup_logging(log_level=settings.log_level, json_format=settings.log_json)
    logger = get_logger(__name__)

    app = create_app(settings=settings)

    logger.info(f"Starting API server on {settings.api_host}:{settings.api_port}")

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info" if not settings.debug else "debug",
    )


if __name__ == "__main__":
    main()
