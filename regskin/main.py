"""regskin - browsable view over a container registry catalog.

Usage:
  REGSKIN_REGISTRY_URL=https://registry.example.com python -m regskin.main
  python -m regskin.main --listen 0.0.0.0 --port 8080
"""

import argparse
import sys

import uvicorn

from regskin.config import ConfigError, load_settings
from regskin.logging_config import configure_regskin_logging
from regskin.ui.server import create_app
from regskin.version import SERVER_BANNER


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="regskin - browse a container registry catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Configuration comes from REGSKIN_* environment variables;
REGSKIN_REGISTRY_URL is required.
        """,
    )
    parser.add_argument("--listen", help="Address to bind (default: REGSKIN_LISTEN)")
    parser.add_argument("--port", type=int, help="Port to bind (default: REGSKIN_PORT)")
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        overrides = {k: v for k, v in (("listen", args.listen), ("port", args.port)) if v}
        if overrides:
            settings = settings.model_validate({**settings.model_dump(), **overrides})
    except ConfigError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"✗ Invalid configuration: {e}", file=sys.stderr)
        return 2

    logger = configure_regskin_logging(settings.log_level)
    logger.info(f"Starting server {SERVER_BANNER}")
    logger.info(f"Registry: {settings.registry_url} (catalog limit {settings.catalog_limit})")

    uvicorn.run(
        create_app(settings),
        host=str(settings.listen),
        port=settings.port,
        server_header=False,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
