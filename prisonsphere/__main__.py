"""Script to run the PrisonSphere server."""

import argparse

import uvicorn

from .api import app
from .base import config


def main():
    """Run the PrisonSphere server."""

    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument(
        "--host", default=config.get("server", "host", fallback="127.0.0.1")
    )
    parser.add_argument(
        "--port", type=int, default=config.getint("server", "port", fallback=5000)
    )
    args = parser.parse_args()

    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level=config.get("logging", "level").lower(),
    )


if __name__ == "__main__":
    main()
