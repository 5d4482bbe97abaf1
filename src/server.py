"""Protean Engine runner for the storefront domain.

In production (``event_processing = "async"``) the notification event
handlers run here, outside the request path.

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import asyncio

from protean.server.engine import Engine

from storefront.domain import storefront
from storefront.utils.logging import configure_logging


async def run():
    storefront.init()
    await Engine(storefront).run()


def main():
    configure_logging()
    asyncio.run(run())


if __name__ == "__main__":
    main()
