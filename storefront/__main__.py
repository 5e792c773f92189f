"""
Schema bootstrap.

Run: python -m storefront init-db
     python -m storefront drop-db
"""

import argparse
import asyncio

from storefront.config import Settings
from storefront.db import Database
from storefront.log import configure_logging, logger


async def _run(command: str, settings: Settings) -> None:
    db = Database.from_url(settings.database_url, echo=settings.database_echo)
    try:
        match command:
            case "init-db":
                await db.create_all()
            case "drop-db":
                await db.drop_all()
        logger.info(
            "schema_command_done",
            command=command,
            database_url=db.engine.url.render_as_string(hide_password=True),
        )
    finally:
        await db.dispose()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="storefront")
    parser.add_argument("command", choices=("init-db", "drop-db"))
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging(settings.log_level, json=settings.log_json)
    asyncio.run(_run(args.command, settings))


if __name__ == "__main__":
    main()
