import asyncio
import logging
import os

from dopamine_menu.bot import main as run_bot
from dopamine_menu.database import start_db
from dopamine_menu.database.db_manager import DBManager
from dopamine_menu.utils.env import get_stats_timezone, load_env
from dopamine_menu.utils.logs import setup_logging

logger = logging.getLogger(__name__)


def main():
    load_env()
    setup_logging(logging.getLevelName(os.getenv('LOG_LEVEL', 'INFO').upper()))

    # Fail before connecting to anything if the day boundary is misconfigured
    logger.info(f'Bucketing days in timezone {get_stats_timezone()}')

    with DBManager() as db:
        start_db.run(db)

    asyncio.run(run_bot())


if __name__ == '__main__':
    main()
