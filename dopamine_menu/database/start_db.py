import importlib.util
import logging
import os

from dopamine_menu.database.db_manager import DBManager
from dopamine_menu.database.init_schema import init_schema
from dopamine_menu.utils.tracing import traced

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'migrations')


def pending_migrations(db: DBManager, migrations_dir: str = MIGRATIONS_DIR) -> list[str]:
    '''Migration filenames on disk that are not yet recorded, in filename order.'''
    if not os.path.exists(migrations_dir):
        return []
    on_disk = sorted(
        f
        for f in os.listdir(migrations_dir)
        if f.endswith('.py') and not f.startswith('__')
    )
    applied = {row['filename'] for row in db.fetchall('SELECT filename FROM migrations')}
    return [f for f in on_disk if f not in applied]


def _load_migration(filepath: str, filename: str):
    module_name = f'migration_{filename.replace(".py", "")}'
    spec = importlib.util.spec_from_file_location(module_name, filepath)
    if spec is None or spec.loader is None:
        raise ImportError(f'Could not load migration module: {filename}')
    migration = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(migration)
    return migration


@traced('db.start')
def run(db: DBManager, migrations_dir: str = MIGRATIONS_DIR):
    '''Run full DB setup: schema + migrations.'''
    init_schema(db)

    tables = db.fetchall(
        "SELECT table_name FROM information_schema.tables WHERE table_schema = %s",
        ('public',),
    )
    logger.info(f'Schema ready, tables: {sorted(t["table_name"] for t in tables)}')

    todo = pending_migrations(db, migrations_dir)
    if not todo:
        logger.info('No pending migrations.')
        return

    for filename in todo:
        try:
            migration = _load_migration(os.path.join(migrations_dir, filename), filename)
            if not hasattr(migration, 'up'):
                logger.error(f'Skipping {filename}: no `up()` function found.')
                continue
            logger.info(f'Running migration: {filename}')
            migration.up(db)
            db.execute('INSERT INTO migrations (filename) VALUES (%s)', (filename,))
        except Exception:
            logger.error(f'Error running migration {filename}', exc_info=True)
            raise

    logger.info(f'Applied {len(todo)} migration(s).')


if __name__ == '__main__':
    from dopamine_menu.utils.env import load_env
    from dopamine_menu.utils.logs import setup_logging

    setup_logging()
    load_env()
    with DBManager() as _db:
        run(_db)
