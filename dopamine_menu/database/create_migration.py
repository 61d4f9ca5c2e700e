import logging
import os
import re
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'migrations')

TEMPLATE = '''from dopamine_menu.database.db_manager import DBManager


def up(db_manager: DBManager):
    # Apply this migration.
    pass


def down(db_manager: DBManager):
    # Rollback this migration.
    db_manager.execute(
        'DELETE FROM migrations WHERE filename = %s', ('{filename}',)
    )
'''


def migration_filename(note: str, now: Optional[datetime] = None) -> str:
    '''Timestamped, snake_cased filename so migrations sort in creation order.'''
    slug = re.sub(r'[^a-z0-9]+', '_', note.strip().lower()).strip('_')
    if not slug:
        raise ValueError('Migration note must contain letters or digits')
    timestamp = (now or datetime.now()).strftime('%Y%m%d_%H%M%S')
    return f'{timestamp}_{slug}.py'


def create_migration(note: str, migrations_dir: str = MIGRATIONS_DIR) -> str:
    '''Write an empty migration file and return its path.'''
    filename = migration_filename(note)
    filepath = os.path.join(migrations_dir, filename)
    os.makedirs(migrations_dir, exist_ok=True)

    with open(filepath, 'w', encoding='utf-8') as f:
        f.write(TEMPLATE.format(filename=filename))

    logger.info(f'Created new migration file: {filepath}')
    return filepath


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    create_migration(input('Enter a short note for this migration: '))
