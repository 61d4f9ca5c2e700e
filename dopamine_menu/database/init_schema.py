import logging

from dopamine_menu.database.db_manager import DBManager
from dopamine_menu.utils.constants import CATEGORIES, MOODS

logger = logging.getLogger(__name__)


def _sql_list(values: tuple[str, ...]) -> str:
    return ', '.join(f"'{v}'" for v in values)


def init_schema(db: DBManager):
    '''Create the database schema if it doesn't already exist.'''

    # --- USERS TABLE ---
    # id is the Discord user id
    db.execute(
        '''
        CREATE TABLE IF NOT EXISTS users (
            id BIGINT PRIMARY KEY,
            display_name TEXT NOT NULL,
            daily_goal INTEGER NOT NULL DEFAULT 3 CHECK (daily_goal > 0),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        '''
    )

    # --- ACTIVITIES TABLE ---
    db.execute(
        f'''
        CREATE TABLE IF NOT EXISTS activities (
            id BIGSERIAL PRIMARY KEY,
            owner_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name TEXT NOT NULL,
            category TEXT NOT NULL CHECK (category IN ({_sql_list(CATEGORIES)})),
            description TEXT,
            duration_minutes INTEGER,
            emoji TEXT,
            completion_count INTEGER NOT NULL DEFAULT 0 CHECK (completion_count >= 0),
            last_completed_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        '''
    )

    # --- ACTIVITY LOGS TABLE (append-only completion events) ---
    db.execute(
        f'''
        CREATE TABLE IF NOT EXISTS activity_logs (
            id BIGSERIAL PRIMARY KEY,
            activity_id BIGINT NOT NULL REFERENCES activities(id) ON DELETE CASCADE,
            user_id BIGINT REFERENCES users(id) ON DELETE CASCADE,
            completed_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            duration_minutes INTEGER,
            mood TEXT CHECK (mood IS NULL OR mood IN ({_sql_list(MOODS)}))
        )
        '''
    )

    # --- USER STATS TABLE (one row per user per day) ---
    db.execute(
        '''
        CREATE TABLE IF NOT EXISTS user_stats (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            stat_date DATE NOT NULL,
            daily_goal INTEGER NOT NULL DEFAULT 3,
            activities_completed INTEGER NOT NULL DEFAULT 0,
            current_streak INTEGER NOT NULL DEFAULT 0,
            longest_streak INTEGER NOT NULL DEFAULT 0,
            CONSTRAINT user_stats_user_day UNIQUE (user_id, stat_date),
            CONSTRAINT user_stats_longest_covers_current
                CHECK (longest_streak >= current_streak)
        )
        '''
    )

    # --- MIGRATIONS TABLE ---
    db.execute(
        '''
        CREATE TABLE IF NOT EXISTS migrations (
            id SERIAL PRIMARY KEY,
            filename TEXT NOT NULL UNIQUE,
            applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        '''
    )

    # --- INDEXES ---
    db.execute(
        'CREATE INDEX IF NOT EXISTS idx_activities_owner_category '
        'ON activities(owner_id, category);'
    )
    db.execute(
        'CREATE INDEX IF NOT EXISTS idx_activity_logs_activity_id '
        'ON activity_logs(activity_id);'
    )
    db.execute(
        'CREATE INDEX IF NOT EXISTS idx_activity_logs_user_completed_at '
        'ON activity_logs(user_id, completed_at DESC);'
    )

    # --- TRIGGERS: keep updated_at current ---
    db.execute(
        '''
        CREATE OR REPLACE FUNCTION set_updated_at() RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
        '''
    )
    for table in ('users', 'activities'):
        db.execute(
            f'''
            CREATE OR REPLACE TRIGGER {table}_set_updated_at
            BEFORE UPDATE ON {table}
            FOR EACH ROW EXECUTE FUNCTION set_updated_at()
            '''
        )

    logger.debug('Schema statements applied')
