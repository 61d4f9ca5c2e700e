from dopamine_menu.database.db_manager import DBManager


def up(db_manager: DBManager):
    # 1) Drop duplicate names per owner, keeping the most completed copy
    db_manager.execute(
        '''
        DELETE FROM activities a
        USING activities b
        WHERE a.owner_id = b.owner_id
          AND LOWER(a.name) = LOWER(b.name)
          AND (a.completion_count, a.id) < (b.completion_count, b.id)
        '''
    )

    # 2) Enforce it so /setup can insert templates idempotently
    db_manager.execute(
        '''
        CREATE UNIQUE INDEX IF NOT EXISTS uq_activities_owner_name
        ON activities (owner_id, LOWER(name))
        '''
    )


def down(db_manager: DBManager):
    db_manager.execute('DROP INDEX IF EXISTS uq_activities_owner_name')
    db_manager.execute(
        'DELETE FROM migrations WHERE filename = %s',
        ('20261012_134111_unique_activity_name_per_owner.py',),
    )
