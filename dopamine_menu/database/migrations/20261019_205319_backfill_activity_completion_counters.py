from dopamine_menu.database.db_manager import DBManager


def up(db_manager: DBManager):
    # Rebuild counters from the event log for rows written before the
    # counters were maintained on every completion
    db_manager.execute(
        '''
        UPDATE activities a
        SET completion_count = sub.cnt,
            last_completed_at = sub.last_at
        FROM (
            SELECT activity_id, COUNT(*) AS cnt, MAX(completed_at) AS last_at
            FROM activity_logs
            GROUP BY activity_id
        ) AS sub
        WHERE a.id = sub.activity_id
          AND a.completion_count < sub.cnt
        '''
    )


def down(db_manager: DBManager):
    # Counters are derived data; nothing to undo beyond the bookkeeping row
    db_manager.execute(
        'DELETE FROM migrations WHERE filename = %s',
        ('20261019_205319_backfill_activity_completion_counters.py',),
    )
