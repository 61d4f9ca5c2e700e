from datetime import date
from typing import Any, cast

from dopamine_menu.database.db_manager import DBManager
from dopamine_menu.models.base import BaseModel


class ActivityLog(BaseModel):
    '''Append-only completion events.'''

    table = 'activity_logs'

    @classmethod
    def insert(
        cls,
        activity_id: int,
        user_id: int | str | None,
        duration_minutes: int | None = None,
        mood: str | None = None,
    ) -> dict[str, Any]:
        return cls.create(
            {
                'activity_id': activity_id,
                'user_id': user_id,
                'duration_minutes': duration_minutes,
                'mood': mood,
            }
        )

    @classmethod
    def for_activity(cls, activity_id: int, limit: int | None = None) -> list[dict[str, Any]]:
        return cls.get_many(
            where='activity_id = %s',
            params=(activity_id,),
            order_by='completed_at DESC, id DESC',
            limit=limit,
        )

    @classmethod
    def recent_for_user(cls, user_id: int | str, limit: int = 5) -> list[dict[str, Any]]:
        with DBManager() as db:
            rows = db.fetchall(
                'SELECT l.id, l.activity_id, l.completed_at, l.duration_minutes, l.mood, '
                'a.name AS activity_name, a.category, a.emoji '
                'FROM activity_logs l '
                'JOIN activities a ON a.id = l.activity_id '
                'WHERE l.user_id = %s '
                'ORDER BY l.completed_at DESC, l.id DESC LIMIT %s',
                (user_id, limit),
            )
        return cast(list[dict[str, Any]], rows)

    @classmethod
    def recent_activity_ids(cls, user_id: int | str, limit: int = 3) -> list[int]:
        '''Activity ids of the last `limit` completion events, newest first.'''
        with DBManager() as db:
            rows = db.fetchall(
                'SELECT activity_id FROM activity_logs WHERE user_id = %s '
                'ORDER BY completed_at DESC, id DESC LIMIT %s',
                (user_id, limit),
            )
        return [int(r['activity_id']) for r in rows]

    @classmethod
    def count_on_day(cls, user_id: int | str, day: date, tz: str) -> int:
        with DBManager() as db:
            row = db.fetchone(
                'SELECT COUNT(*) AS cnt FROM activity_logs '
                'WHERE user_id = %s AND (completed_at AT TIME ZONE %s)::date = %s',
                (user_id, tz, day),
            )
        return int(row['cnt']) if row else 0

    @classmethod
    def distinct_days(cls, user_id: int | str, tz: str) -> list[date]:
        '''Calendar days with at least one completion, most recent first.'''
        with DBManager() as db:
            rows = db.fetchall(
                'SELECT DISTINCT (completed_at AT TIME ZONE %s)::date AS day '
                'FROM activity_logs WHERE user_id = %s '
                'ORDER BY day DESC',
                (tz, user_id),
            )
        return [r['day'] for r in rows]
