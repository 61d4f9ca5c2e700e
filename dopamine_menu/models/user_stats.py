from datetime import date
from typing import Any, Optional, cast

from dopamine_menu.database.db_manager import DBManager
from dopamine_menu.models.base import BaseModel
from dopamine_menu.utils.env import get_default_daily_goal

# Single statement so concurrent completions cannot lose each other's update.
# A new day's row inherits the user's goal and never lowers longest_streak.
UPSERT_DAY_SQL = '''
INSERT INTO user_stats (
    user_id, stat_date, daily_goal,
    activities_completed, current_streak, longest_streak
)
VALUES (
    %(user_id)s, %(day)s,
    COALESCE((SELECT daily_goal FROM users WHERE id = %(user_id)s), %(default_goal)s),
    %(completed)s, %(streak)s,
    GREATEST(
        %(streak)s,
        COALESCE(
            (SELECT MAX(longest_streak) FROM user_stats WHERE user_id = %(user_id)s), 0
        )
    )
)
ON CONFLICT (user_id, stat_date) DO UPDATE SET
    activities_completed = EXCLUDED.activities_completed,
    current_streak = EXCLUDED.current_streak,
    longest_streak = GREATEST(user_stats.longest_streak, EXCLUDED.current_streak)
RETURNING *
'''


class UserStats(BaseModel):
    table = 'user_stats'

    @classmethod
    def get_for_day(cls, user_id: int | str, day: date) -> Optional[dict[str, Any]]:
        return cls.get_one('user_id = %s AND stat_date = %s', (user_id, day))

    @classmethod
    def upsert_day(
        cls, user_id: int | str, day: date, activities_completed: int, current_streak: int
    ) -> dict[str, Any]:
        with DBManager() as db:
            row = db.fetchone(
                UPSERT_DAY_SQL,
                {
                    'user_id': user_id,
                    'day': day,
                    'default_goal': get_default_daily_goal(),
                    'completed': activities_completed,
                    'streak': current_streak,
                },
            )
        return cast(dict[str, Any], row or {})

    @classmethod
    def set_goal_for_day(cls, user_id: int | str, day: date, goal: int) -> Optional[dict[str, Any]]:
        with DBManager() as db:
            row = db.fetchone(
                'UPDATE user_stats SET daily_goal = %s '
                'WHERE user_id = %s AND stat_date = %s RETURNING *',
                (goal, user_id, day),
            )
        return cast(Optional[dict[str, Any]], row)

    @classmethod
    def clear_for_user(cls, user_id: int | str) -> int:
        with DBManager() as db:
            return db.execute('DELETE FROM user_stats WHERE user_id = %s', (user_id,))
