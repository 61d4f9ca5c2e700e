from typing import Any, Optional, cast

from dopamine_menu.database.db_manager import DBManager
from dopamine_menu.models.base import BaseModel
from dopamine_menu.utils.env import get_default_daily_goal


class User(BaseModel):
    table = 'users'
    pk = 'id'

    @classmethod
    def upsert_user(cls, user_id: int | str, display_name: str) -> dict[str, Any]:
        '''Create the user on first sight, refresh the display name afterwards.'''
        with DBManager() as db:
            row = db.fetchone(
                'INSERT INTO users (id, display_name, daily_goal) VALUES (%s, %s, %s) '
                'ON CONFLICT (id) DO UPDATE SET display_name = EXCLUDED.display_name '
                'RETURNING *',
                (user_id, display_name, get_default_daily_goal()),
            )
        return cast(dict[str, Any], row or {})

    @classmethod
    def get_daily_goal(cls, user_id: int | str) -> int:
        with DBManager() as db:
            row = db.fetchone('SELECT daily_goal FROM users WHERE id = %s', (user_id,))
        return int(row['daily_goal']) if row else get_default_daily_goal()

    @classmethod
    def set_daily_goal(cls, user_id: int | str, goal: int) -> Optional[dict[str, Any]]:
        return cls.update(user_id, {'daily_goal': goal})
