from typing import Any, Iterable, Optional, Sequence, cast

from dopamine_menu.database.db_manager import DBManager
from dopamine_menu.models.base import BaseModel

EDITABLE_FIELDS = ('name', 'category', 'description', 'duration_minutes', 'emoji')


class Activity(BaseModel):
    table = 'activities'

    @classmethod
    def create_for_owner(
        cls,
        owner_id: int | str,
        name: str,
        category: str,
        description: str | None = None,
        duration_minutes: int | None = None,
        emoji: str | None = None,
    ) -> dict[str, Any]:
        return cls.create(
            {
                'owner_id': owner_id,
                'name': name,
                'category': category,
                'description': description,
                'duration_minutes': duration_minutes,
                'emoji': emoji,
            }
        )

    @classmethod
    def create_many_for_owner(
        cls, owner_id: int | str, items: Sequence[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        '''Batch insert; names the owner already has are skipped.'''
        rows = [
            {
                'owner_id': owner_id,
                'name': item['name'],
                'category': item['category'],
                'description': item.get('description'),
                'duration_minutes': item.get('duration_minutes'),
                'emoji': item.get('emoji'),
            }
            for item in items
        ]
        return cls.create_many(rows, on_conflict='ON CONFLICT DO NOTHING')

    @classmethod
    def get_owned(cls, activity_id: int, owner_id: int | str) -> Optional[dict[str, Any]]:
        return cls.get_one('id = %s AND owner_id = %s', (activity_id, owner_id))

    @classmethod
    def list_for_owner(
        cls, owner_id: int | str, category: str | None = None, limit: int | None = None
    ) -> list[dict[str, Any]]:
        if category:
            return cls.get_many(
                where='owner_id = %s AND category = %s',
                params=(owner_id, category),
                order_by='name ASC',
                limit=limit,
            )
        return cls.get_many(
            where='owner_id = %s',
            params=(owner_id,),
            order_by='category ASC, name ASC',
            limit=limit,
        )

    @classmethod
    def search_for_owner(
        cls, owner_id: int | str, text: str = '', limit: int = 25
    ) -> list[dict[str, Any]]:
        '''Case-insensitive name match, most used first.'''
        return cls.get_many(
            where='owner_id = %s AND name ILIKE %s',
            params=(owner_id, f'%{text.strip()}%'),
            order_by='completion_count DESC, name ASC',
            limit=limit,
        )

    @classmethod
    def update_fields(cls, activity_id: int, values: dict[str, Any]) -> Optional[dict[str, Any]]:
        unknown = set(values) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f'Cannot edit activity fields: {sorted(unknown)}')
        return cls.update(activity_id, values)

    @classmethod
    def clear_for_owner(cls, owner_id: int | str) -> int:
        '''Delete every activity of the owner; their logs go with them.'''
        with DBManager() as db:
            return db.execute('DELETE FROM activities WHERE owner_id = %s', (owner_id,))

    @classmethod
    def record_completion(cls, activity_id: int) -> Optional[dict[str, Any]]:
        with DBManager() as db:
            row = db.fetchone(
                'UPDATE activities '
                'SET completion_count = completion_count + 1, last_completed_at = NOW() '
                'WHERE id = %s RETURNING *',
                (activity_id,),
            )
        return cast(Optional[dict[str, Any]], row)

    @classmethod
    def get_random(
        cls, owner_id: int | str, category: str | None = None
    ) -> Optional[dict[str, Any]]:
        where = 'owner_id = %s'
        params: list[Any] = [owner_id]
        if category:
            where += ' AND category = %s'
            params.append(category)
        with DBManager() as db:
            row = db.fetchone(
                f'SELECT * FROM activities WHERE {where} ORDER BY RANDOM() LIMIT 1',
                tuple(params),
            )
        return cast(Optional[dict[str, Any]], row)

    @classmethod
    def suggestion_candidates(
        cls,
        owner_id: int | str,
        categories: Iterable[str] | None = None,
        exclude_ids: Iterable[int] = (),
        limit: int = 5,
    ) -> list[dict[str, Any]]:
        conditions = ['owner_id = %s']
        params: list[Any] = [owner_id]
        excluded = list(exclude_ids)
        if excluded:
            conditions.append('NOT (id = ANY(%s))')
            params.append(excluded)
        if categories is not None:
            conditions.append('category = ANY(%s)')
            params.append(list(categories))
        return cls.get_many(
            where=' AND '.join(conditions), params=params, order_by='id ASC', limit=limit
        )

    @classmethod
    def in_categories_ordered(
        cls,
        owner_id: int | str,
        categories: Sequence[str],
        exclude_id: int,
        limit: int = 3,
    ) -> list[dict[str, Any]]:
        '''Activities in the given categories, ordered by the categories' order.'''
        with DBManager() as db:
            rows = db.fetchall(
                'SELECT * FROM activities '
                'WHERE owner_id = %s AND category = ANY(%s) AND id <> %s '
                'ORDER BY array_position(%s::text[], category), id ASC '
                'LIMIT %s',
                (owner_id, list(categories), exclude_id, list(categories), limit),
            )
        return cast(list[dict[str, Any]], rows)
