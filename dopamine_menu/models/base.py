from typing import Any, ClassVar, Iterable, Optional, Sequence, cast

from dopamine_menu.database.db_manager import DBManager

Row = dict[str, Any]


class BaseModel:
    '''Table-level helpers shared by the models.

    Every call opens its own ``DBManager`` scope, so each call is its own
    transaction.
    '''

    table: ClassVar[str]
    pk: ClassVar[str] = 'id'

    @classmethod
    def get(cls, id_value: Any) -> Optional[Row]:
        with DBManager() as db:
            row = db.fetchone(
                f'SELECT * FROM {cls.table} WHERE {cls.pk} = %s', (id_value,)
            )
        return cast(Optional[Row], row)

    @classmethod
    def get_one(cls, where: str, params: Iterable[Any] = ()) -> Optional[Row]:
        where_clause = f' WHERE {where}' if where else ''
        with DBManager() as db:
            row = db.fetchone(f'SELECT * FROM {cls.table}{where_clause} LIMIT 1', tuple(params))
        return cast(Optional[Row], row)

    @classmethod
    def get_many(
        cls,
        where: str = '',
        params: Iterable[Any] = (),
        order_by: str = '',
        limit: Optional[int] = None,
    ) -> list[Row]:
        query_parts: list[str] = [f'SELECT * FROM {cls.table}']
        parameters: tuple[Any, ...] = tuple(params)

        if where:
            query_parts.append(f'WHERE {where}')
        if order_by:
            query_parts.append(f'ORDER BY {order_by}')
        if limit is not None:
            query_parts.append('LIMIT %s')
            parameters = (*parameters, limit)

        with DBManager() as db:
            rows = db.fetchall(' '.join(query_parts), parameters)
        return cast(list[Row], rows)

    @classmethod
    def create(cls, values: Row) -> Row:
        cols = list(values.keys())
        placeholders = ', '.join(['%s'] * len(cols))
        sql = (
            f'INSERT INTO {cls.table} ({", ".join(cols)}) '
            f'VALUES ({placeholders}) RETURNING *'
        )
        with DBManager() as db:
            rows = db.fetchall(sql, tuple(values[c] for c in cols))
        return cast(Row, rows[0]) if rows else {}

    @classmethod
    def create_many(cls, rows: Sequence[Row], on_conflict: str = '') -> list[Row]:
        '''Insert several rows with identical keys in one statement.'''
        if not rows:
            return []
        cols = list(rows[0].keys())
        row_placeholder = '(' + ', '.join(['%s'] * len(cols)) + ')'
        values_sql = ', '.join([row_placeholder] * len(rows))
        params = tuple(r[c] for r in rows for c in cols)
        conflict_sql = f' {on_conflict}' if on_conflict else ''
        sql = (
            f'INSERT INTO {cls.table} ({", ".join(cols)}) '
            f'VALUES {values_sql}{conflict_sql} RETURNING *'
        )
        with DBManager() as db:
            created = db.fetchall(sql, params)
        return cast(list[Row], created)

    @classmethod
    def update(cls, id_value: Any, values: Row) -> Optional[Row]:
        '''Partial update by primary key; None when the row does not exist.'''
        if not values:
            return cls.get(id_value)
        sets = ', '.join([f'{k} = %s' for k in values.keys()])
        sql = f'UPDATE {cls.table} SET {sets} WHERE {cls.pk} = %s RETURNING *'
        with DBManager() as db:
            row = db.fetchone(sql, (*values.values(), id_value))
        return cast(Optional[Row], row)

    @classmethod
    def delete(cls, id_value: Any) -> bool:
        with DBManager() as db:
            deleted = db.execute(f'DELETE FROM {cls.table} WHERE {cls.pk} = %s', (id_value,))
        return bool(deleted)

