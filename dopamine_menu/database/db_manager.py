import logging
import os
from functools import wraps
from typing import Any, Callable, Iterable, List, Mapping, Optional, TypeVar

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

T = TypeVar('T')
Params = Iterable[Any] | Mapping[str, Any] | None

logger = logging.getLogger(__name__)


def _bind(params: Params) -> Any:
    '''Named placeholders take a mapping, positional ones a tuple.'''
    if isinstance(params, Mapping):
        return params
    return tuple(params or ()) or None


def _database_url(db_url: Optional[str] = None) -> str:
    conninfo = db_url or os.getenv('DATABASE_URL')
    if not conninfo:
        raise RuntimeError('DATABASE_URL is not set (see .env.local)')
    return conninfo


def require_connection(func: Callable) -> Callable:
    '''Decorator to ensure DBManager is used within a context manager.'''

    @wraps(func)
    def wrapper(self: 'DBManager', *args, **kwargs) -> Any:
        if self._conn is None:
            raise RuntimeError(
                'DBManager is not in a context. Use "with DBManager() as db:"'
            )
        return func(self, *args, **kwargs)

    return wrapper


class DBManager:
    '''Postgres connection scope.

    Each ``with DBManager() as db:`` block is one transaction: committed on a
    clean exit, rolled back when the block raises. Connections come from the
    shared pool when ``init_pool`` has run, otherwise a direct connection is
    opened for the block.
    '''

    _pool: Optional[ConnectionPool] = None

    def __init__(self) -> None:
        self._conn: Optional[psycopg.Connection] = None
        self._from_pool: bool = False

    @classmethod
    def init_pool(
        cls,
        db_url: Optional[str] = None,
        min_size: int = 1,
        max_size: int = 10,
    ) -> None:
        '''Open the process-wide pool. Calling it twice is a no-op.'''
        if cls._pool is not None:
            return
        cls._pool = ConnectionPool(
            conninfo=_database_url(db_url),
            min_size=min_size,
            max_size=max_size,
            kwargs={'row_factory': dict_row},
        )
        logger.info(f'Opened Postgres pool (min={min_size}, max={max_size})')

    @classmethod
    def close_pool(cls) -> None:
        if cls._pool is not None:
            try:
                cls._pool.close()
            finally:
                cls._pool = None
            logger.info('Closed Postgres pool')

    def _acquire(self) -> None:
        pool = self.__class__._pool
        if pool is not None:
            self._conn = pool.getconn()
            self._from_pool = True
        else:
            self._conn = psycopg.connect(_database_url(), row_factory=dict_row)
            self._from_pool = False

    def _release(self) -> None:
        conn, self._conn = self._conn, None
        if conn is None:
            return
        pool = self.__class__._pool
        if self._from_pool and pool is not None:
            # broken connections are discarded by the pool on return
            pool.putconn(conn)
        else:
            conn.close()
        self._from_pool = False

    def __enter__(self) -> 'DBManager':
        self._acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._conn is None:
            return
        try:
            if exc_type is None:
                self._conn.commit()
            else:
                self._conn.rollback()
        finally:
            self._release()

    def _run_with_retry(self, fn: Callable[[], T]) -> T:
        '''Run fn, reconnecting and retrying once if the connection dropped.'''
        try:
            return fn()
        except (psycopg.OperationalError, psycopg.InterfaceError) as e:
            logger.warning(f'Lost database connection ({e}); reconnecting once')
            try:
                self._release()
            except psycopg.Error as close_error:
                logger.warning(f'Error while closing broken connection: {close_error}')
            self._acquire()
            return fn()

    def _select(self, query: str, params: Params) -> List[dict[str, Any]]:
        assert self._conn is not None
        with self._conn.cursor() as cur:
            cur.execute(query, _bind(params))
            return cur.fetchall() if cur.description else []

    def _exec(self, query: str, params: Params) -> int:
        assert self._conn is not None
        with self._conn.cursor() as cur:
            cur.execute(query, _bind(params))
            return cur.rowcount

    @require_connection
    def execute(self, query: str, params: Params = None) -> int:
        '''Run a statement without a result set; returns the affected row count.'''
        try:
            return self._run_with_retry(lambda: self._exec(query, params))
        except psycopg.Error as e:
            logger.error(f'Postgres execute() error: {e}\nQuery: {query}\nParams: {params}')
            raise

    @require_connection
    def fetchall(
        self, query: str, params: Params = None
    ) -> List[dict[str, Any]]:
        try:
            return self._run_with_retry(lambda: self._select(query, params))
        except psycopg.Error as e:
            logger.error(f'Postgres fetchall() error: {e}\nQuery: {query}\nParams: {params}')
            raise

    @require_connection
    def fetchone(
        self, query: str, params: Params = None
    ) -> Optional[dict[str, Any]]:
        rows = self.fetchall(query, params)
        return rows[0] if rows else None
