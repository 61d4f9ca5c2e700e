from dataclasses import dataclass, field
from typing import Any, Callable, Mapping
from unittest.mock import MagicMock

import pytest


def _params(params) -> Any:
    if isinstance(params, Mapping):
        return dict(params)
    return tuple(params or ())


@dataclass
class FakeDB:
    fetchone_results: list[Any] = field(default_factory=list)
    fetchall_results: list[Any] = field(default_factory=list)
    execute_results: list[int] = field(default_factory=list)
    executed: list[tuple[str, Any]] = field(default_factory=list)
    last_query: str | None = None
    last_params: Any = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def fetchone(self, query: str, params=None):
        self.last_query = query
        self.last_params = _params(params)
        if self.fetchone_results:
            return self.fetchone_results.pop(0)

    def fetchall(self, query: str, params=None):
        self.last_query = query
        self.last_params = _params(params)
        if self.fetchall_results:
            return self.fetchall_results.pop(0)
        return []

    def execute(self, query: str, params=None) -> int:
        self.executed.append((query, _params(params)))
        if self.execute_results:
            return self.execute_results.pop(0)
        return 0


class FakeDBManager:
    def __init__(self, db: FakeDB):
        self._db = db

    def __call__(self):
        return self._db


@pytest.fixture()
def fake_db() -> FakeDB:
    return FakeDB()


@pytest.fixture
def patch_db(monkeypatch, fake_db) -> Callable[..., FakeDB]:
    '''Route DBManager in the given modules to the shared FakeDB.'''

    def _patch(*modules) -> FakeDB:
        for module in modules:
            monkeypatch.setattr(module, 'DBManager', FakeDBManager(fake_db))
        return fake_db

    return _patch


@pytest.fixture
def mock_db_manager(monkeypatch):
    '''MagicMock standing in for the db handle inside every model module.'''
    from dopamine_menu.models import activity as activity_module
    from dopamine_menu.models import activity_log as activity_log_module
    from dopamine_menu.models import base as base_module
    from dopamine_menu.models import user as user_module
    from dopamine_menu.models import user_stats as user_stats_module

    mock_db = MagicMock()
    mock_manager = MagicMock()
    mock_manager.__enter__.return_value = mock_db
    mock_manager.__exit__.return_value = None

    for module in (
        base_module,
        activity_module,
        activity_log_module,
        user_module,
        user_stats_module,
    ):
        monkeypatch.setattr(module, 'DBManager', lambda: mock_manager)

    return mock_db


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ('STATS_TIMEZONE', 'DEFAULT_DAILY_GOAL', 'ENV_FILE', 'ENV'):
        monkeypatch.delenv(name, raising=False)
