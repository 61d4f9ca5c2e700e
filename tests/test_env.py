import os

import pytest

from dopamine_menu.utils import env


def test_stats_timezone_defaults_to_utc():
    assert env.get_stats_timezone() == 'UTC'


def test_stats_timezone_from_env(monkeypatch):
    monkeypatch.setenv('STATS_TIMEZONE', 'America/New_York')
    assert env.get_stats_timezone() == 'America/New_York'


def test_stats_timezone_rejects_unknown_zone(monkeypatch):
    monkeypatch.setenv('STATS_TIMEZONE', 'Mars/Olympus_Mons')
    with pytest.raises(ValueError):
        env.get_stats_timezone()


def test_default_daily_goal(monkeypatch):
    assert env.get_default_daily_goal() == 3
    monkeypatch.setenv('DEFAULT_DAILY_GOAL', '5')
    assert env.get_default_daily_goal() == 5


@pytest.mark.parametrize('raw', ['zero', '0', '-2'])
def test_default_daily_goal_invalid(monkeypatch, raw):
    monkeypatch.setenv('DEFAULT_DAILY_GOAL', raw)
    with pytest.raises(ValueError):
        env.get_default_daily_goal()


def test_resolve_env_filename(monkeypatch):
    assert env._resolve_env_filename() == '.env.local'
    monkeypatch.setenv('ENV', 'prod')
    assert env._resolve_env_filename() == '.env.prod'
    monkeypatch.setenv('ENV_FILE', 'custom.env')
    assert env._resolve_env_filename() == 'custom.env'


def test_load_env_falls_back_to_dotenv(tmp_path, monkeypatch):
    (tmp_path / 'pyproject.toml').write_text('')
    (tmp_path / '.env').write_text('DOPAMINE_TEST_VALUE=from-fallback\n')
    monkeypatch.setattr(env, '_find_project_root', lambda: tmp_path)
    monkeypatch.delenv('DOPAMINE_TEST_VALUE', raising=False)

    assert env.load_env() == tmp_path / '.env'
    assert os.environ['DOPAMINE_TEST_VALUE'] == 'from-fallback'
    monkeypatch.delenv('DOPAMINE_TEST_VALUE')


def test_find_project_root_walks_up(tmp_path):
    (tmp_path / 'pyproject.toml').write_text('')
    nested = tmp_path / 'a' / 'b'
    nested.mkdir(parents=True)
    assert env._find_project_root(nested) == tmp_path


def test_load_env_without_files(tmp_path, monkeypatch):
    monkeypatch.setattr(env, '_find_project_root', lambda: tmp_path)
    assert env.load_env() is None
