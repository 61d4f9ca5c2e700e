from datetime import date

import pytest

from dopamine_menu.models.activity import Activity
from dopamine_menu.models.activity_log import ActivityLog
from dopamine_menu.models.user import User
from dopamine_menu.models.user_stats import UPSERT_DAY_SQL, UserStats


def test_create_for_owner_inserts_and_returns_row(mock_db_manager):
    mock_db_manager.fetchall.return_value = [{'id': 7, 'name': 'Walk'}]

    row = Activity.create_for_owner(42, 'Walk', 'entrees', duration_minutes=20)

    assert row == {'id': 7, 'name': 'Walk'}
    sql, params = mock_db_manager.fetchall.call_args.args
    assert sql.startswith('INSERT INTO activities')
    assert 'RETURNING *' in sql
    assert params[:3] == (42, 'Walk', 'entrees')
    assert 20 in params


def test_create_many_for_owner_skips_existing_names(mock_db_manager):
    mock_db_manager.fetchall.return_value = [{'id': 1}]

    Activity.create_many_for_owner(
        42,
        [
            {'name': 'A', 'category': 'sides'},
            {'name': 'B', 'category': 'sides', 'duration_minutes': 5},
        ],
    )

    sql, params = mock_db_manager.fetchall.call_args.args
    assert 'ON CONFLICT DO NOTHING' in sql
    assert sql.count('(%s, %s, %s, %s, %s, %s)') == 2
    assert params.count(42) == 2


def test_create_many_with_no_rows_skips_query(mock_db_manager):
    assert Activity.create_many_for_owner(42, []) == []
    assert not mock_db_manager.fetchall.called


def test_get_owned_scopes_by_owner(mock_db_manager):
    mock_db_manager.fetchone.return_value = None

    assert Activity.get_owned(5, 42) is None

    sql, params = mock_db_manager.fetchone.call_args.args
    assert 'id = %s AND owner_id = %s' in sql
    assert 'LIMIT 1' in sql
    assert params == (5, 42)


def test_update_fields_rejects_unknown_columns(mock_db_manager):
    with pytest.raises(ValueError):
        Activity.update_fields(5, {'completion_count': 100})
    assert not mock_db_manager.fetchone.called


def test_update_fields_builds_partial_update(mock_db_manager):
    mock_db_manager.fetchone.return_value = {'id': 5, 'name': 'New'}

    Activity.update_fields(5, {'name': 'New', 'emoji': None})

    sql, params = mock_db_manager.fetchone.call_args.args
    assert sql == 'UPDATE activities SET name = %s, emoji = %s WHERE id = %s RETURNING *'
    assert params == ('New', None, 5)


def test_record_completion_increments_in_sql(mock_db_manager):
    Activity.record_completion(5)

    sql, params = mock_db_manager.fetchone.call_args.args
    assert 'completion_count = completion_count + 1' in sql
    assert 'last_completed_at = NOW()' in sql
    assert params == (5,)


def test_suggestion_candidates_with_filters(mock_db_manager):
    mock_db_manager.fetchall.return_value = []

    Activity.suggestion_candidates(
        42, categories=('appetizers', 'sides'), exclude_ids=[3, 4], limit=5
    )

    sql, params = mock_db_manager.fetchall.call_args.args
    assert 'NOT (id = ANY(%s))' in sql
    assert 'category = ANY(%s)' in sql
    assert 'ORDER BY id ASC' in sql
    assert params == (42, [3, 4], ['appetizers', 'sides'], 5)


def test_suggestion_candidates_without_filters(mock_db_manager):
    mock_db_manager.fetchall.return_value = []

    Activity.suggestion_candidates(42)

    sql, params = mock_db_manager.fetchall.call_args.args
    assert 'ANY' not in sql
    assert params == (42, 5)


def test_in_categories_ordered_follows_given_order(mock_db_manager):
    mock_db_manager.fetchall.return_value = []

    Activity.in_categories_ordered(42, ('entrees', 'sides'), exclude_id=9, limit=3)

    sql, params = mock_db_manager.fetchall.call_args.args
    assert 'array_position(%s::text[], category)' in sql
    assert 'id <> %s' in sql
    assert params == (42, ['entrees', 'sides'], 9, ['entrees', 'sides'], 3)


def test_search_for_owner_uses_ilike(mock_db_manager):
    mock_db_manager.fetchall.return_value = []

    Activity.search_for_owner(42, ' walk ')

    sql, params = mock_db_manager.fetchall.call_args.args
    assert 'name ILIKE %s' in sql
    assert params == (42, '%walk%', 25)


def test_get_random_with_category(mock_db_manager):
    Activity.get_random(42, 'sides')

    sql, params = mock_db_manager.fetchone.call_args.args
    assert 'ORDER BY RANDOM()' in sql
    assert params == (42, 'sides')


def test_clear_for_owner_returns_rowcount(mock_db_manager):
    mock_db_manager.execute.return_value = 4

    assert Activity.clear_for_owner(42) == 4
    sql, params = mock_db_manager.execute.call_args.args
    assert sql == 'DELETE FROM activities WHERE owner_id = %s'
    assert params == (42,)


def test_distinct_days_buckets_by_timezone(mock_db_manager):
    mock_db_manager.fetchall.return_value = [
        {'day': date(2026, 10, 19)},
        {'day': date(2026, 10, 18)},
    ]

    days = ActivityLog.distinct_days(42, 'Europe/Berlin')

    assert days == [date(2026, 10, 19), date(2026, 10, 18)]
    sql, params = mock_db_manager.fetchall.call_args.args
    assert '(completed_at AT TIME ZONE %s)::date' in sql
    assert 'ORDER BY day DESC' in sql
    assert params == ('Europe/Berlin', 42)


def test_count_on_day(mock_db_manager):
    mock_db_manager.fetchone.return_value = {'cnt': 3}

    assert ActivityLog.count_on_day(42, date(2026, 10, 19), 'UTC') == 3
    _, params = mock_db_manager.fetchone.call_args.args
    assert params == (42, 'UTC', date(2026, 10, 19))


def test_recent_activity_ids(mock_db_manager):
    mock_db_manager.fetchall.return_value = [{'activity_id': 3}, {'activity_id': 1}]

    assert ActivityLog.recent_activity_ids(42) == [3, 1]
    _, params = mock_db_manager.fetchall.call_args.args
    assert params == (42, 3)


def test_upsert_day_passes_named_params(mock_db_manager, monkeypatch):
    monkeypatch.setenv('DEFAULT_DAILY_GOAL', '4')
    mock_db_manager.fetchone.return_value = {'longest_streak': 2}

    row = UserStats.upsert_day(42, date(2026, 10, 19), 2, 1)

    assert row == {'longest_streak': 2}
    sql, params = mock_db_manager.fetchone.call_args.args
    assert sql == UPSERT_DAY_SQL
    assert params == {
        'user_id': 42,
        'day': date(2026, 10, 19),
        'default_goal': 4,
        'completed': 2,
        'streak': 1,
    }


def test_upsert_day_sql_never_lowers_longest_streak():
    assert 'ON CONFLICT (user_id, stat_date) DO UPDATE' in UPSERT_DAY_SQL
    assert 'GREATEST(user_stats.longest_streak, EXCLUDED.current_streak)' in UPSERT_DAY_SQL
    assert 'SELECT MAX(longest_streak) FROM user_stats' in UPSERT_DAY_SQL


def test_upsert_user_refreshes_display_name(mock_db_manager):
    mock_db_manager.fetchone.return_value = {'id': 42, 'display_name': 'Sam'}

    User.upsert_user(42, 'Sam')

    sql, params = mock_db_manager.fetchone.call_args.args
    assert 'ON CONFLICT (id) DO UPDATE SET display_name = EXCLUDED.display_name' in sql
    assert params == (42, 'Sam', 3)


def test_get_daily_goal_falls_back_to_default(mock_db_manager):
    mock_db_manager.fetchone.return_value = None
    assert User.get_daily_goal(42) == 3

    mock_db_manager.fetchone.return_value = {'daily_goal': 6}
    assert User.get_daily_goal(42) == 6


def test_update_without_values_reads_row(mock_db_manager):
    mock_db_manager.fetchone.return_value = {'id': 42}

    assert User.update(42, {}) == {'id': 42}

    sql, _ = mock_db_manager.fetchone.call_args.args
    assert sql.startswith('SELECT * FROM users')


def test_clear_stats_for_user(patch_db):
    from dopamine_menu.models import user_stats as user_stats_module

    db = patch_db(user_stats_module)
    db.execute_results = [3]

    assert UserStats.clear_for_user(42) == 3
    assert db.executed == [('DELETE FROM user_stats WHERE user_id = %s', (42,))]


def test_list_for_owner_by_category(patch_db):
    from dopamine_menu.models import base as base_module

    db = patch_db(base_module)
    db.fetchall_results = [[{'id': 1, 'category': 'sides'}]]

    assert Activity.list_for_owner(42, 'sides') == [{'id': 1, 'category': 'sides'}]
    assert db.last_query == (
        'SELECT * FROM activities WHERE owner_id = %s AND category = %s '
        'ORDER BY name ASC'
    )
    assert db.last_params == (42, 'sides')


def test_set_goal_for_day_targets_one_row(patch_db):
    from dopamine_menu.models import user_stats as user_stats_module

    db = patch_db(user_stats_module)

    assert UserStats.set_goal_for_day(42, date(2026, 10, 19), 5) is None
    assert 'WHERE user_id = %s AND stat_date = %s' in db.last_query
    assert db.last_params == (5, 42, date(2026, 10, 19))
