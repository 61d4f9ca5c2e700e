'''Streaks, daily stats and activity suggestions derived from the completion log.'''

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Any, Callable, Iterable, Optional

import pendulum
import psycopg

from dopamine_menu.models.activity import Activity
from dopamine_menu.models.activity_log import ActivityLog
from dopamine_menu.models.user import User
from dopamine_menu.models.user_stats import UserStats
from dopamine_menu.utils.constants import (
    CATEGORY_TRANSITIONS,
    MOOD_CATEGORIES,
    RECENT_EXCLUSION_LIMIT,
    SUGGESTION_LIMIT,
    TRANSITION_SUGGESTION_LIMIT,
)
from dopamine_menu.utils.env import get_stats_timezone
from dopamine_menu.utils.errors import ActivityNotFoundError, ValidationError
from dopamine_menu.utils.helper import parse_duration, parse_goal, parse_mood
from dopamine_menu.utils.tracing import add_span_metadata, trace_span

logger = logging.getLogger(__name__)


def streak_from_days(days: Iterable[date], today: date) -> int:
    '''Length of the run of consecutive days ending today or yesterday.

    `days` must be distinct and sorted most recent first. The walk counts
    back from today; when nothing was done today, a completion yesterday
    keeps a streak of one alive until the user has had a chance to act.
    Days after `today` are ignored.
    '''
    streak = 0
    for day in days:
        offset = (today - day).days
        if offset < 0:
            continue
        if offset == streak or (streak == 0 and offset == 1):
            streak += 1
        else:
            break
    return streak


def default_stats(daily_goal: int) -> dict[str, Any]:
    return {
        'current_streak': 0,
        'longest_streak': 0,
        'daily_goal': daily_goal,
        'activities_completed': 0,
    }


class StatsEngine:
    def __init__(
        self,
        timezone: Optional[str] = None,
        clock: Optional[Callable[[str], date]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._timezone = timezone
        self._clock = clock
        self._rng = rng or random.Random()

    @property
    def timezone(self) -> str:
        # Resolved lazily so .env is loaded before the first lookup
        return self._timezone or get_stats_timezone()

    def today(self) -> date:
        if self._clock is not None:
            return self._clock(self.timezone)
        now = pendulum.now(self.timezone)
        return date(now.year, now.month, now.day)

    def calculate_streak(self, user_id: int | str) -> int:
        with trace_span('stats.calculate_streak', {'user_id': user_id}):
            days = ActivityLog.distinct_days(user_id, self.timezone)
            streak = streak_from_days(days, self.today())
            add_span_metadata('streak', streak)
            return streak

    def update_stats(self, user_id: int | str) -> dict[str, Any]:
        '''Recompute today's row from the log and persist it.'''
        with trace_span('stats.update_stats', {'user_id': user_id}):
            today = self.today()
            completed = ActivityLog.count_on_day(user_id, today, self.timezone)
            streak = self.calculate_streak(user_id)
            row = UserStats.upsert_day(user_id, today, completed, streak)
            logger.info(
                f'Stats for user {user_id} on {today}: completed={completed}, '
                f'streak={streak}, longest={row.get("longest_streak")}'
            )
            return row

    def get_user_stats(self, user_id: int | str) -> dict[str, Any]:
        row = UserStats.get_for_day(user_id, self.today())
        if row:
            return row
        return default_stats(User.get_daily_goal(user_id))

    def complete_activity(
        self,
        user_id: int | str,
        activity_id: int,
        duration_minutes: Any = None,
        mood: Optional[str] = None,
    ) -> bool:
        '''Record a completion and refresh today's stats.

        Returns False (and logs why) when the input is malformed, the activity
        is unknown to this user, or the database rejects a write. Writes that
        already happened are not undone.
        '''
        with trace_span(
            'stats.complete_activity', {'user_id': user_id, 'activity_id': activity_id}
        ):
            try:
                mood = parse_mood(mood)
                duration_minutes = parse_duration(duration_minutes)
            except ValidationError as e:
                logger.warning(f'Rejected completion of activity {activity_id}: {e}')
                return False

            try:
                if Activity.get_owned(activity_id, user_id) is None:
                    raise ActivityNotFoundError(activity_id)
                Activity.record_completion(activity_id)
                ActivityLog.insert(
                    activity_id=activity_id,
                    user_id=user_id,
                    duration_minutes=duration_minutes,
                    mood=mood,
                )
                self.update_stats(user_id)
            except ActivityNotFoundError as e:
                logger.warning(f'Completion by user {user_id} failed: {e}')
                return False
            except psycopg.Error:
                logger.exception(f'Failed to complete activity {activity_id}')
                return False

            return True

    def get_suggested_activities(
        self,
        user_id: int | str,
        mood: Optional[str] = None,
        exclude_recent: bool = True,
        rng: Optional[random.Random] = None,
    ) -> list[dict[str, Any]]:
        '''Up to five of the user's activities that fit the mood, shuffled.'''
        with trace_span('stats.suggest', {'user_id': user_id, 'mood': mood}):
            exclude_ids: list[int] = []
            if exclude_recent:
                exclude_ids = ActivityLog.recent_activity_ids(
                    user_id, RECENT_EXCLUSION_LIMIT
                )
            categories = MOOD_CATEGORIES.get((mood or '').strip().lower())
            picks = Activity.suggestion_candidates(
                user_id,
                categories=categories,
                exclude_ids=exclude_ids,
                limit=SUGGESTION_LIMIT,
            )
            (rng or self._rng).shuffle(picks)
            return picks

    def get_activity_suggestions(self, activity: dict[str, Any]) -> list[dict[str, Any]]:
        '''What to do next after `activity`, in transition-table order.'''
        categories = CATEGORY_TRANSITIONS.get(activity.get('category') or '', ())
        if not categories:
            return []
        return Activity.in_categories_ordered(
            activity['owner_id'],
            categories,
            exclude_id=activity['id'],
            limit=TRANSITION_SUGGESTION_LIMIT,
        )

    def set_daily_goal(self, user_id: int | str, goal: int) -> int:
        goal = parse_goal(goal)
        User.set_daily_goal(user_id, goal)
        UserStats.set_goal_for_day(user_id, self.today(), goal)
        return goal

    def clear_all_activities(self, user_id: int | str, reset_stats: bool = False) -> int:
        '''Remove the user's whole menu; stats history survives unless asked.'''
        deleted = Activity.clear_for_owner(user_id)
        if reset_stats:
            UserStats.clear_for_user(user_id)
        logger.info(
            f'Cleared {deleted} activities for user {user_id} (reset_stats={reset_stats})'
        )
        return deleted


engine = StatsEngine()
