import logging
import os
from pathlib import Path
from typing import Optional

import pendulum
from dotenv import load_dotenv

DEFAULT_STATS_TIMEZONE = 'UTC'
DEFAULT_DAILY_GOAL = 3
ROOT_MARKERS = ('pyproject.toml', '.git')

logger = logging.getLogger(__name__)


def _find_project_root(start: Optional[Path] = None) -> Path:
    '''Nearest ancestor holding a root marker, else the starting directory.'''
    here = start or Path(__file__).resolve()
    here = here if here.is_dir() else here.parent
    for candidate in (here, *here.parents):
        if any((candidate / m).exists() for m in ROOT_MARKERS):
            return candidate
    return here


def _resolve_env_filename() -> str:
    if os.getenv('ENV_FILE'):
        return os.environ['ENV_FILE']
    env = (os.getenv('ENV') or os.getenv('PYTHON_ENV') or 'local').lower()
    return '.env.prod' if env in {'prod', 'production'} else '.env.local'


def load_env(override: bool = False) -> Optional[Path]:
    '''Load the environment-specific dotenv file, or `.env` when it is missing.

    Returns the file that was loaded, None when neither exists. Variables
    already set in the process win unless `override` is given.
    '''
    root = _find_project_root()
    preferred = Path(_resolve_env_filename())
    if not preferred.is_absolute():
        preferred = root / preferred

    for candidate in (preferred, root / '.env'):
        if candidate.exists():
            load_dotenv(dotenv_path=candidate, override=override)
            logger.debug(f'Loaded environment from {candidate}')
            return candidate
    return None


def get_stats_timezone() -> str:
    '''Timezone used to bucket completions into calendar days.

    Raises ValueError when STATS_TIMEZONE is not a known IANA zone name.
    '''
    name = (os.getenv('STATS_TIMEZONE') or DEFAULT_STATS_TIMEZONE).strip()
    try:
        pendulum.timezone(name)
    except Exception as e:
        raise ValueError(f'Unknown STATS_TIMEZONE "{name}"') from e
    return name


def get_default_daily_goal() -> int:
    raw = os.getenv('DEFAULT_DAILY_GOAL')
    if not raw:
        return DEFAULT_DAILY_GOAL
    try:
        goal = int(raw)
    except ValueError as e:
        raise ValueError(f'DEFAULT_DAILY_GOAL must be an integer, got "{raw}"') from e
    if goal < 1:
        raise ValueError('DEFAULT_DAILY_GOAL must be at least 1')
    return goal
