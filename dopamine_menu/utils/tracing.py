import logging
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar

T = TypeVar('T')

# Innermost open span for the running task
_current_span: ContextVar[Optional['TraceSpan']] = ContextVar(
    'current_span', default=None
)

logger = logging.getLogger(__name__)


@dataclass
class TraceSpan:
    '''A timed unit of work, optionally nested under a parent span.'''

    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    parent: Optional['TraceSpan'] = None
    started: float = field(default_factory=time.perf_counter)
    ended: Optional[float] = None

    @property
    def duration_ms(self) -> Optional[float]:
        if self.ended is None:
            return None
        return (self.ended - self.started) * 1000

    @property
    def path(self) -> str:
        '''Dotted chain of span names from the root span down to this one.'''
        if self.parent is None:
            return self.name
        return f'{self.parent.path} > {self.name}'

    def finish(self) -> None:
        self.ended = time.perf_counter()
        details = ', '.join(f'{k}={v}' for k, v in self.metadata.items())
        logger.debug(f'{self.path}: {self.duration_ms:.2f}ms [{details}]')


@contextmanager
def trace_span(name: str, metadata: Optional[Dict[str, Any]] = None) -> Iterator[TraceSpan]:
    '''Time a block and log it at DEBUG when it exits.

    Example:
        with trace_span('stats.update', {'user_id': user_id}):
            UserStats.upsert_day(...)
    '''
    span = TraceSpan(name=name, metadata=dict(metadata or {}), parent=_current_span.get())
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.finish()
        _current_span.reset(token)


def traced(name: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    '''Decorator form of trace_span for whole functions.'''

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            with trace_span(name):
                return func(*args, **kwargs)

        return wrapper

    return decorator


def get_current_span() -> Optional[TraceSpan]:
    return _current_span.get()


def add_span_metadata(key: str, value: Any) -> None:
    '''Attach metadata to the innermost open span, if any.'''
    span = _current_span.get()
    if span is not None:
        span.metadata[key] = value
