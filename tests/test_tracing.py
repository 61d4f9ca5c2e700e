import logging

from dopamine_menu.utils.tracing import (
    add_span_metadata,
    get_current_span,
    trace_span,
    traced,
)


def test_spans_nest_and_restore_parent():
    assert get_current_span() is None
    with trace_span('outer') as outer:
        with trace_span('inner') as inner:
            assert get_current_span() is inner
            assert inner.path == 'outer > inner'
        assert get_current_span() is outer
    assert get_current_span() is None
    assert outer.duration_ms is not None and outer.duration_ms >= 0


def test_metadata_goes_to_innermost_span():
    with trace_span('outer', {'user_id': 1}) as outer:
        with trace_span('inner') as inner:
            add_span_metadata('streak', 3)
    assert inner.metadata == {'streak': 3}
    assert outer.metadata == {'user_id': 1}


def test_add_metadata_without_span_is_noop():
    add_span_metadata('ignored', True)


def test_span_finishes_when_block_raises():
    try:
        with trace_span('failing') as span:
            raise RuntimeError('boom')
    except RuntimeError:
        pass
    assert span.ended is not None
    assert get_current_span() is None


def test_traced_decorator_logs_duration(caplog):
    @traced('work')
    def work(x):
        return x * 2

    with caplog.at_level(logging.DEBUG, logger='dopamine_menu.utils.tracing'):
        assert work(21) == 42
    assert 'work:' in caplog.text
