import threading

from oruspad import simulate, EvaluationSession
from oruspad.config import DEFAULT_LIMITS, Limits
from oruspad.errors import Cancelled, ResourceExhausted
from oruspad.samples import DEFAULT_CODE, HELLO_WORLD

INFINITE_LOOP = 'fn main() {\n    let mut n = 0;\n    while true { n = n + 1; }\n}'


def test_capped_never_raises_limits():
    limits = DEFAULT_LIMITS.capped({'max_steps': 50, 'max_iterations': 10 ** 9, 'unknown': 1})
    assert limits.max_steps == 50
    assert limits.max_iterations == DEFAULT_LIMITS.max_iterations
    assert limits.max_call_depth == DEFAULT_LIMITS.max_call_depth


def test_capped_clamps_negative_and_ignores_empty():
    assert DEFAULT_LIMITS.capped({'max_iterations': -5}).max_iterations == 0
    assert DEFAULT_LIMITS.capped(None) is DEFAULT_LIMITS
    assert DEFAULT_LIMITS.capped({}) is DEFAULT_LIMITS


def test_step_budget():
    source = 'fn main() {\n    let a = 1;\n    let b = 2;\n    let c = 3;\n}'
    assert simulate(source, limits=Limits(max_steps=3)).ok
    error = simulate(source, limits=Limits(max_steps=2)).error
    assert isinstance(error, ResourceExhausted)
    assert error.message == 'program exceeded its execution step budget'


def test_iteration_budget_stops_infinite_loop():
    error = simulate(INFINITE_LOOP).error
    assert isinstance(error, ResourceExhausted)
    assert error.message == 'program exceeded its loop iteration budget'


def test_output_line_limit():
    source = 'fn main() { print(1); print(2); print(3); }'
    error = simulate(source, limits=Limits(max_output_lines=2)).error
    assert isinstance(error, ResourceExhausted)
    assert error.message == 'program produced too much output'


def test_preset_cancel_event_stops_run():
    event = threading.Event()
    event.set()
    result = simulate(DEFAULT_CODE, cancel_event=event)
    assert isinstance(result.error, Cancelled)
    assert result.output == ()
    assert result.partial_output == ()


def test_session_runs_programs():
    with EvaluationSession() as session:
        task = session.submit(HELLO_WORLD)
        result = task.result(timeout=10)
    assert result.output == ('Hello, World!',)
    assert task.done()
    assert not task.cancelled


def test_session_cancel_stops_infinite_loop():
    limits = Limits(max_steps=10 ** 12, max_iterations=10 ** 12)
    with EvaluationSession(limits=limits) as session:
        task = session.submit(INFINITE_LOOP)
        task.cancel()
        result = task.result(timeout=30)
    assert task.cancelled
    assert isinstance(result.error, Cancelled)


def test_session_tasks_are_independent():
    with EvaluationSession(timestamp=42) as session:
        first = session.submit('fn main() { print(timestamp()); }')
        second = session.submit('fn main() { let x = 1; print(x); }')
        assert first.result(timeout=10).output == ('42',)
        assert second.result(timeout=10).output == ('1',)
