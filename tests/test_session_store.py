"""Session store lifecycle and concurrency tests."""
import threading
from datetime import datetime, timedelta

import pytest

from quizweb.session_store import InMemorySessionStore, TokenCollisionError


def test_create_then_take_succeeds_once(session_store, sample_bank):
    token = session_store.create("Alice", sample_bank)

    session = session_store.take_for_submission(token)
    assert session is not None
    assert session.token == token
    assert session.display_name == "Alice"
    assert session.bank is sample_bank

    assert session_store.take_for_submission(token) is None
    assert session_store.peek(token) is None


def test_peek_does_not_consume(session_store, sample_bank):
    token = session_store.create("Bob", sample_bank)

    assert session_store.peek(token) is session_store.peek(token)
    assert session_store.take_for_submission(token) is not None


def test_unknown_token_not_found(session_store):
    assert session_store.take_for_submission("unknown-token") is None
    assert session_store.peek("unknown-token") is None
    assert session_store.peek("") is None


def test_tokens_are_unique_and_opaque(session_store, sample_bank):
    tokens = {session_store.create("Same Name", sample_bank) for _ in range(200)}

    assert len(tokens) == 200
    assert len(session_store) == 200
    assert all(len(token) > 20 for token in tokens)


def test_token_collision_is_an_error(sample_bank):
    store = InMemorySessionStore(token_factory=lambda: "fixed")
    store.create("Alice", sample_bank)

    with pytest.raises(TokenCollisionError):
        store.create("Bob", sample_bank)
    assert store.peek("fixed").display_name == "Alice"


def test_create_requires_bank(session_store):
    with pytest.raises(ValueError):
        session_store.create("Alice", None)


def test_started_at_uses_clock(sample_bank):
    moment = datetime(2024, 5, 1, 12, 0, 0)
    store = InMemorySessionStore(clock=lambda: moment)
    token = store.create("Alice", sample_bank)
    assert store.peek(token).started_at == moment


def test_concurrent_take_has_single_winner(session_store, sample_bank):
    token = session_store.create("Racer", sample_bank)
    workers = 32
    barrier = threading.Barrier(workers)
    results = []
    results_lock = threading.Lock()

    def submit():
        barrier.wait()
        outcome = session_store.take_for_submission(token)
        with results_lock:
            results.append(outcome)

    threads = [threading.Thread(target=submit) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    winners = [r for r in results if r is not None]
    assert len(results) == workers
    assert len(winners) == 1
    assert winners[0].token == token


def test_concurrent_create_keeps_every_session(session_store, sample_bank):
    tokens = []
    tokens_lock = threading.Lock()

    def start(index):
        token = session_store.create(f"user-{index}", sample_bank)
        with tokens_lock:
            tokens.append(token)

    threads = [threading.Thread(target=start, args=(i,)) for i in range(50)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(set(tokens)) == 50
    assert len(session_store) == 50


class _Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def test_expired_sessions_are_not_found(sample_bank):
    clock = _Clock(datetime(2024, 1, 1, 9, 0, 0))
    store = InMemorySessionStore(max_age=timedelta(minutes=60), clock=clock)
    peeked = store.create("Alice", sample_bank)
    taken = store.create("Bob", sample_bank)

    clock.now += timedelta(minutes=61)
    assert store.peek(peeked) is None
    assert store.take_for_submission(taken) is None
    assert len(store) == 0


def test_create_sweeps_expired_sessions(sample_bank):
    clock = _Clock(datetime(2024, 1, 1, 9, 0, 0))
    store = InMemorySessionStore(max_age=timedelta(minutes=10), clock=clock)
    store.create("Old", sample_bank)

    clock.now += timedelta(minutes=11)
    fresh = store.create("New", sample_bank)

    assert len(store) == 1
    assert store.peek(fresh).display_name == "New"


def test_without_max_age_sessions_never_expire(sample_bank):
    clock = _Clock(datetime(2024, 1, 1, 9, 0, 0))
    store = InMemorySessionStore(clock=clock)
    token = store.create("Alice", sample_bank)

    clock.now += timedelta(days=30)
    assert store.cleanup_expired() == 0
    assert store.take_for_submission(token) is not None


def test_clear_abandons_sessions(session_store, sample_bank):
    token = session_store.create("Alice", sample_bank)
    session_store.clear()
    assert session_store.take_for_submission(token) is None
