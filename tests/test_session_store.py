import pytest

from fitness_client.models.session import Session
from fitness_client.session_store import SessionStore


def _recording_store():
    store = SessionStore()
    seen: list[Session] = []
    store.subscribe(seen.append)
    return store, seen


def test_initial_session_is_empty():
    store = SessionStore()
    assert store.token is None
    assert store.user is None
    assert store.auth_ready is False


def test_repeated_token_notifies_once():
    store, seen = _recording_store()
    for _ in range(5):
        store.apply_token("tok-1", {"sub": "u1"})
    assert len(seen) == 1
    assert seen[0].token == "tok-1"
    assert seen[0].user == {"sub": "u1"}
    assert seen[0].auth_ready is True


def test_same_token_with_new_claims_is_still_a_noop():
    store, seen = _recording_store()
    assert store.apply_token("tok-1", {"sub": "u1"}) is True
    assert store.apply_token("tok-1", {"sub": "u1", "extra": 1}) is False
    assert store.user == {"sub": "u1"}
    assert len(seen) == 1


def test_new_token_notifies_again():
    store, seen = _recording_store()
    store.apply_token("tok-1", {"sub": "u1"})
    store.apply_token("tok-2", {"sub": "u1"})
    store.apply_token("tok-2", {"sub": "u1"})
    assert [s.token for s in seen] == ["tok-1", "tok-2"]


def test_logout_clears_and_notifies():
    store, seen = _recording_store()
    store.apply_token("tok-1", {"sub": "u1"})
    store.logout()
    assert store.snapshot == Session()
    assert seen[-1].auth_ready is False
    assert len(seen) == 2


def test_logout_when_logged_out_does_not_notify():
    store, seen = _recording_store()
    store.logout()
    assert seen == []


def test_same_token_after_logout_applies_again():
    store, seen = _recording_store()
    store.apply_token("tok-1", {"sub": "u1"})
    store.logout()
    store.apply_token("tok-1", {"sub": "u1"})
    assert [s.token for s in seen] == ["tok-1", None, "tok-1"]


def test_missing_claims_become_empty_user():
    store = SessionStore()
    store.apply_token("tok-1", None)
    assert store.user == {}


def test_empty_token_rejected():
    store = SessionStore()
    with pytest.raises(ValueError):
        store.apply_token("", {"sub": "u1"})


def test_invariants_hold_for_every_observed_state():
    store, seen = _recording_store()
    store.apply_token("a", {"sub": "1"})
    store.apply_token("a", {"sub": "1"})
    store.logout()
    store.apply_token("b", None)
    store.apply_token("c", {"sub": "2"})
    store.logout()
    for session in seen + [store.snapshot]:
        assert (session.user is None) == (session.token is None)
        assert not session.auth_ready or session.token is not None


def test_unsubscribe_stops_notifications():
    store = SessionStore()
    seen = []
    unsubscribe = store.subscribe(seen.append)
    unsubscribe()
    unsubscribe()
    store.apply_token("tok-1", {})
    assert seen == []


def test_failing_listener_does_not_block_others():
    store = SessionStore()
    seen = []

    def broken(_session):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(seen.append)
    store.apply_token("tok-1", {})
    assert len(seen) == 1


def test_reentrant_apply_from_listener_is_deduplicated():
    store = SessionStore()
    seen = []

    def echo(session):
        seen.append(session)
        if session.token:
            store.apply_token(session.token, session.user)

    store.subscribe(echo)
    store.apply_token("tok-1", {"sub": "u1"})
    assert len(seen) == 1
