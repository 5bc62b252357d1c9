from conftest import FakeIdentityProvider

from fitness_client.session_store import SessionStore
from fitness_client.token_bridge import TokenBridge


def test_absent_token_leaves_store_untouched():
    store = SessionStore()
    seen = []
    store.subscribe(seen.append)
    bridge = TokenBridge(store)
    bridge.on_token(None, None)
    bridge.on_token("", {"sub": "x"})
    assert seen == []
    assert store.auth_ready is False


def test_present_token_is_written():
    store = SessionStore()
    TokenBridge(store).on_token("tok-1", {"sub": "u1"})
    assert store.token == "tok-1"
    assert store.user == {"sub": "u1"}
    assert store.auth_ready is True


def test_reemitted_token_notifies_store_subscribers_once():
    provider = FakeIdentityProvider()
    store = SessionStore()
    seen = []
    store.subscribe(seen.append)
    TokenBridge(store).attach(provider)
    for _ in range(10):
        provider.emit("tok-1", {"sub": "u1"})
    assert len(seen) == 1


def test_attach_syncs_current_token():
    provider = FakeIdentityProvider(token="tok-1", claims={"sub": "u1"})
    store = SessionStore()
    TokenBridge(store).attach(provider)
    assert store.token == "tok-1"


def test_provider_logout_does_not_touch_store():
    provider = FakeIdentityProvider(token="tok-1", claims={"sub": "u1"})
    store = SessionStore()
    TokenBridge(store).attach(provider)
    provider.log_out()
    assert store.token == "tok-1"


def test_detach_stops_forwarding():
    provider = FakeIdentityProvider()
    store = SessionStore()
    bridge = TokenBridge(store)
    bridge.attach(provider)
    bridge.detach()
    provider.emit("tok-1", {"sub": "u1"})
    assert store.token is None
