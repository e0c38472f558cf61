from chatwidget.models.chat import UserDetails
from chatwidget.services.session_store import (
    MemoryStorage,
    SessionStore,
    SupabaseStorage,
    USER_DETAILS_TTL_MS,
    storage_key,
)

NOW = 1_700_000_000_000


class Clock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


def make_store(now=NOW):
    storage = MemoryStorage()
    return SessionStore(storage, clock=Clock(now)), storage


def test_round_trip():
    store, storage = make_store()
    store.save("bot-1", UserDetails(name="Ann", phone="555-0101", timestamp=NOW))

    assert storage.get_item("chatbot_user_bot-1") is not None
    loaded = store.load("bot-1")
    assert loaded == UserDetails(name="Ann", phone="555-0101", timestamp=NOW)


def test_scoped_per_chatbot():
    store, _ = make_store()
    store.save("bot-1", UserDetails(name="Ann", phone="555-0101", timestamp=NOW))
    assert store.load("bot-2") is None


def test_exactly_24_hours_is_still_valid():
    store, _ = make_store(NOW + USER_DETAILS_TTL_MS)
    store.save("bot-1", UserDetails(name="Ann", phone="555-0101", timestamp=NOW))
    assert store.load("bot-1") is not None


def test_expired_entry_is_removed():
    store, storage = make_store(NOW + USER_DETAILS_TTL_MS + 1)
    store.save("bot-1", UserDetails(name="Ann", phone="555-0101", timestamp=NOW))

    assert store.load("bot-1") is None
    assert storage.get_item(storage_key("bot-1")) is None


def test_corrupt_entry_is_removed():
    store, storage = make_store()
    storage.set_item(storage_key("bot-1"), "{not json")

    assert store.load("bot-1") is None
    assert storage.get_item(storage_key("bot-1")) is None


def test_entry_missing_fields_is_removed():
    store, storage = make_store()
    storage.set_item(storage_key("bot-1"), '{"name": "Ann"}')
    assert store.load("bot-1") is None
    assert storage.get_item(storage_key("bot-1")) is None


def test_unreadable_storage_returns_none():
    class Broken(MemoryStorage):
        def get_item(self, key):
            raise RuntimeError("storage unavailable")

    store = SessionStore(Broken(), clock=Clock())
    assert store.load("bot-1") is None


def test_clear():
    store, _ = make_store()
    store.save("bot-1", UserDetails(name="Ann", phone="555-0101", timestamp=NOW))
    store.clear("bot-1")
    assert store.load("bot-1") is None


class UndeletableStorage(MemoryStorage):
    def remove_item(self, key):
        raise RuntimeError("supabase unavailable")


def test_corrupt_entry_with_failing_delete_returns_none():
    storage = UndeletableStorage()
    storage.set_item(storage_key("bot-1"), "{not json")
    assert SessionStore(storage, clock=Clock()).load("bot-1") is None


def test_expired_entry_with_failing_delete_returns_none():
    storage = UndeletableStorage()
    store = SessionStore(storage, clock=Clock(USER_DETAILS_TTL_MS + 1))
    store.save("bot-1", UserDetails(name="Ann", phone="555-0101", timestamp=0))
    assert store.load("bot-1") is None


class FakeQuery:
    """Minimal chainable stand-in for the supabase query builder"""

    def __init__(self, table, log):
        self.table_name = table
        self.log = log
        self.rows = []

    def __getattr__(self, name):
        def call(*args, **kwargs):
            self.log.append((name, args, kwargs))
            return self
        return call

    def execute(self):
        class Result:
            data = self.rows
        return Result()


class FakeSupabase:
    def __init__(self):
        self.log = []
        self.rows = []

    def table(self, name):
        self.log.append(("table", (name,), {}))
        query = FakeQuery(name, self.log)
        query.rows = self.rows
        return query


def test_supabase_storage_queries_are_namespaced():
    client = FakeSupabase()
    storage = SupabaseStorage(client, namespace="browser-1")

    storage.set_item("chatbot_user_bot-1", "{}")
    assert ("table", ("widget_session_storage",), {}) in client.log
    upsert = next(entry for entry in client.log if entry[0] == "upsert")
    assert upsert[1][0] == {"namespace": "browser-1", "storage_key": "chatbot_user_bot-1", "value": "{}"}
    assert upsert[2] == {"on_conflict": "namespace,storage_key"}

    client.rows = [{"value": "stored"}]
    assert storage.get_item("chatbot_user_bot-1") == "stored"
    client.rows = []
    assert storage.get_item("chatbot_user_bot-1") is None
