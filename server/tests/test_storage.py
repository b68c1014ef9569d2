"""
Tests for the storage backends the roster store snapshots into
"""
import pytest

from database.DB import MemoryStorage, JsonFileStorage, MongoStorage, build_storage
from database.RosterStore import RosterStore, USERS_KEY
from models.models import RSVPStatus


class FakeCollection:
    """Just enough of a pymongo collection for MongoStorage"""

    def __init__(self):
        self.documents = {}

    def find_one(self, query):
        return self.documents.get(query["_id"])

    def replace_one(self, query, document, upsert=False):
        assert upsert
        self.documents[query["_id"]] = document


def test_memory_storage():
    storage = MemoryStorage()
    assert storage.load("missing") is None
    storage.save("key", "[]")
    assert storage.load("key") == "[]"


def test_json_file_storage(tmp_path):
    """Each key becomes one JSON file and survives a new store instance"""
    storage = JsonFileStorage(str(tmp_path / "data"))
    store = RosterStore(storage)
    store.submit_rsvp("u2", "c1", RSVPStatus.ATTENDING)

    assert (tmp_path / "data" / f"{USERS_KEY}.json").exists()
    reloaded = RosterStore(JsonFileStorage(str(tmp_path / "data")))
    assert reloaded.get_competition("c1").rsvp_for("u2").status == RSVPStatus.ATTENDING


def test_mongo_storage_round_trip():
    collection = FakeCollection()
    storage = MongoStorage(collection)
    assert storage.load(USERS_KEY) is None

    store = RosterStore(storage)
    store.register_user("Rita Lopes", "rita@swimref.pt")

    assert collection.documents[USERS_KEY]["_id"] == USERS_KEY
    reloaded = RosterStore(MongoStorage(collection))
    assert reloaded.find_user_by_email("rita@swimref.pt") is not None


def test_build_storage():
    assert isinstance(build_storage("memory"), MemoryStorage)
    with pytest.raises(ValueError):
        build_storage("redis")
