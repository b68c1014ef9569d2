import os
from typing import Optional
from fastapi import Request
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from config.config import STORAGE_BACKEND, STORAGE_PATH, MONGODB_URI, DATABASE_NAME


def get_store(request: Request):
    """Dependency to get the roster store from app state"""
    return request.app.state.store


class Storage:
    """Key-value blob store the roster store snapshots its collections into."""

    def load(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def save(self, key: str, blob: str) -> None:
        raise NotImplementedError


class MemoryStorage(Storage):
    def __init__(self, initial=None):
        self.blobs = dict(initial or {})

    def load(self, key):
        return self.blobs.get(key)

    def save(self, key, blob):
        self.blobs[key] = blob


class JsonFileStorage(Storage):
    """One ``<key>.json`` file per key inside ``directory``."""

    def __init__(self, directory: str):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, key):
        return os.path.join(self.directory, f"{key}.json")

    def load(self, key):
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def save(self, key, blob):
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(blob)
        os.replace(tmp_path, path)


class MongoStorage(Storage):
    """One document per key: ``{"_id": key, "blob": "<json>"}``."""

    def __init__(self, collection):
        self.collection = collection

    @classmethod
    def connect(cls, uri: str = MONGODB_URI, database_name: str = DATABASE_NAME, collection_name: str = "snapshots"):
        client = MongoClient(uri, serverSelectionTimeoutMS=5000)
        print(f"Connected to MongoDB database '{database_name}'")
        return cls(client[database_name][collection_name])

    def check_connection(self):
        try:
            self.collection.database.client.admin.command("ping")
            print("MongoDB ping successful")
            return True
        except PyMongoError as e:
            print(f"MongoDB ping failed: {e}")
            print("  Continuing - snapshots will fail to save until the server is reachable")
            return False

    def load(self, key):
        document = self.collection.find_one({"_id": key})
        if document:
            return document.get("blob")
        return None

    def save(self, key, blob):
        self.collection.replace_one({"_id": key}, {"_id": key, "blob": blob}, upsert=True)


def build_storage(backend: str = STORAGE_BACKEND) -> Storage:
    if backend == "memory":
        return MemoryStorage()
    if backend == "file":
        return JsonFileStorage(STORAGE_PATH)
    if backend == "mongo":
        storage = MongoStorage.connect()
        storage.check_connection()
        return storage
    raise ValueError(f"Unknown STORAGE_BACKEND '{backend}'")
