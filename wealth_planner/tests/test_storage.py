import json

from wealth_planner.core.storage import (
    GUEST_NAMESPACE,
    JsonFileStorage,
    MemoryStorage,
    storage_namespace,
)
from wealth_planner.schemas.scenario import Identity


def test_namespace_is_shared_for_guests_and_per_identity_otherwise():
    assert storage_namespace(None) == GUEST_NAMESPACE
    assert storage_namespace(Identity(id="u1", email="a@b.c")) == "scenarios_a@b.c"
    assert storage_namespace(Identity(id="u1")) == "scenarios_u1"


def test_memory_storage_round_trip():
    storage = MemoryStorage()

    assert storage.get("missing") is None
    storage.set("key", "value")
    assert storage.get("key") == "value"


def test_json_file_storage_keeps_namespaces_apart(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    storage = JsonFileStorage(str(path))

    storage.set("scenarios_guest", "[]")
    storage.set("scenarios_a@b.c", '[{"id": "1"}]')

    reopened = JsonFileStorage(str(path))
    assert reopened.get("scenarios_guest") == "[]"
    assert reopened.get("scenarios_a@b.c") == '[{"id": "1"}]'
    assert not (tmp_path / "nested" / "storage.json.tmp").exists()
    with path.open("r", encoding="utf-8") as handle:
        assert set(json.load(handle)) == {"scenarios_guest", "scenarios_a@b.c"}


def test_json_file_storage_treats_corrupt_file_as_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")
    storage = JsonFileStorage(str(path))

    assert storage.get("scenarios_guest") is None
    storage.set("scenarios_guest", "[]")
    assert storage.get("scenarios_guest") == "[]"


def test_json_file_storage_treats_non_utf8_file_as_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_bytes(b'{"scenarios_guest": "\xff\xfe"}')
    storage = JsonFileStorage(str(path))

    assert storage.get("scenarios_guest") is None
    storage.set("scenarios_guest", "[]")
    assert storage.get("scenarios_guest") == "[]"
