"""Tests for JSON snapshot persistence and store loading."""

import json

import pytest

from health_system_api.app.core.seed import DEMO_CLIENTS, DEMO_PROGRAMS, seed_demo_data
from health_system_api.app.core.storage import STORE_NAME, SnapshotError, SnapshotStorage
from health_system_api.app.core.store import EnrollmentStatus, HealthSystemStore


@pytest.fixture
def snapshot_path(tmp_path):
    return tmp_path / "data" / "snapshot.json"


def test_mutations_are_saved_and_restored(snapshot_path, john_data, hiv_program_data):
    store = HealthSystemStore(storage=SnapshotStorage(str(snapshot_path)))
    client = store.add_client(john_data)
    program = store.add_program(hiv_program_data)
    enrollment = store.enroll_client_in_program(client.id, program.id, "Initial screening")
    store.cancel_enrollment(enrollment.id)

    restored = HealthSystemStore(storage=SnapshotStorage(str(snapshot_path)))
    restored.load()

    assert restored.clients == store.clients
    assert restored.programs == store.programs
    assert restored.enrollments == store.enrollments
    assert restored.get_enrollment_by_id(enrollment.id).status is EnrollmentStatus.WITHDRAWN


def test_snapshot_document_layout(snapshot_path, john_data):
    store = HealthSystemStore(storage=SnapshotStorage(str(snapshot_path)))
    client = store.add_client(john_data)

    document = json.loads(snapshot_path.read_text(encoding="utf-8"))

    assert list(document) == [STORE_NAME]
    state = document[STORE_NAME]
    assert state["programs"] == [] and state["enrollments"] == []
    saved = state["clients"][0]
    assert saved["id"] == client.id
    assert saved["date_of_birth"] == "1985-05-15"
    assert saved["gender"] == "male"
    assert saved["created_at"] == client.created_at.isoformat()


def test_delete_is_persisted(snapshot_path, john_data):
    store = HealthSystemStore(storage=SnapshotStorage(str(snapshot_path)))
    client = store.add_client(john_data)
    store.delete_client(client.id)

    restored = HealthSystemStore(storage=SnapshotStorage(str(snapshot_path)))
    restored.load()

    assert restored.is_empty()


def test_missing_snapshot_loads_empty_store(snapshot_path):
    store = HealthSystemStore(storage=SnapshotStorage(str(snapshot_path)))
    store.load()

    assert store.is_empty()
    assert not snapshot_path.exists()


def test_malformed_snapshot_raises(snapshot_path):
    snapshot_path.parent.mkdir(parents=True)
    snapshot_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SnapshotError):
        SnapshotStorage(str(snapshot_path)).load()


def test_snapshot_without_store_key_raises(snapshot_path):
    snapshot_path.parent.mkdir(parents=True)
    snapshot_path.write_text(json.dumps({"other": {}}), encoding="utf-8")

    with pytest.raises(SnapshotError):
        SnapshotStorage(str(snapshot_path)).load()


def test_no_temporary_files_left_behind(snapshot_path, john_data):
    store = HealthSystemStore(storage=SnapshotStorage(str(snapshot_path)))
    store.add_client(john_data)
    store.add_client(john_data)

    assert [p.name for p in snapshot_path.parent.iterdir()] == ["snapshot.json"]


def test_seed_demo_data_only_fills_empty_store(store, john_data):
    assert seed_demo_data(store) is True
    assert [p.name for p in store.programs] == [p["name"] for p in DEMO_PROGRAMS]
    assert len(store.clients) == len(DEMO_CLIENTS)

    assert seed_demo_data(store) is False
    assert len(store.clients) == len(DEMO_CLIENTS)


class FailingStorage(SnapshotStorage):
    """Snapshot storage whose writes can be switched to fail."""

    def __init__(self, path):
        super().__init__(path)
        self.broken = False

    def save(self, state):
        if self.broken:
            raise OSError("disk full")
        super().save(state)


class TestFailedWrites:
    @pytest.fixture
    def storage(self, snapshot_path):
        return FailingStorage(str(snapshot_path))

    @pytest.fixture
    def populated(self, storage, john_data, hiv_program_data):
        store = HealthSystemStore(storage=storage)
        client = store.add_client(john_data)
        program = store.add_program(hiv_program_data)
        enrollment = store.enroll_client_in_program(client.id, program.id)
        storage.broken = True
        return store, client, program, enrollment

    def test_failed_add_leaves_store_unchanged(self, storage, john_data):
        store = HealthSystemStore(storage=storage)
        storage.broken = True

        with pytest.raises(OSError):
            store.add_client(john_data)
        with pytest.raises(OSError):
            store.add_client(john_data)

        assert store.is_empty()

    def test_failed_update_keeps_previous_values(self, populated):
        store, client, program, enrollment = populated

        with pytest.raises(OSError):
            store.update_client(client.id, {"first_name": "Johnny"})
        with pytest.raises(OSError):
            store.update_program(program.id, {"name": "Renamed"})
        with pytest.raises(OSError):
            store.cancel_enrollment(enrollment.id)

        assert store.get_client_by_id(client.id).first_name == "John"
        assert store.get_program_by_id(program.id).name == program.name
        assert store.get_enrollment_by_id(enrollment.id).status is EnrollmentStatus.ACTIVE

    def test_failed_delete_keeps_entity_and_enrollments(self, populated):
        store, client, program, enrollment = populated

        with pytest.raises(OSError):
            store.delete_client(client.id)
        with pytest.raises(OSError):
            store.delete_program(program.id)

        assert store.get_client_by_id(client.id) == client
        assert store.get_program_by_id(program.id) == program
        assert store.get_enrollment_by_id(enrollment.id) == enrollment

    def test_failed_enroll_creates_nothing(self, populated, storage, jane_data):
        store, client, program, enrollment = populated
        storage.broken = False
        jane = store.add_client(jane_data)
        storage.broken = True

        with pytest.raises(OSError):
            store.enroll_client_in_program(jane.id, program.id)

        assert store.enrollments == [enrollment]

    def test_snapshot_matches_memory_after_failure(self, populated, snapshot_path):
        store, client, program, enrollment = populated

        with pytest.raises(OSError):
            store.delete_client(client.id)

        restored = HealthSystemStore(storage=SnapshotStorage(str(snapshot_path)))
        restored.load()
        assert restored.clients == store.clients
        assert restored.enrollments == store.enrollments


@pytest.mark.parametrize(
    "state",
    [
        {"clients": [{"id": "c1", "last_name": "Doe"}]},
        {"programs": [{"id": "p1", "name": "HIV"}]},
        {"enrollments": [{"id": "e1", "client_id": "c1", "program_id": "p1", "status": "paused"}]},
        {"clients": ["not an object"]},
    ],
)
def test_snapshot_with_invalid_entity_raises(snapshot_path, state):
    snapshot_path.parent.mkdir(parents=True)
    snapshot_path.write_text(json.dumps({STORE_NAME: state}), encoding="utf-8")
    store = HealthSystemStore(storage=SnapshotStorage(str(snapshot_path)))

    with pytest.raises(SnapshotError):
        store.load()


def test_snapshot_with_unknown_gender_raises(snapshot_path, john_data):
    store = HealthSystemStore(storage=SnapshotStorage(str(snapshot_path)))
    store.add_client(john_data)
    document = json.loads(snapshot_path.read_text(encoding="utf-8"))
    document[STORE_NAME]["clients"][0]["gender"] = "unknown"
    snapshot_path.write_text(json.dumps(document), encoding="utf-8")

    restored = HealthSystemStore(storage=SnapshotStorage(str(snapshot_path)))
    with pytest.raises(SnapshotError):
        restored.load()
    assert restored.is_empty()
