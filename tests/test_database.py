import json

import pytest

from lifeflow.config import BLOOD_TYPES, INVENTORY_SEED_RANGES, STORAGE_KEYS, SAMPLE_DONORS
from lifeflow.database import LifeFlowDatabase
from lifeflow.storage import MemoryStorage, JSONFileStorage
from tests.conftest import FIXED_NOW, fixed_clock


NEW_DONOR = {
    "name": "Ann Lee",
    "email": "ann@example.com",
    "blood_type": "A-",
    "phone": "555-0199",
    "age": 30,
    "weight": 60,
    "city": "Boston",
    "last_donation": "never",
}


class TestInitialization:
    def test_seeds_sample_donors(self, database):
        donors = database.read_donors()
        assert [d.name for d in donors] == [d["name"] for d in SAMPLE_DONORS]

    def test_seeds_inventory_within_ranges(self, database):
        inventory = database.get_inventory()
        assert set(inventory) == set(BLOOD_TYPES)
        for bt, units in inventory.items():
            low, high = INVENTORY_SEED_RANGES[bt]
            assert low <= units <= high

    def test_persists_all_collections(self, database, storage):
        for key in STORAGE_KEYS.values():
            assert key in storage
        assert len(json.loads(storage.get(STORAGE_KEYS["donors"]))) == 5

    def test_reloads_without_reseeding(self, database, storage, rng):
        created = database.create_donor(NEW_DONOR)
        database.update_inventory("O-", 3)

        reloaded = LifeFlowDatabase(storage=storage, rng=rng, clock=fixed_clock)

        assert len(reloaded.read_donors()) == 6
        assert reloaded.get_donor(created.id) == created
        assert reloaded.get_inventory()["O-"] == 3

    def test_malformed_storage_falls_back_to_defaults(self, rng):
        storage = MemoryStorage({
            STORAGE_KEYS["donors"]: "{not json",
            STORAGE_KEYS["requests"]: "42",
            STORAGE_KEYS["inventory"]: "[1, 2]",
        })
        db = LifeFlowDatabase(storage=storage, rng=rng, clock=fixed_clock)

        assert len(db.read_donors()) == 5
        assert db.read_requests() == []
        assert set(db.get_inventory()) == set(BLOOD_TYPES)

    def test_partial_inventory_gets_every_key(self, rng):
        storage = MemoryStorage({STORAGE_KEYS["inventory"]: json.dumps({"O+": 12})})
        db = LifeFlowDatabase(storage=storage, rng=rng, clock=fixed_clock)

        inventory = db.get_inventory()
        assert inventory["O+"] == 12
        assert inventory["AB-"] == 0
        assert len(inventory) == 8

    def test_load_skips_duplicate_ids_and_bad_blood_types(self, rng, capsys):
        donors = [
            {**NEW_DONOR, "id": "DON-1", "name": "First"},
            {**NEW_DONOR, "id": "DON-1", "name": "Second"},
            {**NEW_DONOR, "id": "DON-2", "blood_type": "C+"},
            {**NEW_DONOR, "id": "DON-3", "blood_type": "B-"},
        ]
        storage = MemoryStorage({STORAGE_KEYS["donors"]: json.dumps(donors)})
        db = LifeFlowDatabase(storage=storage, rng=rng, clock=fixed_clock)

        assert [(d.id, d.name) for d in db.read_donors()] == [
            ("DON-1", "First"),
            ("DON-3", NEW_DONOR["name"]),
        ]
        assert "Skipped 2 malformed records" in capsys.readouterr().out

    def test_load_skips_duplicate_requests(self, rng):
        requests = [
            {"id": "REQ-1", "blood_type": "O+", "city": "Boston"},
            {"id": "REQ-1", "blood_type": "A-", "city": "Denver"},
        ]
        storage = MemoryStorage({STORAGE_KEYS["requests"]: json.dumps(requests)})
        db = LifeFlowDatabase(storage=storage, rng=rng, clock=fixed_clock)

        assert [r.city for r in db.read_requests()] == ["Boston"]

    def test_load_missing_key(self, database):
        assert database.load("lifeflow_nothing_here") is None


class TestDonorCrud:
    def test_create_assigns_id_timestamp_and_status(self, database):
        donor = database.create_donor({**NEW_DONOR, "status": "inactive", "id": "mine"})

        assert donor.id.startswith("DON-")
        assert donor.id != "mine"
        assert donor.status == "active"
        assert donor.registration_date == FIXED_NOW.isoformat()
        assert donor in database.read_donors()

    def test_ids_are_unique(self, database):
        for _ in range(20):
            database.create_donor(NEW_DONOR)
        ids = [d.id for d in database.read_donors()]
        assert len(ids) == len(set(ids))

    def test_create_rejects_unknown_blood_type(self, database):
        with pytest.raises(ValueError):
            database.create_donor({**NEW_DONOR, "blood_type": "C+"})
        assert len(database.read_donors()) == 5

    def test_read_returns_snapshot(self, database):
        donors = database.read_donors()
        donors.clear()
        assert len(database.read_donors()) == 5

    def test_update_merges_fields(self, database, storage):
        donor = database.create_donor(NEW_DONOR)
        updated = database.update_donor(donor.id, {"city": "Denver", "weight": 64})

        assert updated.city == "Denver"
        assert updated.weight == 64
        assert updated.name == "Ann Lee"
        assert database.get_donor(donor.id).city == "Denver"
        assert "Denver" in storage.get(STORAGE_KEYS["donors"])

    def test_update_cannot_change_id(self, database):
        donor = database.create_donor(NEW_DONOR)
        updated = database.update_donor(donor.id, {"id": "other", "unknown": 1})
        assert updated.id == donor.id

    def test_update_unknown_id_returns_none(self, database):
        before = database.read_donors()
        assert database.update_donor("DON-MISSING", {"city": "Nowhere"}) is None
        assert database.read_donors() == before

    def test_update_rejects_unknown_blood_type(self, database):
        donor = database.create_donor(NEW_DONOR)
        with pytest.raises(ValueError):
            database.update_donor(donor.id, {"blood_type": "Z"})

    def test_delete(self, database):
        donor = database.create_donor(NEW_DONOR)
        database.delete_donor(donor.id)

        assert database.get_donor(donor.id) is None
        assert len(database.read_donors()) == 5

    def test_delete_unknown_id_is_noop(self, database):
        database.delete_donor("DON-MISSING")
        assert len(database.read_donors()) == 5


class TestInventory:
    def test_update_sets_absolute_units(self, database, storage):
        database.update_inventory("AB+", 7)

        assert database.get_inventory()["AB+"] == 7
        assert json.loads(storage.get(STORAGE_KEYS["inventory"]))["AB+"] == 7

    def test_negative_units_rejected(self, database):
        with pytest.raises(ValueError):
            database.update_inventory("A+", -1)

    def test_unknown_type_rejected(self, database):
        with pytest.raises(ValueError):
            database.update_inventory("Q", 5)

    def test_get_inventory_returns_copy(self, database):
        database.get_inventory()["O+"] = -100
        assert database.get_inventory()["O+"] >= 0


class TestRequests:
    def test_create_request(self, database):
        request = database.create_request({"blood_type": "B-", "city": "Austin", "urgency": "urgent"})

        assert request.id.startswith("REQ-")
        assert request.status == "open"
        assert request.created_at == FIXED_NOW.isoformat()
        assert database.read_requests() == [request]


class TestJSONFileStorage:
    def test_round_trip(self, tmp_path):
        storage = JSONFileStorage(str(tmp_path / "data"))
        assert storage.get("lifeflow_donors") is None

        storage.set("lifeflow_donors", "[]")
        assert storage.get("lifeflow_donors") == "[]"

    def test_backs_a_database(self, tmp_path, rng):
        storage = JSONFileStorage(str(tmp_path))
        LifeFlowDatabase(storage=storage, rng=rng, clock=fixed_clock)

        assert (tmp_path / "lifeflow_donors.json").exists()
        reloaded = LifeFlowDatabase(storage=JSONFileStorage(str(tmp_path)), rng=rng, clock=fixed_clock)
        assert len(reloaded.read_donors()) == 5
