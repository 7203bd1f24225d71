"""
LifeFlow — Donor Database
==========================
In-memory collections of donors, blood requests and inventory, mirrored
to a key-value storage backend after every write.

Missing or malformed stored data is never fatal: it is reported and the
collection falls back to its default (empty, or freshly seeded).
"""

import json
import random
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, List, Optional

from lifeflow.config import (
    BLOOD_TYPES,
    STORAGE_KEYS,
    INVENTORY_SEED_RANGES,
    SAMPLE_DONORS,
    DONOR_ID_PREFIX,
    REQUEST_ID_PREFIX,
)
from lifeflow.models import Donor, BloodRequest
from lifeflow.storage import KeyValueStorage, MemoryStorage


def validate_blood_type(blood_type: str) -> str:
    if blood_type not in BLOOD_TYPES:
        raise ValueError(
            f"Unknown blood type {blood_type!r}; expected one of {', '.join(BLOOD_TYPES)}"
        )
    return blood_type


class LifeFlowDatabase:
    """
    Donor repository backed by a KeyValueStorage.

    Args:
        storage: persistence backend (defaults to a fresh MemoryStorage)
        rng:     random source used for inventory seeding
        clock:   callable returning the current datetime
    """

    def __init__(self,
                 storage: Optional[KeyValueStorage] = None,
                 rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.storage = storage if storage is not None else MemoryStorage()
        self.rng = rng or random.Random()
        self.clock = clock or datetime.now

        self.donors: List[Donor] = self._load_donors()
        self.requests: List[BloodRequest] = self._load_requests()

        inventory = self._load_inventory()
        if inventory is None:
            self.inventory = self.initialize_inventory()
            self.save()
        else:
            self.inventory = inventory

        self.initialize_sample_data()

    # ── Seeding ──

    def initialize_inventory(self) -> Dict[str, int]:
        """Random starting stock for every blood type."""
        return {
            bt: self.rng.randint(low, high)
            for bt, (low, high) in INVENTORY_SEED_RANGES.items()
        }

    def initialize_sample_data(self) -> None:
        """Seed the example donors when the collection is empty."""
        if self.donors:
            return
        for donor in SAMPLE_DONORS:
            self.create_donor(donor)

    # ── Donor CRUD ──

    def create_donor(self, donor_data: dict) -> Donor:
        """Register a new donor with a fresh id, timestamp and active status."""
        fields_ = {k: v for k, v in donor_data.items() if k in Donor.field_names()}
        fields_.pop("id", None)
        validate_blood_type(fields_.get("blood_type", ""))

        donor = Donor(
            id=self._generate_id(DONOR_ID_PREFIX, {d.id for d in self.donors}),
            **{
                **fields_,
                "registration_date": self.clock().isoformat(),
                "status": "active",
            },
        )
        self.donors.append(donor)
        self.save()
        return donor

    def read_donors(self) -> List[Donor]:
        """Snapshot of the donor collection."""
        return list(self.donors)

    def get_donor(self, donor_id: str) -> Optional[Donor]:
        for donor in self.donors:
            if donor.id == donor_id:
                return donor
        return None

    def update_donor(self, donor_id: str, updates: dict) -> Optional[Donor]:
        """
        Shallow-merge `updates` into the donor with this id.

        Returns the updated donor, or None (and changes nothing) if no donor
        has that id. The id itself cannot be changed.
        """
        for index, donor in enumerate(self.donors):
            if donor.id != donor_id:
                continue

            known = Donor.field_names() - {"id"}
            ignored = sorted(set(updates) - known)
            if ignored:
                print(f"  ⚠ Ignoring unknown donor fields: {', '.join(ignored)}")

            changes = {k: v for k, v in updates.items() if k in known}
            if "blood_type" in changes:
                validate_blood_type(changes["blood_type"])

            self.donors[index] = replace(donor, **changes)
            self.save()
            return self.donors[index]

        return None

    def delete_donor(self, donor_id: str) -> None:
        """Remove the donor with this id; silently does nothing if absent."""
        self.donors = [d for d in self.donors if d.id != donor_id]
        self.save()

    # ── Blood requests ──

    def create_request(self, request_data: dict) -> BloodRequest:
        validate_blood_type(request_data.get("blood_type", ""))
        data = {
            k: v for k, v in request_data.items()
            if k in BloodRequest.field_names() and k not in ("id", "created_at", "status")
        }
        blood_request = BloodRequest(
            id=self._generate_id(REQUEST_ID_PREFIX, {r.id for r in self.requests}),
            created_at=self.clock().isoformat(),
            **data,
        )
        self.requests.append(blood_request)
        self.save()
        return blood_request

    def read_requests(self) -> List[BloodRequest]:
        return list(self.requests)

    # ── Inventory ──

    def update_inventory(self, blood_type: str, units: int) -> None:
        """Set the absolute unit count for one blood type."""
        validate_blood_type(blood_type)
        if units < 0:
            raise ValueError(f"Inventory units cannot be negative (got {units})")
        self.inventory[blood_type] = int(units)
        self.save()

    def get_inventory(self) -> Dict[str, int]:
        return dict(self.inventory)

    # ── Storage ──

    def save(self) -> None:
        """Write all three collections to storage."""
        self.storage.set(STORAGE_KEYS["donors"], json.dumps([d.to_dict() for d in self.donors]))
        self.storage.set(STORAGE_KEYS["requests"], json.dumps([r.to_dict() for r in self.requests]))
        self.storage.set(STORAGE_KEYS["inventory"], json.dumps(self.inventory))

    def load(self, key: str):
        """Parsed JSON stored under `key`, or None if missing or unreadable."""
        try:
            data = self.storage.get(key)
            return json.loads(data) if data else None
        except (ValueError, TypeError) as e:
            print(f"  ✗ Error loading {key} from storage: {e}")
            return None

    def _load_donors(self) -> List[Donor]:
        return [Donor.from_dict(row) for row in self._load_rows(STORAGE_KEYS["donors"])]

    def _load_requests(self) -> List[BloodRequest]:
        return [BloodRequest.from_dict(row) for row in self._load_rows(STORAGE_KEYS["requests"])]

    def _load_rows(self, key: str) -> List[dict]:
        """
        Stored list of records. Entries without an id, with an unknown
        blood type, or repeating an earlier id are skipped.
        """
        data = self.load(key)
        if data is None:
            return []
        if not isinstance(data, list):
            print(f"  ✗ Expected a list under {key}, found {type(data).__name__}")
            return []

        rows, seen = [], set()
        for row in data:
            if not isinstance(row, dict) or not row.get("id"):
                continue
            if row.get("blood_type") not in BLOOD_TYPES or row["id"] in seen:
                continue
            seen.add(row["id"])
            rows.append(row)

        if len(rows) < len(data):
            print(f"  ⚠ Skipped {len(data) - len(rows)} malformed records in {key}")
        return rows

    def _load_inventory(self) -> Optional[Dict[str, int]]:
        data = self.load(STORAGE_KEYS["inventory"])
        if data is None:
            return None
        if not isinstance(data, dict):
            print(f"  ✗ Expected a mapping under {STORAGE_KEYS['inventory']}")
            return None
        try:
            # Every blood type must always have an entry
            return {bt: int(data.get(bt, 0)) for bt in BLOOD_TYPES}
        except (TypeError, ValueError) as e:
            print(f"  ✗ Error loading {STORAGE_KEYS['inventory']} from storage: {e}")
            return None

    @staticmethod
    def _generate_id(prefix: str, existing: set) -> str:
        while True:
            new_id = f"{prefix}-{uuid.uuid4().hex[:8].upper()}"
            if new_id not in existing:
                return new_id
