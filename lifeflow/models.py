"""
LifeFlow — Data Models
=======================
Dataclass definitions for the records flowing through the system.
Serialised to JSON for storage and for API responses.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, asdict
from typing import Optional


@dataclass
class Donor:
    """A registered blood donor."""
    id: str
    name: str = ""
    email: str = ""
    blood_type: str = ""
    phone: str = ""
    age: int = 0
    weight: float = 0.0
    city: str = ""
    last_donation: str = "never"     # "never", "3months", "6months", "1year"
    registration_date: str = ""      # ISO timestamp
    status: str = "active"

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    @classmethod
    def from_dict(cls, data: dict) -> "Donor":
        """Build a Donor from stored JSON, ignoring keys it does not know."""
        known = cls.field_names()
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class BloodRequest:
    """A recipient's request for blood."""
    id: str
    blood_type: str = ""
    city: str = ""
    urgency: str = "normal"
    units: int = 1
    created_at: str = ""
    status: str = "open"

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    @classmethod
    def from_dict(cls, data: dict) -> "BloodRequest":
        known = cls.field_names()
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class MatchResult:
    """A donor ranked against a recipient."""
    donor: Donor
    match_score: int = 100

    def to_dict(self) -> dict:
        return {**self.donor.to_dict(), "match_score": self.match_score}


@dataclass
class Forecast:
    """Short-term demand forecast for one blood type."""
    blood_type: str
    current_demand: int
    predicted_demand: int
    trend: str                   # "increasing" or "decreasing"
    confidence: float
    days_ahead: int = 7

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class EligibilityResult:
    eligible: bool
    reasons: list[str] = field(default_factory=list)
    confidence: int = 100

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class DonorStatistics:
    """Descriptive statistics over the current donor set."""
    total_donors: int = 0
    most_common_blood_type: Optional[str] = None
    average_age: int = 0
    median_age: float = 0
    age_std_dev: str = "0.00"

    def to_dict(self) -> dict:
        return {
            "totalDonors": self.total_donors,
            "mostCommonBloodType": self.most_common_blood_type,
            "averageAge": self.average_age,
            "medianAge": self.median_age,
            "ageStdDev": self.age_std_dev,
        }


@dataclass
class RegistrationResult:
    """Outcome of a registration attempt through the application controller."""
    success: bool
    message: str
    eligibility: EligibilityResult
    donor: Optional[Donor] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "eligibility": self.eligibility.to_dict(),
            "donor": self.donor.to_dict() if self.donor else None,
        }
