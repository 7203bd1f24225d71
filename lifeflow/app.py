"""
LifeFlow — Application Controller
==================================
Wires the database, statistics, heuristics and network together and
shapes their output for the presentation layers (REST API, Streamlit
dashboard, CLI).

A LifeFlowApp is constructed explicitly and handed to whoever needs it;
there is no module-level instance.
"""

import random
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from lifeflow.ai import LifeFlowAI
from lifeflow.analytics import summarize
from lifeflow.config import (
    RECENT_REGISTRATION_DAYS,
    HEADLINE_DONOR_BASE,
    HEADLINE_DONOR_MULTIPLIER,
    HEADLINE_LIVES_BASE,
    HEADLINE_LIVES_MULTIPLIER,
    DEMO_PREDICTION_TYPES,
    DEMO_ELIGIBILITY_CASES,
)
from lifeflow.database import LifeFlowDatabase
from lifeflow.models import DonorStatistics, Forecast, MatchResult, EligibilityResult, RegistrationResult
from lifeflow.network import LifeFlowNetwork
from lifeflow.storage import KeyValueStorage


class LifeFlowApp:
    """Application context shared by every presentation layer."""

    def __init__(self,
                 database: Optional[LifeFlowDatabase] = None,
                 ai: Optional[LifeFlowAI] = None,
                 network: Optional[LifeFlowNetwork] = None,
                 storage: Optional[KeyValueStorage] = None,
                 rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.rng = rng or random.Random()
        self.clock = clock or datetime.now
        self.database = database or LifeFlowDatabase(storage=storage, rng=self.rng, clock=self.clock)
        self.ai = ai or LifeFlowAI(self.database, rng=self.rng, clock=self.clock)
        self.network = network or LifeFlowNetwork()

    # ── Dashboard ──

    def get_statistics(self) -> DonorStatistics:
        return summarize(self.database.read_donors())

    def get_dashboard(self) -> Dict:
        """Statistics plus recent-registration and active-donor counts."""
        donors = self.database.read_donors()
        cutoff = self.clock() - timedelta(days=RECENT_REGISTRATION_DAYS)

        this_month = 0
        for donor in donors:
            try:
                if datetime.fromisoformat(donor.registration_date) > cutoff:
                    this_month += 1
            except (TypeError, ValueError):
                continue

        return {
            **self.get_statistics().to_dict(),
            "thisMonth": this_month,
            "activeDonors": sum(1 for d in donors if d.status == "active"),
        }

    def get_inventory_display(self) -> List[Dict]:
        """Units per blood type with a bar width relative to the best-stocked type."""
        inventory = self.database.get_inventory()
        max_units = max(inventory.values(), default=0)

        return [
            {
                "bloodType": bt,
                "units": units,
                "percentage": (units / max_units) * 100 if max_units else 0,
            }
            for bt, units in inventory.items()
        ]

    def get_headline_counters(self) -> Dict[str, int]:
        count = len(self.database.read_donors())
        return {
            "totalDonors": count * HEADLINE_DONOR_MULTIPLIER + HEADLINE_DONOR_BASE,
            "livesSaved": count * HEADLINE_LIVES_MULTIPLIER + HEADLINE_LIVES_BASE,
        }

    # ── Registration ──

    def register_donor(self, form: Dict) -> RegistrationResult:
        """
        Check eligibility and, if it passes, create the donor.

        Ineligible applicants are not stored; the message lists every
        failed rule.
        """
        eligibility = self.ai.check_eligibility(
            int(form.get("age", 0)),
            float(form.get("weight", 0)),
            form.get("last_donation", ""),
            bool(form.get("has_conditions", False)),
        )

        if not eligibility.eligible:
            return RegistrationResult(
                success=False,
                message=f"Registration failed: {', '.join(eligibility.reasons)}",
                eligibility=eligibility,
            )

        donor = self.database.create_donor(form)
        return RegistrationResult(
            success=True,
            message=(
                f"Registration successful! Welcome to LifeFlow, {donor.name}. "
                f"Your donor ID is {donor.id[:8]}."
            ),
            eligibility=eligibility,
            donor=donor,
        )

    # ── Demos ──

    def demo_matching(self) -> List[MatchResult]:
        return self.ai.smart_matching("O+", "New York", "urgent")[:3]

    def demo_prediction(self) -> Forecast:
        return self.ai.predict_demand(self.rng.choice(DEMO_PREDICTION_TYPES), 7)

    def demo_eligibility(self) -> Tuple[Dict, EligibilityResult]:
        case = self.rng.choice(DEMO_ELIGIBILITY_CASES)
        return case, self.ai.check_eligibility(case["age"], case["weight"], case["last_donation"])
