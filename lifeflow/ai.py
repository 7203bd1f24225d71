"""
LifeFlow — Heuristics Engine
=============================
Toy decision support over the donor database:

  - smart_matching      rank compatible donors for a recipient
  - predict_demand      moving-average demand forecast with a seasonal wobble
  - check_eligibility   rule-based donor eligibility

None of this is medical advice or a validated model. Randomness and time
come from the injected `rng` and `clock` so tests can pin them down.
"""

import math
import random
from datetime import datetime
from typing import Callable, List, Optional

from lifeflow.analytics import mean, round_half_up
from lifeflow.config import (
    COMPATIBILITY,
    MATCH_SCORE_WEIGHTS,
    MATCH_LIMIT,
    BASE_DEMAND,
    DEFAULT_BASE_DEMAND,
    HISTORY_DAYS,
    MOVING_AVERAGE_WINDOW,
    DEMAND_NOISE,
    SEASONAL_AMPLITUDE,
    CONFIDENCE_RANGE,
    MIN_DONOR_AGE,
    MAX_DONOR_AGE,
    MIN_DONOR_WEIGHT_KG,
    ELIGIBLE_LAST_DONATION,
    ELIGIBILITY_MESSAGES,
    ELIGIBLE_CONFIDENCE,
    INELIGIBLE_CONFIDENCE,
)
from lifeflow.database import LifeFlowDatabase
from lifeflow.models import Donor, MatchResult, Forecast, EligibilityResult


def can_donate_to(donor_blood_type: str, recipient_blood_type: str) -> bool:
    """True if the donor's type appears in the compatibility table for the recipient."""
    return recipient_blood_type in COMPATIBILITY.get(donor_blood_type, [])


class LifeFlowAI:
    """Matching, forecasting and eligibility heuristics."""

    def __init__(self,
                 database: LifeFlowDatabase,
                 rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.database = database
        self.rng = rng or random.Random()
        self.clock = clock or datetime.now

    # ═══════════════════════════════════════════════════════════════════════
    # MATCHING
    # ═══════════════════════════════════════════════════════════════════════

    def smart_matching(self,
                       recipient_blood_type: str,
                       recipient_city: str,
                       urgency_level: Optional[str] = None) -> List[MatchResult]:
        """
        Rank compatible donors for a recipient and return the top matches.

        Scoring starts at 100 and adds bonuses for a same-city donor, a
        donor who has never given (or last gave a year ago) and an active
        status. `urgency_level` is accepted but not weighted yet.

        Equal scores keep registration order.
        """
        compatible = [
            d for d in self.database.read_donors()
            if can_donate_to(d.blood_type, recipient_blood_type)
        ]

        scored = [
            MatchResult(donor=d, match_score=self._score_donor(d, recipient_city))
            for d in compatible
        ]
        scored.sort(key=lambda m: m.match_score, reverse=True)
        return scored[:MATCH_LIMIT]

    def _score_donor(self, donor: Donor, recipient_city: str) -> int:
        w = MATCH_SCORE_WEIGHTS
        score = w["base"]

        # ── City match ──
        if (donor.city or "").lower() == (recipient_city or "").lower():
            score += w["same_city"]

        # ── Donation recency ──
        if donor.last_donation == "never":
            score += w["never_donated"]
        elif donor.last_donation == "1year":
            score += w["donated_last_year"]

        # ── Status ──
        if donor.status == "active":
            score += w["active"]

        return score

    # ═══════════════════════════════════════════════════════════════════════
    # DEMAND FORECAST
    # ═══════════════════════════════════════════════════════════════════════

    def predict_demand(self, blood_type: str, days_ahead: int = 7) -> Forecast:
        """
        Forecast demand from a 7-day moving average of synthetic history,
        scaled by a seasonal factor derived from the clock.

        History is regenerated on every call, so two calls for the same
        type can disagree. `days_ahead` is reported back but does not
        change the arithmetic.
        """
        history = self.generate_historical_data(blood_type)

        recent = history[-MOVING_AVERAGE_WINDOW:]
        average = mean(recent)

        prediction = round_half_up(average * self._seasonal_factor())
        low, high = CONFIDENCE_RANGE

        return Forecast(
            blood_type=blood_type,
            current_demand=history[-1],
            predicted_demand=prediction,
            trend="increasing" if prediction > average else "decreasing",
            confidence=low + self.rng.random() * (high - low),
            days_ahead=days_ahead,
        )

    def generate_historical_data(self, blood_type: str) -> List[int]:
        """30 days of daily demand: the type's baseline plus uniform noise of ±5."""
        base = BASE_DEMAND.get(blood_type, DEFAULT_BASE_DEMAND)
        return [
            max(0, round_half_up(base + (self.rng.random() - 0.5) * DEMAND_NOISE))
            for _ in range(HISTORY_DAYS)
        ]

    def _seasonal_factor(self) -> float:
        days_since_epoch = self.clock().timestamp() / 86400
        return 1 + math.sin(days_since_epoch) * SEASONAL_AMPLITUDE

    # ═══════════════════════════════════════════════════════════════════════
    # ELIGIBILITY
    # ═══════════════════════════════════════════════════════════════════════

    def check_eligibility(self,
                          age: int,
                          weight: float,
                          last_donation: str,
                          has_conditions: bool = False) -> EligibilityResult:
        """
        Apply every eligibility rule and collect one reason per failure.

        Only the "3months" and "never" recency buckets pass the waiting
        period rule; "6months" and "1year" are rejected as well.
        """
        reasons: List[str] = []

        if age < MIN_DONOR_AGE or age > MAX_DONOR_AGE:
            reasons.append(ELIGIBILITY_MESSAGES["age"])

        if weight < MIN_DONOR_WEIGHT_KG:
            reasons.append(ELIGIBILITY_MESSAGES["weight"])

        if last_donation not in ELIGIBLE_LAST_DONATION:
            reasons.append(ELIGIBILITY_MESSAGES["last_donation"])

        if has_conditions:
            reasons.append(ELIGIBILITY_MESSAGES["conditions"])

        if reasons:
            return EligibilityResult(
                eligible=False, reasons=reasons, confidence=INELIGIBLE_CONFIDENCE
            )
        return EligibilityResult(
            eligible=True,
            reasons=[ELIGIBILITY_MESSAGES["eligible"]],
            confidence=ELIGIBLE_CONFIDENCE,
        )
