import math
from datetime import datetime

import pytest

from lifeflow.ai import LifeFlowAI, can_donate_to
from lifeflow.config import BASE_DEMAND, COMPATIBILITY
from tests.conftest import fixed_clock


class MidpointRandom:
    """Random source that always lands in the middle of its range."""

    def random(self):
        return 0.5

    def randint(self, a, b):
        return a

    def choice(self, seq):
        return seq[0]


EXTRA_DONOR = {
    "email": "x@example.com", "phone": "555-0000",
    "age": 30, "weight": 70, "city": "Seattle", "last_donation": "3months",
}


class TestCompatibility:
    def test_universal_donor(self):
        assert all(can_donate_to("O-", bt) for bt in COMPATIBILITY)

    def test_ab_positive_only_gives_to_itself(self):
        assert [bt for bt in COMPATIBILITY if can_donate_to("AB+", bt)] == ["AB+"]

    def test_unknown_donor_type(self):
        assert not can_donate_to("X", "O+")


class TestSmartMatching:
    def test_only_compatible_donors(self, ai):
        matches = ai.smart_matching("O+", "New York", "urgent")

        assert {m.donor.blood_type for m in matches} == {"O+", "O-"}
        for m in matches:
            assert "O+" in COMPATIBILITY[m.donor.blood_type]

    def test_scores_and_order(self, ai):
        matches = ai.smart_matching("O+", "New York", "urgent")

        assert [(m.donor.name, m.match_score) for m in matches] == [
            ("John Doe", 165),     # same city + active
            ("David Brown", 115),  # active
        ]
        assert matches[0].match_score > matches[1].match_score

    def test_city_match_is_case_insensitive(self, ai):
        matches = ai.smart_matching("O+", "new YORK", None)
        assert matches[0].match_score == 165

    def test_recency_bonus_and_tie_order(self, ai):
        matches = ai.smart_matching("AB+", "Houston", "normal")

        assert [(m.donor.name, m.match_score) for m in matches] == [
            ("Sarah Williams", 185),  # same city + never donated + active
            ("Jane Smith", 125),      # donated a year ago + active
            ("John Doe", 115),
            ("Mike Johnson", 115),
            ("David Brown", 115),
        ]

    def test_inactive_donor_loses_bonus(self, ai, database):
        john = database.read_donors()[0]
        database.update_donor(john.id, {"status": "paused"})

        matches = ai.smart_matching("O+", "New York", "urgent")
        assert matches[0].match_score == 150

    def test_at_most_five_results(self, ai, database):
        for i in range(4):
            database.create_donor({**EXTRA_DONOR, "name": f"Extra {i}", "blood_type": "AB-"})

        matches = ai.smart_matching("AB+", "Seattle", "urgent")
        assert len(matches) == 5
        scores = [m.match_score for m in matches]
        assert scores == sorted(scores, reverse=True)

    def test_no_compatible_donors(self, ai, database):
        universal = [d for d in database.read_donors() if d.blood_type == "O-"]
        for donor in universal:
            database.delete_donor(donor.id)

        assert ai.smart_matching("A-", "Anywhere", "urgent") == []

    def test_urgency_does_not_change_scores(self, ai):
        urgent = ai.smart_matching("AB+", "Chicago", "urgent")
        relaxed = ai.smart_matching("AB+", "Chicago", "low")
        assert [m.to_dict() for m in urgent] == [m.to_dict() for m in relaxed]

    def test_match_result_dict_includes_donor_fields(self, ai):
        result = ai.smart_matching("O+", "New York", "urgent")[0].to_dict()
        assert result["name"] == "John Doe"
        assert result["match_score"] == 165


class TestPredictDemand:
    def test_history_shape_and_bounds(self, ai):
        history = ai.generate_historical_data("O+")

        assert len(history) == 30
        assert all(40 <= v <= 50 for v in history)

    def test_unknown_type_uses_default_baseline(self, ai):
        history = ai.generate_historical_data("??")
        assert all(20 <= v <= 30 for v in history)

    def test_flat_seasonal_factor(self, database):
        epoch = datetime.fromtimestamp(0)
        ai = LifeFlowAI(database, rng=MidpointRandom(), clock=lambda: epoch)

        forecast = ai.predict_demand("O+")

        assert forecast.current_demand == BASE_DEMAND["O+"]
        assert forecast.predicted_demand == BASE_DEMAND["O+"]
        assert forecast.trend == "decreasing"
        assert forecast.confidence == 90
        assert forecast.days_ahead == 7

    def test_seasonal_peak_increases_demand(self, database):
        peak = datetime.fromtimestamp(86400 * math.pi / 2)
        ai = LifeFlowAI(database, rng=MidpointRandom(), clock=lambda: peak)

        forecast = ai.predict_demand("O+", days_ahead=14)

        assert forecast.predicted_demand == 54   # 45 * 1.2
        assert forecast.trend == "increasing"
        assert forecast.days_ahead == 14

    def test_confidence_range(self, ai):
        for _ in range(20):
            forecast = ai.predict_demand("B-")
            assert 85 <= forecast.confidence < 95
            assert forecast.predicted_demand >= 0


class TestEligibility:
    def test_underage(self, ai):
        result = ai.check_eligibility(17, 70, "never", False)

        assert not result.eligible
        assert result.reasons == ["Age must be between 18 and 65"]
        assert result.confidence == 100

    def test_eligible(self, ai):
        result = ai.check_eligibility(25, 70, "never", False)

        assert result.eligible
        assert result.reasons == ["You are eligible to donate!"]
        assert result.confidence == 95

    def test_reasons_accumulate(self, ai):
        result = ai.check_eligibility(45, 48, "6months", True)

        assert not result.eligible
        assert result.reasons == [
            "Minimum weight requirement is 50 kg",
            "Must wait at least 3 months between donations",
            "Medical conditions may affect eligibility",
        ]

    @pytest.mark.parametrize("last_donation,eligible", [
        ("never", True),
        ("3months", True),
        ("6months", False),
        ("1year", False),
    ])
    def test_recency_buckets(self, ai, last_donation, eligible):
        assert ai.check_eligibility(30, 70, last_donation).eligible is eligible

    @pytest.mark.parametrize("age,eligible", [(18, True), (65, True), (66, False)])
    def test_age_bounds(self, ai, age, eligible):
        assert ai.check_eligibility(age, 70, "never").eligible is eligible

    def test_exact_minimum_weight(self, ai):
        assert ai.check_eligibility(30, 50, "never").eligible
