"""
LifeFlow — Configuration
=========================
All constants, blood type tables, seeding ranges, eligibility thresholds,
storage keys and tunable parameters live here. Change these to adjust
behavior without touching any other module.
"""

import os

# ─── Paths ──────────────────────────────────────────────────────────────────

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.getenv("LIFEFLOW_DATA_DIR", os.path.join(PROJECT_ROOT, "data"))


# ─── Blood Types ────────────────────────────────────────────────────────────

BLOOD_TYPES = ["A+", "A-", "B+", "B-", "O+", "O-", "AB+", "AB-"]

# Who can DONATE TO whom (donor blood type -> recipient blood types)
COMPATIBILITY = {
    "O-":  ["O-", "O+", "A-", "A+", "B-", "B+", "AB-", "AB+"],  # Universal donor
    "O+":  ["O+", "A+", "B+", "AB+"],
    "A-":  ["A-", "A+", "AB-", "AB+"],
    "A+":  ["A+", "AB+"],
    "B-":  ["B-", "B+", "AB-", "AB+"],
    "B+":  ["B+", "AB+"],
    "AB-": ["AB-", "AB+"],
    "AB+": ["AB+"],
}


# ─── Storage ────────────────────────────────────────────────────────────────

STORAGE_KEYS = {
    "donors": "lifeflow_donors",
    "requests": "lifeflow_requests",
    "inventory": "lifeflow_inventory",
}

DONOR_ID_PREFIX = "DON"
REQUEST_ID_PREFIX = "REQ"


# ─── Inventory Seeding ──────────────────────────────────────────────────────
# Inclusive (low, high) unit ranges used when no inventory is stored yet.
# Scarcer types get smaller ranges.

INVENTORY_SEED_RANGES = {
    "A+":  (30, 79),
    "A-":  (10, 39),
    "B+":  (25, 64),
    "B-":  (8, 32),
    "O+":  (40, 99),
    "O-":  (5, 24),
    "AB+": (15, 44),
    "AB-": (3, 17),
}


# ─── Sample Donors ──────────────────────────────────────────────────────────
# Seeded on first run so the dashboard is never empty.

SAMPLE_DONORS = [
    {"name": "John Doe", "email": "john@example.com", "blood_type": "O+", "phone": "555-0101",
     "age": 28, "weight": 75, "city": "New York", "last_donation": "6months"},
    {"name": "Jane Smith", "email": "jane@example.com", "blood_type": "A+", "phone": "555-0102",
     "age": 34, "weight": 62, "city": "Los Angeles", "last_donation": "1year"},
    {"name": "Mike Johnson", "email": "mike@example.com", "blood_type": "B+", "phone": "555-0103",
     "age": 41, "weight": 80, "city": "Chicago", "last_donation": "3months"},
    {"name": "Sarah Williams", "email": "sarah@example.com", "blood_type": "AB+", "phone": "555-0104",
     "age": 25, "weight": 58, "city": "Houston", "last_donation": "never"},
    {"name": "David Brown", "email": "david@example.com", "blood_type": "O-", "phone": "555-0105",
     "age": 38, "weight": 85, "city": "Phoenix", "last_donation": "6months"},
]


# ─── Matching Weights ───────────────────────────────────────────────────────

MATCH_SCORE_WEIGHTS = {
    "base": 100,
    "same_city": 50,
    "never_donated": 20,
    "donated_last_year": 10,
    "active": 15,
}

MATCH_LIMIT = 5


# ─── Demand Forecasting ─────────────────────────────────────────────────────

# Average daily units requested, per blood type
BASE_DEMAND = {
    "O+": 45, "O-": 15,
    "A+": 35, "A-": 12,
    "B+": 30, "B-": 10,
    "AB+": 20, "AB-": 8,
}
DEFAULT_BASE_DEMAND = 25

HISTORY_DAYS = 30
MOVING_AVERAGE_WINDOW = 7
DEMAND_NOISE = 10            # total width of the uniform daily noise band
SEASONAL_AMPLITUDE = 0.2
CONFIDENCE_RANGE = (85, 95)


# ─── Eligibility Rules ──────────────────────────────────────────────────────

MIN_DONOR_AGE = 18
MAX_DONOR_AGE = 65
MIN_DONOR_WEIGHT_KG = 50
# Only these recency buckets pass the waiting-period rule.
ELIGIBLE_LAST_DONATION = ("3months", "never")

ELIGIBILITY_MESSAGES = {
    "age": "Age must be between 18 and 65",
    "weight": "Minimum weight requirement is 50 kg",
    "last_donation": "Must wait at least 3 months between donations",
    "conditions": "Medical conditions may affect eligibility",
    "eligible": "You are eligible to donate!",
}

ELIGIBLE_CONFIDENCE = 95
INELIGIBLE_CONFIDENCE = 100


# ─── Network ────────────────────────────────────────────────────────────────

CONNECTIVITY_CHECK_URL = os.getenv("LIFEFLOW_CHECK_URL", "https://www.google.com")
CONNECTIVITY_TIMEOUT = 5     # seconds
SYNC_DELAY = 1.0             # seconds


# ─── Dashboard ──────────────────────────────────────────────────────────────

RECENT_REGISTRATION_DAYS = 30

# Headline counters shown on the landing page
HEADLINE_DONOR_BASE = 500_000
HEADLINE_DONOR_MULTIPLIER = 100
HEADLINE_LIVES_BASE = 1_500_000
HEADLINE_LIVES_MULTIPLIER = 300

DEMO_PREDICTION_TYPES = ["O+", "A+", "B+"]
DEMO_ELIGIBILITY_CASES = [
    {"age": 25, "weight": 70, "last_donation": "never"},
    {"age": 17, "weight": 65, "last_donation": "never"},
    {"age": 45, "weight": 48, "last_donation": "6months"},
]


# ─── API Server ─────────────────────────────────────────────────────────────

API_HOST = "0.0.0.0"
API_PORT = int(os.getenv("LIFEFLOW_API_PORT", "8000"))
API_CORS_ORIGINS = ["*"]
