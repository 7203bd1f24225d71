#!/usr/bin/env python3
"""
LifeFlow - Main Entry Point

Usage:
    python main.py demo                     Run the full console demo
    python main.py match TYPE CITY          Rank donors for a recipient
    python main.py predict TYPE [DAYS]      Forecast demand for a blood type
    python main.py eligibility AGE WEIGHT LAST_DONATION
                                            Check donor eligibility
    python main.py serve                    Start the REST API
    python main.py dashboard                Launch the Streamlit dashboard
"""

import sys

from lifeflow.app import LifeFlowApp
from lifeflow.storage import JSONFileStorage


def build_app() -> LifeFlowApp:
    return LifeFlowApp(storage=JSONFileStorage())


def run_demo():
    """Walk through statistics, inventory and the three heuristics"""
    print("\n" + "=" * 70)
    print("🩸 LIFEFLOW BLOOD DONATION SYSTEM - DEMO")
    print("=" * 70)

    app = build_app()

    print("\n[1/4] 📊 Donor Statistics...")
    dashboard = app.get_dashboard()
    print(f"  ✓ {dashboard['totalDonors']} registered donors "
          f"({dashboard['activeDonors']} active, {dashboard['thisMonth']} this month)")
    print(f"  ✓ Most common blood type: {dashboard['mostCommonBloodType'] or 'N/A'}")
    print(f"  ✓ Age: mean {dashboard['averageAge']}, median {dashboard['medianAge']}, "
          f"std dev {dashboard['ageStdDev']}")

    print("\n[2/4] 🏥 Blood Inventory...")
    for row in app.get_inventory_display():
        bar = "█" * int(row["percentage"] / 5)
        print(f"  {row['bloodType']:>4} {bar:<20} {row['units']} units")

    print("\n[3/4] 🤝 Smart Matching (O+ recipient, New York)...")
    for i, match in enumerate(app.demo_matching(), 1):
        print(f"  {i}. {match.donor.name} ({match.donor.blood_type}) - Score: {match.match_score}")

    print("\n[4/4] 📈 Demand Forecast & Eligibility...")
    forecast = app.demo_prediction()
    print(f"  {forecast.blood_type}: current {forecast.current_demand} units, "
          f"predicted {forecast.predicted_demand} units "
          f"({forecast.trend}, {forecast.confidence:.1f}% confidence)")

    case, result = app.demo_eligibility()
    status = "✓ Eligible" if result.eligible else "✗ Not Eligible"
    print(f"  Age {case['age']}, {case['weight']}kg, last donation {case['last_donation']}: {status}")
    for reason in result.reasons:
        print(f"    • {reason}")

    print("\n" + "=" * 70)
    print("✅ Demo complete!")
    print("=" * 70)


def run_match(blood_type: str, city: str):
    app = build_app()
    matches = app.ai.smart_matching(blood_type, city, "normal")

    if not matches:
        print(f"No compatible donors for {blood_type}.")
        return

    print(f"\n🤝 Top matches for {blood_type} in {city}:")
    for i, match in enumerate(matches, 1):
        print(f"  {i}. {match.donor.name} ({match.donor.blood_type}, {match.donor.city}) "
              f"- Score: {match.match_score}")


def run_predict(blood_type: str, days: int):
    app = build_app()
    forecast = app.ai.predict_demand(blood_type, days)
    icon = "📈" if forecast.trend == "increasing" else "📉"

    print(f"\n{icon} {forecast.blood_type} Demand Forecast:")
    print(f"  Current: {forecast.current_demand} units")
    print(f"  Predicted ({days} days): {forecast.predicted_demand} units")
    print(f"  Trend: {forecast.trend} ({forecast.confidence:.1f}% confidence)")


def run_eligibility(age: int, weight: float, last_donation: str):
    app = build_app()
    result = app.ai.check_eligibility(age, weight, last_donation)

    print(f"\n{'✓ Eligible' if result.eligible else '✗ Not Eligible'}")
    for reason in result.reasons:
        print(f"  • {reason}")


def run_dashboard():
    """Launch the Streamlit dashboard"""
    import subprocess
    print("\n🚀 Launching LifeFlow Dashboard...")
    print("   Open http://localhost:8501 in your browser")
    print("   Press Ctrl+C to stop\n")
    subprocess.run(["streamlit", "run", "dashboard.py"])


def print_usage():
    """Print usage information"""
    print(__doc__)


def main():
    if len(sys.argv) < 2:
        print_usage()
        return

    command = sys.argv[1].lower()
    args = sys.argv[2:]

    try:
        if command == "demo":
            run_demo()
        elif command == "match" and len(args) >= 2:
            run_match(args[0], " ".join(args[1:]))
        elif command == "predict" and args:
            run_predict(args[0], int(args[1]) if len(args) > 1 else 7)
        elif command == "eligibility" and len(args) >= 3:
            run_eligibility(int(args[0]), float(args[1]), args[2])
        elif command == "serve":
            import run
            sys.argv = [sys.argv[0]]
            run.main()
        elif command == "dashboard":
            run_dashboard()
        else:
            print(f"Unknown command or missing arguments: {command}")
            print_usage()
    except ValueError as e:
        print(f"✗ {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
