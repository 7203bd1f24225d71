"""
LifeFlow - Streamlit Dashboard
Donor statistics, blood inventory, registration and the donation heuristics
"""

import streamlit as st
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from datetime import datetime
from typing import List

from lifeflow.app import LifeFlowApp
from lifeflow.config import BLOOD_TYPES
from lifeflow.models import Donor
from lifeflow.storage import JSONFileStorage


LAST_DONATION_OPTIONS = ["never", "3months", "6months", "1year"]


@st.cache_resource
def initialize_app() -> LifeFlowApp:
    """Initialize and cache the application context"""
    app = LifeFlowApp(storage=JSONFileStorage())
    app.network.check_connection()
    return app


def create_inventory_bar_chart(rows: List[dict]) -> go.Figure:
    """Bar chart of units per blood type, coloured by relative stock"""
    colors = []
    for row in rows:
        if row["percentage"] < 25:
            colors.append('red')
        elif row["percentage"] < 50:
            colors.append('orange')
        else:
            colors.append('green')

    fig = go.Figure(data=[
        go.Bar(
            x=[r["bloodType"] for r in rows],
            y=[r["units"] for r in rows],
            marker_color=colors,
            text=[f"{r['units']} units" for r in rows],
            textposition='outside'
        )
    ])

    fig.update_layout(
        title="Blood Inventory by Type",
        xaxis_title="Blood Type",
        yaxis_title="Units",
        height=400
    )

    return fig


def create_blood_type_pie(donors: List[Donor]) -> go.Figure:
    """Share of registered donors per blood type"""
    counts = {bt: 0 for bt in BLOOD_TYPES}
    for donor in donors:
        counts[donor.blood_type] = counts.get(donor.blood_type, 0) + 1

    df = pd.DataFrame(
        [{"Blood Type": bt, "Donors": n} for bt, n in counts.items() if n > 0]
    )
    fig = px.pie(df, names="Blood Type", values="Donors", title="Donors by Blood Type")
    fig.update_layout(height=400)
    return fig


def donors_dataframe(donors: List[Donor]) -> pd.DataFrame:
    return pd.DataFrame([
        {
            "ID": d.id,
            "Name": d.name,
            "Blood Type": d.blood_type,
            "Age": d.age,
            "City": d.city,
            "Last Donation": d.last_donation,
            "Status": d.status,
            "Registered": d.registration_date[:10],
        }
        for d in donors
    ])


def render_registration_form(app: LifeFlowApp):
    """Sidebar donor registration form"""
    with st.form("donor-form", clear_on_submit=True):
        name = st.text_input("Full name")
        email = st.text_input("Email")
        blood_type = st.selectbox("Blood type", BLOOD_TYPES)
        phone = st.text_input("Phone")
        age = st.number_input("Age", min_value=0, max_value=120, value=25)
        weight = st.number_input("Weight (kg)", min_value=0, max_value=300, value=70)
        city = st.text_input("City")
        last_donation = st.selectbox("Last donation", LAST_DONATION_OPTIONS)
        submitted = st.form_submit_button("Register", type="primary")

    if submitted:
        result = app.register_donor({
            "name": name,
            "email": email,
            "blood_type": blood_type,
            "phone": phone,
            "age": int(age),
            "weight": int(weight),
            "city": city,
            "last_donation": last_donation,
        })
        if result.success:
            st.success(f"✓ {result.message}")
        else:
            st.error(f"✗ {result.message}")


def main():
    st.set_page_config(
        page_title="LifeFlow",
        page_icon="🩸",
        layout="wide"
    )

    app = initialize_app()

    st.title("🩸 LifeFlow Blood Donation System")
    st.markdown("*Every donation can save up to three lives*")

    # Sidebar
    with st.sidebar:
        st.header(app.network.status_label())

        if st.button("🔄 Check Connection"):
            app.network.check_connection()
            st.rerun()

        st.markdown("---")

        st.header("📝 Become a Donor")
        render_registration_form(app)

    tab1, tab2, tab3, tab4 = st.tabs(["📈 Dashboard", "🏥 Inventory", "👥 Donors", "🤖 AI Tools"])

    donors = app.database.read_donors()

    with tab1:
        st.header("Donor Overview")

        counters = app.get_headline_counters()
        col1, col2 = st.columns(2)
        col1.metric("Donors Worldwide", f"{counters['totalDonors']:,}")
        col2.metric("Lives Saved", f"{counters['livesSaved']:,}")

        dashboard = app.get_dashboard()
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Total Registered", dashboard["totalDonors"])
        col2.metric("This Month", dashboard["thisMonth"])
        col3.metric("Active Donors", dashboard["activeDonors"])
        col4.metric("Most Common Type", dashboard["mostCommonBloodType"] or "N/A")

        col1, col2, col3 = st.columns(3)
        col1.metric("Average Age", dashboard["averageAge"])
        col2.metric("Median Age", dashboard["medianAge"])
        col3.metric("Age Std Dev", dashboard["ageStdDev"])

        if donors:
            st.plotly_chart(create_blood_type_pie(donors), use_container_width=True)

    with tab2:
        st.header("Blood Inventory")
        rows = app.get_inventory_display()
        st.plotly_chart(create_inventory_bar_chart(rows), use_container_width=True)

        with st.expander("Update stock"):
            blood_type = st.selectbox("Blood type", BLOOD_TYPES, key="inventory-type")
            units = st.number_input("Units", min_value=0, value=app.database.get_inventory()[blood_type])
            if st.button("Save"):
                app.database.update_inventory(blood_type, int(units))
                st.rerun()

    with tab3:
        st.header("Registered Donors")
        if donors:
            st.dataframe(donors_dataframe(donors), use_container_width=True)

            to_remove = st.selectbox(
                "Remove donor",
                options=[d.id for d in donors],
                format_func=lambda donor_id: next(d.name for d in donors if d.id == donor_id)
            )
            if st.button("🗑️ Delete"):
                app.database.delete_donor(to_remove)
                st.rerun()
        else:
            st.info("No donors registered yet.")

    with tab4:
        st.header("🤖 Smart Tools")

        st.subheader("Donor Matching")
        col1, col2, col3 = st.columns(3)
        recipient_type = col1.selectbox("Recipient blood type", BLOOD_TYPES, index=BLOOD_TYPES.index("O+"))
        recipient_city = col2.text_input("Recipient city", "New York")
        urgency = col3.selectbox("Urgency", ["urgent", "normal", "low"])

        matches = app.ai.smart_matching(recipient_type, recipient_city, urgency)
        if matches:
            for i, m in enumerate(matches, 1):
                st.write(f"{i}. **{m.donor.name}** ({m.donor.blood_type}, {m.donor.city}) - Score: {m.match_score}")
        else:
            st.warning("No compatible donors found.")

        st.markdown("---")

        st.subheader("Demand Forecast")
        forecast_type = st.selectbox("Blood type", BLOOD_TYPES, key="forecast-type")
        if app.network.is_connected:
            forecast = app.ai.predict_demand(forecast_type, 7)
            col1, col2, col3 = st.columns(3)
            col1.metric("Current", f"{forecast.current_demand} units")
            col2.metric("Predicted (7 days)", f"{forecast.predicted_demand} units",
                        delta=forecast.predicted_demand - forecast.current_demand)
            col3.metric("Confidence", f"{forecast.confidence:.1f}%")
        else:
            st.info("Forecasting is available when online.")

        st.markdown("---")

        st.subheader("Eligibility Check")
        col1, col2, col3, col4 = st.columns(4)
        age = col1.number_input("Age", min_value=0, max_value=120, value=25, key="elig-age")
        weight = col2.number_input("Weight (kg)", min_value=0, max_value=300, value=70, key="elig-weight")
        last = col3.selectbox("Last donation", LAST_DONATION_OPTIONS, key="elig-last")
        conditions = col4.checkbox("Medical conditions")

        result = app.ai.check_eligibility(int(age), int(weight), last, conditions)
        if result.eligible:
            st.success("✓ Eligible")
        else:
            st.error("✗ Not Eligible")
        for reason in result.reasons:
            st.write(f"• {reason}")

    # Footer
    st.markdown("---")
    st.caption(f"Last updated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')} | Data stored locally")


if __name__ == "__main__":
    main()
