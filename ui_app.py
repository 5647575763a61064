import os

import pandas as pd
import requests
import streamlit as st

import pricing_config as cfg
from form_preview import breakdown_rows, preview_quote
from formatting import format_price, format_price_range
from pricing_engine import component_label


API_BASE = os.environ.get("API_BASE", "https://servdubai-quote-api.onrender.com")

PROJECT_TYPES = list(cfg.CONSTRUCTION_PROJECTS.keys()) + ["complete"]
TIMELINES = ["flexible", "1-month", "2-weeks", "urgent"]
CONTACT_TIMES = ["morning", "afternoon", "evening", "weekend"]
MARKETING_SOURCES = ["google", "instagram", "referral", "other"]

st.set_page_config(page_title="ServDubai Project Assessment", layout="centered")

st.markdown(
    """
    <style>
    h1 {
      font-family: Arial, sans-serif;
      font-weight: 800;
      margin-bottom: 0.25rem;
    }
    </style>
    """,
    unsafe_allow_html=True
)

st.title("Construction Project Assessment")

project_type = st.selectbox("Project Type", options=PROJECT_TYPES)
project_size = st.text_input("Project Size", placeholder="e.g. 120 sqm, 10 units")

components = cfg.CONSTRUCTION_PROJECTS.get(project_type, {}).get("components", {})
picked = {}
if components:
    st.caption("Requirements")
    for key in components:
        picked[key] = st.checkbox(component_label(key).capitalize(), value=False, key=f"req_{key}")

timeline = st.selectbox("Timeline", options=TIMELINES)
best_contact_time = st.selectbox("Best Contact Time", options=CONTACT_TIMES)
marketing_source = st.selectbox("How did you hear about us?", options=MARKETING_SOURCES)

st.divider()
st.subheader("Contact")
name = st.text_input("Name")
phone = st.text_input("Phone", placeholder="+971 5X XXX XXXX")
email = st.text_input("Email")
company = st.text_input("Company (optional)")
building_name = st.text_input("Building Name")
location_area = st.text_input("Area", placeholder="e.g. Dubai Marina")

form = {
    "projectType": project_type,
    "projectSize": project_size,
    "requirements": {project_type: picked},
    "timeline": timeline,
    "bestContactTime": best_contact_time,
    "company": company,
    "marketingSource": marketing_source,
}

st.divider()
st.subheader("Estimate")

preview = preview_quote(form)
if not preview.ok:
    st.info("Tell us a bit more and we'll price it on WhatsApp.")
    st.link_button("Chat on WhatsApp", preview.fallback_link)
else:
    calc = preview.calculation
    c1, c2 = st.columns(2)
    c1.metric("Base Price", format_price(calc.base_price))
    c2.metric("Total Price", format_price(calc.total_price))

    spread = cfg.QUOTE_RANGE_SPREAD
    st.caption(
        "Estimated range: "
        + format_price_range(calc.total_price * (1 - spread), calc.total_price * (1 + spread))
    )

    st.dataframe(pd.DataFrame(breakdown_rows(calc)), hide_index=True, use_container_width=True)

    if preview.installments:
        st.caption("Payment options")
        for plan in preview.installments:
            st.write(
                f"**{plan.description}**: {format_price(plan.advance_amount)} upfront, "
                f"{format_price(plan.remaining_amount)} remaining"
            )
            for line in plan.milestones or []:
                st.write(f"- {line}")

if st.button("Submit Assessment"):
    errors = []
    if len(name.strip()) < 2:
        errors.append("Name is required.")
    if not phone.strip():
        errors.append("Phone is required.")
    if "@" not in email:
        errors.append("A valid email is required.")
    if not project_size.strip():
        errors.append("Project size is required.")

    if errors:
        for msg in errors:
            st.error(msg)
        st.stop()

    payload = {
        "projectType": project_type,
        "projectSize": project_size,
        "timeline": timeline,
        "contactInfo": {"name": name, "phone": phone.replace(" ", "").replace("-", ""), "email": email, "company": company or None},
        "projectLocation": {"buildingName": building_name, "area": location_area},
        f"{project_type}Requirements": picked,
        "bestContactTime": best_contact_time,
        "marketingSource": marketing_source,
    }

    try:
        r = requests.post(f"{API_BASE}/assessment", json=payload, timeout=30)

        if r.status_code != 200:
            st.error(f"Assessment API error: {r.status_code}")
            st.code(r.text)
            st.stop()

        data = r.json()
        st.success(data["message"])
        st.write(f"Project ID: `{data['projectId']}`")
        for step in data.get("nextSteps", []):
            st.write(f"- {step}")
        st.link_button("Continue on WhatsApp", data["whatsappLink"])

    except requests.RequestException as e:
        st.error(f"Submission failed: {e}")
