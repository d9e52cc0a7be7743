import os

import requests
import streamlit as st

API_URL = os.environ.get("BANTUHEALTH_API_URL", "http://127.0.0.1:3000/api/analyze-symptoms")
API_KEY = os.environ.get("API_SECRET_KEY", "")

SECTION_TITLES = [
    ("assessment", "🔎 Initial Assessment"),
    ("recommendations", "🩺 Recommendations"),
    ("urgency", "⏱️ Urgency Level"),
    ("disclaimer", "⚠️ Disclaimer"),
]


def read_api_response(resp: requests.Response):
    """
    Returns (data, error). `error` is None only for a 200 JSON answer; a body
    that is not JSON (e.g. a proxy error page) yields data=None.
    """
    try:
        data = resp.json()
    except ValueError:
        return None, f"Unexpected response from the API (HTTP {resp.status_code})"
    if resp.status_code != 200:
        message = data.get("error") if isinstance(data, dict) else None
        return data, message or f"Request failed (HTTP {resp.status_code})"
    return data, None


def show_analysis(data: dict):
    if data["critical"]:
        st.error("🚨 The response mentions urgent-care language. If this is an emergency, seek care now.")
    structured = data.get("structured") or {}
    if any(structured.get(key) for key, _ in SECTION_TITLES):
        for key, title in SECTION_TITLES:
            if structured.get(key):
                st.subheader(title)
                st.markdown(structured[key])
    else:
        st.subheader("🔎 Results")
        st.markdown(data["analysis"])
    st.caption(f"Generated at {data['timestamp']}")


def main():
    st.set_page_config(page_title="BantuHealth AI", page_icon="🏥", layout="centered")

    st.title("🏥 BantuHealth AI — Symptom Analysis")
    st.info("This tool is for educational purposes only. It does not provide medical advice.")

    symptoms_text = st.text_area("Symptoms (one per line):", placeholder="fever\ncough")
    additional_info = st.text_area("Additional information:", placeholder="e.g. 3 days, no travel history")

    if not st.button("Analyze Symptoms"):
        return
    symptoms = [line.strip() for line in symptoms_text.splitlines() if line.strip()]
    if not symptoms:
        st.warning("Please enter at least one symptom.")
        return

    headers = {"x-api-key": API_KEY} if API_KEY else {}
    try:
        resp = requests.post(
            API_URL,
            json={"symptoms": symptoms, "additionalInfo": additional_info},
            headers=headers,
            timeout=60,
        )
    except requests.exceptions.RequestException as e:
        st.error(f"Could not reach the API: {e}")
        return

    data, error = read_api_response(resp)
    if error:
        st.error(error)
        if isinstance(data, dict) and data.get("details"):
            st.caption(data["details"])
        return
    show_analysis(data)


# `streamlit run` executes this file as __main__
if __name__ == "__main__":
    main()
