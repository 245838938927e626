import os

import requests
import streamlit as st

API_LOCAL = os.environ.get("CHAT_API_URL", "http://127.0.0.1:8000/chat")

st.set_page_config(page_title="Symptom Info Chat", page_icon="🏥", layout="centered")

st.title("🏥 Symptom Info Chat — Educational Demo")
st.info("This tool is for educational purposes only. It does not provide medical advice.")

user_input = st.text_area("What would you like to know about?", placeholder="e.g. flu")

if st.button("Get Information"):
    if not user_input.strip():
        st.warning("Please enter a condition or symptom first.")
    else:
        try:
            resp = requests.post(API_LOCAL, json={"userInput": user_input})
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            st.error(f"Could not reach the backend: {e}")
            st.stop()

        if data.get("error"):
            st.error(data["error"])
            st.markdown(data.get("summary", ""))
        else:
            st.subheader("📝 Summary")
            st.markdown(data.get("summary") or "_No summary available._")
            for title, key in [("🤒 Symptoms", "symptoms"), ("🏠 Remedies", "remedies"), ("⚠️ Precautions", "precautions")]:
                st.subheader(title)
                items = data.get(key) or []
                if not items:
                    st.caption("Nothing listed.")
                for item in items:
                    st.markdown(f"• {item}")
        st.caption("Educational only. Not medical advice.")
