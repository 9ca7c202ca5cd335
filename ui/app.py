# ui/app.py

import streamlit as st
import requests
import os
import html
from dotenv import load_dotenv
from ui.api_client import (
    ApiError,
    ChatTransportError,
    PincodeError,
    RateLimitedError,
    ServiceUnavailableError,
    delete_record,
    fetch_alerts,
    stream_chat,
    upload_csv,
    validate_pincode,
)
from ui.csv_parser import parse_csv_text
from ui.transcript import Transcript, TurnInProgressError

# Load environment variables
load_dotenv()
ADMIN_TOKEN = os.getenv("HEALTHALERT_TOKEN", "")
TABLE_COLUMNS = ["id", "pincode", "disease_name", "cases", "date", "advice"]

DISCLAIMER = (
    "**Disclaimer:** The responses provided are based on available data. "
    "We are not 100% accurate. For accurate medical advice, please contact a doctor."
)

st.set_page_config(page_title="HealthAlert", layout="wide")

# --- CSS Styling ---
st.markdown("""
    <style>
        .message-wrapper { display: flex; margin: 8px 0; width: 100%; }
        .message-wrapper.user { justify-content: flex-end; }
        .message-wrapper.assistant { justify-content: flex-start; }
        .chat-bubble {
            padding: 12px 18px;
            border-radius: 18px;
            max-width: 80%;
            white-space: pre-wrap;
            word-wrap: break-word;
            color: black;
        }
        .user .chat-bubble { background-color: #DCEBFA; }
        .assistant .chat-bubble { background-color: #F1F0F0; }
    </style>
""", unsafe_allow_html=True)

# --- Initialize Session State ---
if "transcript" not in st.session_state:
    st.session_state.transcript = Transcript()
if "chat_pincode" not in st.session_state:
    st.session_state.chat_pincode = ""
if "admin_token" not in st.session_state:
    st.session_state.admin_token = ADMIN_TOKEN
if "upload_counter" not in st.session_state:
    st.session_state.upload_counter = 0

def bubble(role: str, content: str) -> str:
    role_class = "user" if role == "user" else "assistant"
    # Escape HTML in content to prevent XSS
    return f'<div class="message-wrapper {role_class}"><div class="chat-bubble">{html.escape(content)}</div></div>'

def alert_card(alert: dict):
    with st.container(border=True):
        st.markdown(f"**🦠 {alert['disease_name']}** · 📍 {alert['pincode']}")
        st.markdown(f"**{alert['cases']}** cases reported on {alert['date']}")
        st.caption(f"Advice: {alert['advice']}")

# ==========================================
# SIDEBAR: NAVIGATION
# ==========================================
with st.sidebar:
    st.header("🩺 HealthAlert")
    page = st.radio("Go to:", ["🏠 Alerts", "💬 Chatbot", "🛠️ Admin"], key="nav_selection")

# ==========================================
# PAGE: ALERTS BY PINCODE
# ==========================================
if page == "🏠 Alerts":
    st.title("AI-Driven Public Health Awareness")
    st.markdown("Stay informed about regional disease outbreaks and get health advisories for your area.")

    col1, col2 = st.columns([0.7, 0.3])
    with col1:
        pincode = st.text_input("Enter your 6-digit pincode", max_chars=6)
    with col2:
        st.write("")
        search = st.button("🔎 Check Alerts", width="stretch")

    if search:
        try:
            pincode = validate_pincode(pincode)
            with st.spinner("Searching..."):
                alerts = fetch_alerts(pincode=pincode)
            if alerts:
                st.success(f"Found {len(alerts)} alert(s) for pincode {pincode}")
                for alert in alerts:
                    alert_card(alert)
                st.warning(DISCLAIMER)
            else:
                st.info("No disease outbreaks reported in your area. Stay safe!")
        except PincodeError as e:
            st.error(str(e))
        except (ApiError, requests.exceptions.RequestException) as e:
            print("❌ Error searching by pincode:", e)
            st.error("Failed to fetch alerts")

    st.divider()
    st.subheader("Recent Alerts")
    try:
        recent = fetch_alerts(limit=6)
        if recent:
            cols = st.columns(3)
            for idx, alert in enumerate(recent):
                with cols[idx % 3]:
                    alert_card(alert)
        else:
            st.info("No alerts have been published yet.")
    except (ApiError, requests.exceptions.RequestException) as e:
        print("❌ Error fetching alerts:", e)

# ==========================================
# PAGE: CHATBOT
# ==========================================
elif page == "💬 Chatbot":
    transcript: Transcript = st.session_state.transcript
    chat_col, side_col = st.columns([0.65, 0.35])

    with side_col:
        st.subheader("Your Area")
        st.session_state.chat_pincode = st.text_input(
            "Enter your pincode", value=st.session_state.chat_pincode, max_chars=6
        )
        area_pin = st.session_state.chat_pincode.strip()
        if area_pin:
            try:
                area_alerts = fetch_alerts(pincode=validate_pincode(area_pin), limit=5)
            except PincodeError:
                area_alerts = []
            except (ApiError, requests.exceptions.RequestException) as e:
                print("❌ Error fetching alerts:", e)
                area_alerts = []
            if area_alerts:
                st.markdown("#### 🚨 Active Health Alerts")
                for alert in area_alerts:
                    alert_card(alert)
            else:
                st.info("No active health alerts in your area.")

    with chat_col:
        st.title("Health Chatbot")
        st.caption("Ask questions about health, diseases, and prevention")

        if st.session_state.get("chat_error"):
            st.error(st.session_state.pop("chat_error"))

        if st.button("🗑️ New Chat", disabled=transcript.streaming):
            st.session_state.transcript = Transcript()
            st.rerun()

        if transcript.messages:
            for msg in transcript.messages:
                st.markdown(bubble(msg.role, msg.content), unsafe_allow_html=True)
        else:
            st.info("👋 Start a conversation by asking a health-related question.")

        live = st.container()

        with st.form("chat_input", clear_on_submit=True):
            user_input = st.text_input("Type your message", placeholder="Ask about health concerns...")
            submitted = st.form_submit_button("Send", disabled=transcript.streaming)

        st.warning(DISCLAIMER)

    if submitted and user_input.strip():
        try:
            history = transcript.start_turn(user_input)
        except TurnInProgressError as e:
            st.toast(str(e))
        else:
            with live:
                st.markdown(bubble("user", history[-1].content), unsafe_allow_html=True)
                reply_slot = st.empty()

            def on_delta(chunk: str):
                transcript.append_delta(chunk)
                reply_slot.markdown(bubble("assistant", transcript.messages[-1].content), unsafe_allow_html=True)

            try:
                with chat_col, st.spinner("Thinking..."):
                    stream_chat(history, st.session_state.chat_pincode.strip(), on_delta, transcript.finish_turn)
            except RateLimitedError:
                st.session_state.chat_error = "Rate limit exceeded. Please try again in a few moments."
            except ServiceUnavailableError:
                st.session_state.chat_error = "Service unavailable. AI service is temporarily unavailable."
            except (ChatTransportError, requests.exceptions.RequestException) as e:
                print("❌ Chat stream failed:", e)
                st.session_state.chat_error = "Failed to get response from chatbot."
            finally:
                transcript.abort_turn()
            st.rerun()

# ==========================================
# PAGE: ADMIN
# ==========================================
elif page == "🛠️ Admin":
    st.title("Admin Panel - Disease Data Management")
    st.caption("Upload CSV files and manage regional disease data")

    st.session_state.admin_token = st.text_input(
        "Admin access token", value=st.session_state.admin_token, type="password"
    )
    token = st.session_state.admin_token.strip() or None

    if st.session_state.get("admin_notice"):
        st.success(st.session_state.pop("admin_notice"))

    uploaded = st.file_uploader(
        "CSV format: pincode, disease_name, cases, date, advice",
        type="csv",
        key=f"file_uploader_{st.session_state.upload_counter}",
    )

    if uploaded is not None:
        if st.button(f"🚀 Upload {uploaded.name}", type="primary"):
            try:
                rows = parse_csv_text(uploaded.getvalue().decode("utf-8"))
                with st.spinner("Uploading..."):
                    count = upload_csv(rows, token)
                st.success(f"Upload successful. {count} records uploaded successfully.")
                st.session_state.upload_counter += 1
            except ApiError as e:
                st.error(f"Upload failed: {e.message}")
            except (UnicodeDecodeError, requests.exceptions.RequestException) as e:
                st.error(f"Upload failed: {e}")

    st.divider()
    header_col, refresh_col = st.columns([0.8, 0.2])
    with header_col:
        st.subheader("📋 Outbreak Records")
    with refresh_col:
        st.button("🔄 Refresh")

    # Always re-read the whole table
    try:
        records = fetch_alerts()
    except (ApiError, requests.exceptions.RequestException) as e:
        st.error(f"Error fetching data: {e}")
        records = []

    if not records:
        st.info("No data available. Upload a CSV file to get started.")
    else:
        st.dataframe(
            [{k: r[k] for k in TABLE_COLUMNS} for r in records],
            width="stretch",
            hide_index=True,
        )
        to_delete = st.selectbox(
            "Select a record to delete",
            records,
            format_func=lambda r: f"#{r['id']} · {r['pincode']} · {r['disease_name']} · {r['date']}",
        )
        if st.button("🗑️ Delete record"):
            try:
                delete_record(to_delete["id"], token)
                st.session_state.admin_notice = "Record deleted successfully."
                st.rerun()
            except ApiError as e:
                st.error(f"Delete failed: {e.message}")
            except requests.exceptions.RequestException as e:
                st.error(f"Delete failed: {e}")
