# agents/health_agent.py

import re
from langchain_core.tools import tool
from typing import Dict, List
from db.database import SessionLocal
from db.services import fetch_disease_data

PINCODE_PATTERN = re.compile(r"^\d{6}$")
MAX_CONTEXT_ALERTS = 5

SYSTEM_PROMPT = """
You are a public health awareness assistant for people in India.
Answer questions about diseases, symptoms, prevention and hygiene in clear, simple language.

- Never diagnose or prescribe medication; suggest seeing a doctor for anything serious.
- If the user describes emergency signs (chest pain, difficulty breathing, heavy bleeding, fainting),
  tell them to seek emergency care immediately.
- When outbreak alerts for the user's area are listed below, use them to give local, practical advice.
- Keep answers short and friendly.
"""

@tool
def fetch_area_alerts(pincode: str) -> List[Dict]:
    """
    Look up the most recent outbreak alerts for a 6-digit pincode, newest first.
    Returns an empty list for anything that is not a valid pincode.
    """
    pincode = (pincode or "").strip()
    if not PINCODE_PATTERN.match(pincode):
        return []

    session = SessionLocal()
    try:
        rows = fetch_disease_data(session, pincode=pincode, limit=MAX_CONTEXT_ALERTS)
        return [
            {
                "disease_name": row.disease_name,
                "cases": row.cases,
                "date": row.date.isoformat(),
                "advice": row.advice,
            }
            for row in rows
        ]
    finally:
        session.close()

def format_alerts(pincode: str, alerts: List[Dict]) -> str:
    if not alerts:
        return f"There are no active outbreak alerts for pincode {pincode}."
    lines = [
        f"- {a['disease_name']}: {a['cases']} cases reported on {a['date']}. Advice: {a['advice']}"
        for a in alerts
    ]
    return f"Active outbreak alerts for pincode {pincode}:\n" + "\n".join(lines)

def build_system_prompt(pincode: str = "") -> str:
    """System prompt for the chat proxy, with local alerts when a pincode is known."""
    prompt = SYSTEM_PROMPT.strip()
    pincode = (pincode or "").strip()
    if not PINCODE_PATTERN.match(pincode):
        return prompt

    alerts = fetch_area_alerts.invoke({"pincode": pincode})
    return prompt + "\n\n" + format_alerts(pincode, alerts)
