# functions/upload_disease_data.py

import math
import re
from datetime import date
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from db.services import insert_disease_data
from functions.auth import require_admin
from functions.errors import InvalidPayloadError, PersistenceError

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

def coerce_cases(value: Any) -> int:
    """
    Integer coercion for the cases column. Reads the leading integer of a
    string ("12 reported" -> 12); anything without one becomes 0, and so
    does a negative count.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return 0
        number = int(value)
    else:
        match = _LEADING_INT.match(str(value))
        if not match:
            return 0
        number = int(match.group(1))
    return max(number, 0)

def _text(value: Any) -> str:
    return str(value or "").strip()

def normalize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Re-normalise one uploaded row. Client-side parsing is never trusted:
    every field is coerced again here.
    """
    raw_date = _text(row.get("date"))
    try:
        parsed_date = date.fromisoformat(raw_date)
    except ValueError:
        raise PersistenceError(f'invalid input syntax for type date: "{raw_date}"')

    return {
        "pincode": _text(row.get("pincode")),
        "disease_name": _text(row.get("disease_name")),
        "cases": coerce_cases(row.get("cases")),
        "date": parsed_date,
        "advice": _text(row.get("advice")),
    }

def _extract_rows(payload: Any) -> List[Dict[str, Any]]:
    rows = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(rows, list) or len(rows) == 0:
        raise InvalidPayloadError("Invalid CSV data")
    if not all(isinstance(row, dict) for row in rows):
        raise InvalidPayloadError("Invalid CSV data")
    return rows

def upload_disease_data(session: Session, user_id: Optional[str], payload: Any) -> Dict[str, Any]:
    """
    Privileged bulk ingestion of outbreak rows.

    Checks run in a fixed order, each with its own error: no session (401),
    caller without the admin role record (403), empty or non-list body (400).
    The batch is stored with a single insert; on any storage failure nothing
    is kept and one PersistenceError carries the underlying message.
    """
    require_admin(session, user_id)

    rows = _extract_rows(payload)
    validated = [normalize_row(row) for row in rows]

    print("######################################################")
    print(f"📥 INSERTING {len(validated)} OUTBREAK ROWS FOR ADMIN {user_id}")
    print("######################################################")

    try:
        inserted = insert_disease_data(session, validated)
    except (SQLAlchemyError, OverflowError) as e:
        raise PersistenceError(str(getattr(e, "orig", None) or e))

    return {"success": True, "count": len(inserted)}
