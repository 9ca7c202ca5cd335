# functions/disease_data.py

from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from db.models import DiseaseData
from db.services import delete_disease_record, fetch_disease_data
from functions.auth import require_admin
from functions.errors import NotFoundError, PersistenceError

def list_records(session: Session, pincode: Optional[str] = None, limit: Optional[int] = None) -> List[DiseaseData]:
    pincode = pincode.strip() if pincode else None
    return fetch_disease_data(session, pincode=pincode, limit=limit)

def delete_record(session: Session, user_id: Optional[str], record_id: int) -> dict:
    require_admin(session, user_id)
    try:
        deleted = delete_disease_record(session, record_id)
    except SQLAlchemyError as e:
        raise PersistenceError(str(getattr(e, "orig", None) or e))
    if not deleted:
        raise NotFoundError(f"Record {record_id} not found")
    return {"success": True}
