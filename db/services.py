# db/services.py

from typing import Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from db.models import AuthSession, DiseaseData, UserRole

ADMIN_ROLE = "admin"

def get_user_for_token(session: Session, token: Optional[str]) -> Optional[str]:
    """Return the user id owning a bearer token, or None when it is unknown."""
    if not token:
        return None
    row = session.query(AuthSession).filter(AuthSession.token == token).first()
    return row.user_id if row else None

def has_role(session: Session, user_id: str, role: str = ADMIN_ROLE) -> bool:
    row = session.query(UserRole).filter(
        UserRole.user_id == user_id,
        UserRole.role == role
    ).first()
    return row is not None

def insert_disease_data(session: Session, records: List[Dict]) -> List[DiseaseData]:
    """
    Insert all records in one transaction. Either every row is stored or
    none is; the storage error propagates after rollback. OverflowError
    covers integers too large for the database driver.
    """
    rows = [DiseaseData(**record) for record in records]
    try:
        session.add_all(rows)
        session.commit()
    except (SQLAlchemyError, OverflowError) as e:
        print(f"❌ Insert error: {e}")
        session.rollback()
        raise
    for row in rows:
        session.refresh(row)
    return rows

def fetch_disease_data(session: Session, pincode: Optional[str] = None, limit: Optional[int] = None) -> List[DiseaseData]:
    query = session.query(DiseaseData)
    if pincode:
        query = query.filter(DiseaseData.pincode == pincode)
    query = query.order_by(DiseaseData.date.desc(), DiseaseData.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()

def delete_disease_record(session: Session, record_id: int) -> bool:
    """Delete one outbreak row. Returns False when no such row exists."""
    row = session.get(DiseaseData, record_id)
    if row is None:
        return False
    try:
        session.delete(row)
        session.commit()
    except SQLAlchemyError as e:
        print(f"❌ Delete error: {e}")
        session.rollback()
        raise
    return True
